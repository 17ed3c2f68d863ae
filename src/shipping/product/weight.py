"""Product weights — aggregate, command and handler.

The courier bills by weight; the booking engine sums product weights over
an order's lines. Weights are kept per product in the unit configured by
``LCS_PRODUCT_WEIGHT_UNIT``.
"""

from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from shipping.domain import shipping


@shipping.aggregate
class ProductWeight:
    product_id = Identifier(identifier=True, required=True)
    title = String(max_length=500)
    weight = Float(required=True, min_value=0.0)
    updated_at = DateTime()


@shipping.command(part_of=ProductWeight)
class RecordProductWeight:
    """Create or update the shipping weight of a product."""

    product_id = Identifier(required=True)
    weight = Float(required=True, min_value=0.0)
    title = String(max_length=500)


@shipping.command_handler(part_of=ProductWeight)
class ProductWeightHandler:
    @handle(RecordProductWeight)
    def record_product_weight(self, command):
        repo = current_domain.repository_for(ProductWeight)
        now = datetime.now(UTC)
        try:
            product = repo.get(command.product_id)
            product.weight = command.weight
            if command.title:
                product.title = command.title
            product.updated_at = now
        except ObjectNotFoundError:
            product = ProductWeight(
                product_id=command.product_id,
                title=command.title,
                weight=command.weight,
                updated_at=now,
            )
        repo.add(product)
        return str(product.product_id)


def weights_for(product_ids) -> dict[str, float]:
    """Look up current weights for the given products; unknown ids are skipped."""
    repo = current_domain.repository_for(ProductWeight)
    weights = {}
    for product_id in {str(pid) for pid in product_ids if pid}:
        try:
            weights[product_id] = repo.get(product_id).weight or 0.0
        except ObjectNotFoundError:
            continue
    return weights
