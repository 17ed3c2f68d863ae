"""Manual city resolution — command and handler.

Operators pick the courier city for orders the resolver could not match
with confidence. The pick is final for all later booking attempts.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shipping.domain import shipping
from shipping.order.order import Order


@shipping.command(part_of="Order")
class ResolveOrderCity:
    """Record an operator-chosen courier city for an order."""

    order_id = Identifier(required=True)
    city_id = String(required=True, max_length=50)
    city_name = String(max_length=200)


@shipping.command_handler(part_of=Order)
class ResolveOrderCityHandler:
    @handle(ResolveOrderCity)
    def resolve_order_city(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.resolve_city_manually(city_id=command.city_id, city_name=command.city_name)
        repo.add(order)
