"""Order aggregate (CQRS) — the shipping-side view of a storefront order.

Holds what the courier needs to book a consignment: the consignee's
address, the cart lines, a short human-readable reference, the destination
city as resolved against the courier's directory, and the courier's
booking references once the order has been pushed.

Booking lifecycle:
    unbooked → booked (pushed) → [re-booked only with an explicit override]

City resolution:
    none → exact | alias | fuzzy → manual
    manual is final for automated resolution; only another manual
    correction may replace it.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from shipping.domain import shipping
from shipping.order.events import (
    CityResolved,
    CourierBookingRecorded,
    OrderRegistered,
    ShortIdAssigned,
)

COURIER_LCS = "lcs"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class ResolutionMethod(Enum):
    EXACT = "exact"
    ALIAS = "alias"
    FUZZY = "fuzzy"
    MANUAL = "manual"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@shipping.value_object(part_of="Order")
class ShippingAddress:
    """Where the consignment goes and who receives it."""

    full_name = String(max_length=200)
    city = String(max_length=200)
    street_address = String(max_length=500)
    apartment = String(max_length=200)
    mobile = String(max_length=30)
    email = String(max_length=254)
    additional_instructions = String(max_length=1000)


@shipping.value_object(part_of="Order")
class CityResolution:
    """The courier city chosen for the order's free-text destination."""

    city_input = String(max_length=200)
    city_id = String(max_length=50)
    city_name = String(max_length=200)
    method = String(max_length=20, choices=ResolutionMethod)
    confidence = Float(min_value=0.0, max_value=1.0)
    resolved_at = DateTime()


@shipping.value_object(part_of="Order")
class ShippingProviderRecord:
    """Courier booking references, written only by a successful booking."""

    provider = String(max_length=50)
    pushed = Boolean(default=False)
    tracking_number = String(max_length=100)
    consignment_no = String(max_length=100)
    label_url = String(max_length=1000)
    extra = Text()  # JSON: full provider response
    pushed_at = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@shipping.entity(part_of="Order")
class OrderLine:
    """A single cart line as it was ordered."""

    product_id = Identifier()
    title = String(max_length=500)
    count = Integer(required=True, min_value=0)
    price = Float(default=0.0)
    weight = Float()  # per unit, in the configured product weight unit
    selected_variants = Text()  # JSON list of {"name", "value"}

    @property
    def variant_values(self) -> list[str]:
        variants = json.loads(self.selected_variants) if self.selected_variants else []
        values = []
        for variant in variants:
            value = variant.get("value") if isinstance(variant, dict) else variant
            if value is not None and str(value).strip():
                values.append(str(value).strip())
        return values


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@shipping.aggregate
class Order:
    order_ref = String(max_length=100)  # identifier in the storefront
    short_id = Integer(min_value=1)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    total_price = Float(required=True, min_value=0.0)
    delivery_charges = Float(default=0.0)
    shipping_address = ValueObject(ShippingAddress)
    items = HasMany(OrderLine)
    city_resolution = ValueObject(CityResolution)
    shipping_provider = ValueObject(ShippingProviderRecord)
    ordered_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def manual_resolution_is_fully_trusted(self):
        resolution = self.city_resolution
        if resolution and resolution.method == ResolutionMethod.MANUAL.value and resolution.confidence != 1.0:
            raise ValidationError({"city_resolution": ["Manual city resolution must carry confidence 1.0"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        total_price: float,
        shipping_address: dict,
        items_data: list[dict],
        order_ref: str | None = None,
        delivery_charges: float = 0.0,
        ordered_at: datetime | None = None,
    ):
        """Register a storefront order with the shipping context."""
        now = datetime.now(UTC)
        order = cls(
            order_ref=order_ref,
            total_price=total_price,
            delivery_charges=delivery_charges,
            shipping_address=ShippingAddress(**shipping_address),
            status=OrderStatus.PENDING.value,
            ordered_at=ordered_at or now,
            updated_at=now,
        )
        for item_data in items_data:
            line = dict(item_data)
            variants = line.pop("selected_variants", None)
            if variants is not None and not isinstance(variants, str):
                variants = json.dumps(variants)
            order.add_items(OrderLine(selected_variants=variants, **line))

        order.raise_(
            OrderRegistered(
                order_id=str(order.id),
                order_ref=order_ref or "",
                city=order.shipping_address.city or "",
                item_count=len(items_data),
                total_price=total_price,
                registered_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_booked(self) -> bool:
        """True once the courier has accepted a booking for this order."""
        record = self.shipping_provider
        if record is None:
            return False
        return bool(record.pushed or record.consignment_no or record.tracking_number)

    @property
    def has_manual_resolution(self) -> bool:
        resolution = self.city_resolution
        return bool(resolution and resolution.method == ResolutionMethod.MANUAL.value and resolution.city_id)

    @property
    def reference(self) -> str:
        """Human-friendly reference printed on courier paperwork."""
        if self.short_id:
            return str(self.short_id)
        return self.order_ref or str(self.id)

    def provider_response(self) -> dict:
        if self.shipping_provider is None or not self.shipping_provider.extra:
            return {}
        return json.loads(self.shipping_provider.extra)

    # -------------------------------------------------------------------
    # Short reference
    # -------------------------------------------------------------------
    def assign_short_id(self, short_id: int) -> None:
        """Assign the sequential reference. It never changes once set."""
        if self.short_id:
            raise ValidationError({"short_id": [f"Order already has short id {self.short_id}"]})

        now = datetime.now(UTC)
        self.short_id = short_id
        self.updated_at = now
        self.raise_(
            ShortIdAssigned(
                order_id=str(self.id),
                short_id=short_id,
                assigned_at=now,
            )
        )

    # -------------------------------------------------------------------
    # City resolution
    # -------------------------------------------------------------------
    def record_city_resolution(
        self,
        city_input: str,
        city_id,
        city_name: str | None,
        method: str,
        confidence: float,
    ) -> None:
        """Record an automated city match. A manual correction is never overwritten."""
        if ResolutionMethod(method) == ResolutionMethod.MANUAL:
            raise ValidationError({"method": ["Use resolve_city_manually for operator corrections"]})
        if self.has_manual_resolution:
            raise ValidationError({"city_resolution": ["City was resolved manually and cannot be overwritten"]})

        self._set_resolution(city_input, city_id, city_name, method, confidence)

    def resolve_city_manually(self, city_id, city_name: str | None = None) -> None:
        """Operator-picked courier city; trusted unconditionally."""
        if city_id is None or str(city_id).strip() == "":
            raise ValidationError({"city_id": ["A courier city id is required"]})

        previous = self.city_resolution
        city_input = (previous.city_input if previous else None) or (
            self.shipping_address.city if self.shipping_address else ""
        )
        self._set_resolution(city_input, city_id, city_name, ResolutionMethod.MANUAL.value, 1.0)

    def _set_resolution(self, city_input, city_id, city_name, method, confidence) -> None:
        now = datetime.now(UTC)
        self.city_resolution = CityResolution(
            city_input=city_input or "",
            city_id=str(city_id),
            city_name=city_name,
            method=method,
            confidence=confidence,
            resolved_at=now,
        )
        self.updated_at = now
        self.raise_(
            CityResolved(
                order_id=str(self.id),
                city_input=city_input or "",
                city_id=str(city_id),
                city_name=city_name or "",
                method=method,
                confidence=confidence,
                resolved_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Booking
    # -------------------------------------------------------------------
    def record_booking(
        self,
        tracking_number: str,
        consignment_no: str,
        label_url: str | None,
        response: dict,
        allow_rebook: bool = False,
    ) -> None:
        """Store the courier's references after a successful booking."""
        if self.is_booked and not allow_rebook:
            existing = self.shipping_provider.consignment_no or self.shipping_provider.tracking_number
            raise ValidationError({"shipping_provider": [f"Order is already booked (CN: {existing or 'unknown'})"]})

        now = datetime.now(UTC)
        self.shipping_provider = ShippingProviderRecord(
            provider=COURIER_LCS,
            pushed=True,
            tracking_number=tracking_number or "",
            consignment_no=consignment_no or "",
            label_url=label_url,
            extra=json.dumps(response, default=str),
            pushed_at=now,
        )
        self.updated_at = now
        self.raise_(
            CourierBookingRecorded(
                order_id=str(self.id),
                provider=COURIER_LCS,
                tracking_number=tracking_number or "",
                consignment_no=consignment_no or "",
                label_url=label_url or "",
                pushed_at=now,
            )
        )
