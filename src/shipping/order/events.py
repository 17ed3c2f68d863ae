"""Shipping domain events — immutable facts about an order's courier handoff.

All events are past tense and versioned.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from shipping.domain import shipping


@shipping.event(part_of="Order")
class OrderRegistered:
    """A storefront order was registered for courier booking."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_ref = String()
    city = String()
    item_count = Integer(required=True)
    total_price = Float(required=True)
    registered_at = DateTime(required=True)


@shipping.event(part_of="Order")
class ShortIdAssigned:
    """A sequential human-readable reference was assigned to the order."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    short_id = Integer(required=True)
    assigned_at = DateTime(required=True)


@shipping.event(part_of="Order")
class CityResolved:
    """The destination city was matched to a courier city id."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    city_input = String()
    city_id = String(required=True)
    city_name = String()
    method = String(required=True)  # exact, alias, fuzzy, manual
    confidence = Float(required=True)
    resolved_at = DateTime(required=True)


@shipping.event(part_of="Order")
class CourierBookingRecorded:
    """The courier accepted a booking for the order."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    provider = String(required=True)
    tracking_number = String()
    consignment_no = String()
    label_url = String()
    pushed_at = DateTime(required=True)
