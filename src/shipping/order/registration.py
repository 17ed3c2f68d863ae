"""Order registration — command and handler.

Brings a storefront order into the shipping context so it can be booked.
"""

import json

from protean import handle
from protean.fields import DateTime, Float, String, Text
from protean.utils.globals import current_domain

from shipping.domain import shipping
from shipping.order.order import Order


@shipping.command(part_of="Order")
class RegisterOrder:
    """Register a storefront order for courier booking."""

    order_ref = String(max_length=100)
    total_price = Float(required=True)
    delivery_charges = Float(default=0.0)
    shipping_address = Text(required=True)  # JSON: address dict
    items = Text(required=True)  # JSON list of cart line dicts
    ordered_at = DateTime()


@shipping.command_handler(part_of=Order)
class RegisterOrderHandler:
    @handle(RegisterOrder)
    def register_order(self, command):
        address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        order = Order.create(
            order_ref=command.order_ref,
            total_price=command.total_price,
            delivery_charges=command.delivery_charges or 0.0,
            shipping_address=address,
            items_data=items_data,
            ordered_at=command.ordered_at,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)

