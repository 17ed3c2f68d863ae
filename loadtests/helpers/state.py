"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
"""

from dataclasses import dataclass, field


@dataclass
class ShipmentState:
    """Tracks a simulated order from intake to courier push."""

    order_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    booked: bool = False
    needs_city: bool = False
