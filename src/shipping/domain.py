"""Shipping bounded context — Courier Booking and Shipment Tracking.

Hands paid orders over to the LCS courier: resolves destination cities,
books consignments and keeps the courier's tracking references on the
order. Uses CQRS because the courier owns the shipment state once booked.
"""

from protean.domain import Domain

shipping = Domain(name="shipping")
