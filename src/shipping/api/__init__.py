"""Shipping API package."""

from shipping.api.routes import courier_router, order_router

__all__ = ["courier_router", "order_router"]
