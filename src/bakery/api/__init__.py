"""Bakery API package."""

from bakery.api.errors import register_exception_handlers
from bakery.api.routes import discount_router, order_router, product_price_router

__all__ = [
    "order_router",
    "product_price_router",
    "discount_router",
    "register_exception_handlers",
]
