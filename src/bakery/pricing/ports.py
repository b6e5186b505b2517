"""Lookups the pricing core reads from.

Implementations return ``None`` for an unknown reference; turning that into
a ``NotFoundError`` is the core's job. They must not cache: every pricing
run reads the collaborator's current state.
"""

from typing import Optional, Protocol

from bakery.pricing.models import DiscountDefinition, PriceQuote


class CatalogPriceLookup(Protocol):
    def get_price(self, price_id: str) -> Optional[PriceQuote]:
        """Current unit price and activity flag of a price reference."""
        ...


class DiscountLookup(Protocol):
    def get_discount(self, discount_id: str) -> Optional[DiscountDefinition]:
        """Current definition of a discount."""
        ...

    def find_by_coupon_code(self, coupon_code: str) -> Optional[DiscountDefinition]:
        """Current definition of the discount behind a coupon code (case-insensitive)."""
        ...
