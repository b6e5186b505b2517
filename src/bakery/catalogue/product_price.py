"""ProductPrice aggregate: one sellable size/price combination of a product.

A price reference is what an order line points at. Deactivating it keeps the
record (orders placed earlier still render their receipts) but stops it
from being priced into new orders or revisions.
"""

from decimal import Decimal
from typing import Optional

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from bakery.domain import bakery
from bakery.exceptions import UnprocessableError
from bakery.pricing.models import PriceQuote
from bakery.shared import records
from bakery.shared.clock import utcnow
from bakery.shared.money import money_text, to_money


@bakery.aggregate
class ProductPrice:
    """Product price aggregate root."""

    product_id: Identifier(required=True)
    product_name: String(required=True, max_length=255)
    size: String(max_length=50)
    price: String(required=True, max_length=30)  # canonical decimal, e.g. "50000.00"
    is_active: Boolean(default=True)
    created_at: DateTime(default=utcnow)
    updated_at: DateTime(default=utcnow)

    @invariant.post
    def price_must_be_money(self):
        try:
            amount = to_money(self.price)
        except (TypeError, ValueError) as exc:
            raise ValidationError({"price": [str(exc)]})
        if amount < 0:
            raise ValidationError({"price": ["Price must not be negative"]})

    @property
    def unit_price(self) -> Decimal:
        return Decimal(self.price)

    @property
    def label(self):
        return f"{self.product_name} ({self.size})" if self.size else self.product_name

    @classmethod
    def register(cls, product_id, product_name, price, now, size=None, is_active=True):
        from bakery.catalogue.events import ProductPriceRegistered

        price = money_text(price, "price")
        product_price = cls(
            product_id=product_id,
            product_name=product_name,
            size=size,
            price=price,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        product_price.raise_(
            ProductPriceRegistered(
                price_id=product_price.id,
                product_id=product_id,
                product_name=product_name,
                size=size,
                price=price,
                is_active=is_active,
                registered_at=now,
            )
        )
        return product_price

    def change_price(self, new_price, now):
        from bakery.catalogue.events import ProductPriceChanged

        previous_price = self.price
        self.price = money_text(new_price, "new_price")
        self.updated_at = now

        self.raise_(
            ProductPriceChanged(
                price_id=self.id,
                previous_price=previous_price,
                new_price=self.price,
                changed_at=now,
            )
        )

    def deactivate(self, now):
        from bakery.catalogue.events import ProductPriceDeactivated

        if not self.is_active:
            raise UnprocessableError(
                "price_reference_inactive",
                {"is_active": [f"Product price {self.id} is already inactive"]},
            )
        self.is_active = False
        self.updated_at = now
        self.raise_(ProductPriceDeactivated(price_id=self.id, deactivated_at=now))

    def activate(self, now):
        from bakery.catalogue.events import ProductPriceActivated

        if self.is_active:
            raise UnprocessableError(
                "price_reference_active",
                {"is_active": [f"Product price {self.id} is already active"]},
            )
        self.is_active = True
        self.updated_at = now
        self.raise_(ProductPriceActivated(price_id=self.id, activated_at=now))


class ProductPriceCatalog:
    """The pricing core's view of the product price store."""

    def get_price(self, price_id: str) -> Optional[PriceQuote]:
        record = records.find(ProductPrice, price_id)
        if record is None:
            return None
        return PriceQuote(unit_price=record.unit_price, is_active=record.is_active)


def list_product_prices(product_id=None, active_only=False):
    """Registered prices, optionally narrowed to one product or to active ones."""
    query = records.query(ProductPrice)
    filters = {}
    if product_id is not None:
        filters["product_id"] = product_id
    if active_only:
        filters["is_active"] = True
    if filters:
        query = query.filter(**filters)
    return query.all().items
