"""Domain events for the ProductPrice aggregate.

Prices travel as canonical decimal strings ("50000.00").
"""

from protean.fields import Boolean, DateTime, Identifier, String

from bakery.domain import bakery


@bakery.event(part_of="ProductPrice")
class ProductPriceRegistered:
    """A new size/price combination was added to the catalogue."""

    __version__ = 1

    price_id: Identifier(required=True)
    product_id: Identifier(required=True)
    product_name: String(required=True)
    size: String()
    price: String(required=True)
    is_active: Boolean(required=True)
    registered_at: DateTime(required=True)


@bakery.event(part_of="ProductPrice")
class ProductPriceChanged:
    __version__ = 1

    price_id: Identifier(required=True)
    previous_price: String(required=True)
    new_price: String(required=True)
    changed_at: DateTime(required=True)


@bakery.event(part_of="ProductPrice")
class ProductPriceDeactivated:
    """The price can no longer be put on new orders."""

    __version__ = 1

    price_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)


@bakery.event(part_of="ProductPrice")
class ProductPriceActivated:
    __version__ = 1

    price_id: Identifier(required=True)
    activated_at: DateTime(required=True)
