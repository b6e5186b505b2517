"""Domain events for the Discount aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from bakery.domain import bakery


@bakery.event(part_of="Discount")
class DiscountCreated:
    """A new discount became available under a coupon code."""

    __version__ = 1

    discount_id: Identifier(required=True)
    name: String(required=True)
    coupon_code: String(required=True)
    discount_value: String(required=True)  # percentage, e.g. "10.5"
    min_required_order_value: String(required=True)
    max_discount_amount: String(required=True)
    valid_from: DateTime()
    valid_until: DateTime(required=True)
    created_at: DateTime(required=True)


@bakery.event(part_of="Discount")
class DiscountUpdated:
    """Terms of a discount changed; orders priced from now on use the new terms."""

    __version__ = 1

    discount_id: Identifier(required=True)
    changed_fields: Text(required=True)  # JSON: list of field names
    updated_at: DateTime(required=True)


@bakery.event(part_of="Discount")
class DiscountDeactivated:
    __version__ = 1

    discount_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)
