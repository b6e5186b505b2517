"""Basket pricing shared by order placement, revision and quotes.

Commands carry items, discount ids and coupon codes as JSON text. They are
turned into pricing requests here without any lookup: coupon codes reach
the discount evaluator unresolved, so a malformed or unpriceable basket is
reported before an unknown coupon.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Text

from bakery.catalogue.product_price import ProductPriceCatalog
from bakery.discount.discount import DiscountCatalog
from bakery.domain import bakery
from bakery.order.order import Order
from bakery.pricing.engine import price_order
from bakery.pricing.models import DiscountRequest, LineItemRequest, OrderPricingResult
from bakery.shared import clock


@bakery.command(part_of="Order")
class QuoteOrder:
    """Price a basket without placing an order (e.g. the POS running total)."""

    items: Text(required=True)  # JSON: list of {price_id, quantity, note}
    discount_ids: Text()  # JSON: list of discount ids
    coupon_codes: Text()  # JSON: list of coupon codes


def json_list(text, field_name):
    """Decode a JSON list carried in a command field; ``None`` stays ``None``."""
    if text is None:
        return None
    try:
        value = json.loads(text)
    except (TypeError, json.JSONDecodeError):
        raise ValidationError({field_name: ["Must be a JSON list"]}) from None
    if not isinstance(value, list):
        raise ValidationError({field_name: ["Must be a JSON list"]})
    return value


def line_items(text) -> list[LineItemRequest]:
    return [LineItemRequest(**item) for item in json_list(text, "items")]


def discount_requests(discount_ids=None, coupon_codes=None) -> list[DiscountRequest]:
    """Explicit discount ids first, then coupon codes, each in input order."""
    requests = [DiscountRequest(discount_id=discount_id) for discount_id in discount_ids or []]
    requests.extend(DiscountRequest(coupon_code=code) for code in coupon_codes or [])
    return requests


def price_basket(items, discounts) -> OrderPricingResult:
    """Run the pricing pipeline against the current catalogue and discounts."""
    return price_order(
        list(items),
        list(discounts),
        catalog=ProductPriceCatalog(),
        discount_lookup=DiscountCatalog(),
        now=clock.now(),
    )


@bakery.command_handler(part_of=Order)
class QuoteOrderHandler:
    @handle(QuoteOrder)
    def quote_order(self, command):
        discounts = discount_requests(
            json_list(command.discount_ids, "discount_ids"),
            json_list(command.coupon_codes, "coupon_codes"),
        )
        return price_basket(line_items(command.items), discounts)
