"""Order pricing pipeline: validate, price lines, evaluate discounts, assemble.

The same pipeline runs when an order is placed, when it is revised and when
a basket is quoted. It holds no state between calls; for a fixed catalogue
and discount state the same inputs always produce an identical result.
"""

from datetime import datetime
from typing import Sequence

import structlog

from bakery.pricing.assembler import assemble
from bakery.pricing.discounts import evaluate_discounts, validate_discount_requests
from bakery.pricing.models import DiscountRequest, LineItemRequest, OrderPricingResult
from bakery.pricing.ports import CatalogPriceLookup, DiscountLookup
from bakery.pricing.pricer import price_lines, validate_lines
from bakery.shared.money import ZERO, format_money

logger = structlog.get_logger(__name__)


def price_order(
    lines: Sequence[LineItemRequest],
    discounts: Sequence[DiscountRequest],
    *,
    catalog: CatalogPriceLookup,
    discount_lookup: DiscountLookup,
    now: datetime,
) -> OrderPricingResult:
    # Malformed requests fail before any lookup happens
    validate_lines(lines)
    validate_discount_requests(discounts)

    priced_lines = price_lines(lines, catalog)
    subtotal = sum((line.line_total for line in priced_lines), ZERO)
    applied = evaluate_discounts(discounts, subtotal, now, discount_lookup)
    result = assemble(priced_lines, applied)

    logger.info(
        "Order priced",
        line_count=len(result.lines),
        discount_count=len(result.discounts),
        subtotal=format_money(result.subtotal),
        total_discount=format_money(result.total_discount),
        final_amount=format_money(result.final_amount),
    )
    return result
