"""Reduce priced lines and applied discounts to an order total."""

from typing import Sequence

from bakery.pricing.models import AppliedDiscount, OrderPricingResult, PricedLine
from bakery.shared.money import ZERO, quantize_money


def assemble(lines: Sequence[PricedLine], discounts: Sequence[AppliedDiscount]) -> OrderPricingResult:
    subtotal = quantize_money(sum((line.line_total for line in lines), ZERO))
    total_discount = quantize_money(sum((discount.amount for discount in discounts), ZERO))

    # Over-stacked discounts clamp to zero rather than fail
    final_amount = max(ZERO, subtotal - total_discount)

    return OrderPricingResult(
        lines=tuple(lines),
        subtotal=subtotal,
        discounts=tuple(discounts),
        total_discount=total_discount,
        final_amount=quantize_money(final_amount),
    )
