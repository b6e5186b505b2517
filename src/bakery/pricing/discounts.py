"""Discount eligibility and amounts.

Every discount is evaluated independently against the order's original
subtotal: discounts do not compound on each other's reduced totals, so a
given set of discounts yields the same amounts in any order.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Sequence

import structlog

from bakery.exceptions import InvalidInputError, NotFoundError, UnprocessableError
from bakery.pricing.models import AppliedDiscount, DiscountDefinition, DiscountRequest
from bakery.pricing.ports import DiscountLookup
from bakery.shared.money import format_money, quantize_money

logger = structlog.get_logger(__name__)

HUNDRED = Decimal(100)


def _as_utc(moment: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    return moment.replace(tzinfo=UTC) if moment.tzinfo is None else moment


def normalize_coupon_code(code):
    return code.strip().upper()


def validate_discount_requests(requests: Sequence[DiscountRequest]) -> None:
    """Reject a discount id or coupon code requested twice, before any lookup."""
    seen = set()
    for index, request in enumerate(requests):
        if request.discount_id is not None:
            key = ("id", request.discount_id)
        else:
            key = ("coupon", normalize_coupon_code(request.coupon_code))
        if key in seen:
            raise InvalidInputError(
                "discount_duplicated",
                {f"discounts[{index}]": [f"Discount {request.reference} is applied more than once"]},
            )
        seen.add(key)


def resolve_definition(request: DiscountRequest, lookup: DiscountLookup) -> DiscountDefinition:
    if request.discount_id is not None:
        definition = lookup.get_discount(request.discount_id)
        if definition is None:
            raise NotFoundError(
                "discount_not_found",
                {"discount_id": [f"Discount {request.discount_id} not found"]},
            )
        return definition

    definition = lookup.find_by_coupon_code(normalize_coupon_code(request.coupon_code))
    if definition is None:
        raise NotFoundError(
            "discount_not_found",
            {"coupon_code": [f"No discount is associated with coupon code '{request.coupon_code}'"]},
        )
    return definition


def check_eligibility(definition: DiscountDefinition, subtotal: Decimal, now: datetime) -> None:
    """Raise ``UnprocessableError`` unless ``definition`` applies to this order now."""
    label = f"Discount {definition.discount_id} ('{definition.name}')"

    if not definition.is_active:
        raise UnprocessableError("discount_inactive", {"discount_id": [f"{label} is not active"]})

    now = _as_utc(now)
    if definition.valid_from is not None and now < _as_utc(definition.valid_from):
        raise UnprocessableError(
            "discount_out_of_window",
            {"discount_id": [f"{label} is not valid before {definition.valid_from.isoformat()}"]},
        )
    if now > _as_utc(definition.valid_until):
        raise UnprocessableError(
            "discount_out_of_window",
            {"discount_id": [f"{label} expired at {definition.valid_until.isoformat()}"]},
        )

    if subtotal < definition.min_required_order_value:
        raise UnprocessableError(
            "discount_minimum_not_met",
            {
                "discount_id": [
                    f"Order total ({format_money(subtotal)}) does not meet minimum required value "
                    f"({format_money(definition.min_required_order_value)}) for {label}"
                ]
            },
        )


def discount_amount(definition: DiscountDefinition, subtotal: Decimal) -> Decimal:
    """Percentage of ``subtotal`` rounded to the minor unit, then capped at the definition's maximum."""
    raw_amount = subtotal * definition.discount_value / HUNDRED
    return min(quantize_money(raw_amount), definition.max_discount_amount)


def evaluate_discounts(
    requests: Sequence[DiscountRequest],
    subtotal: Decimal,
    now: datetime,
    lookup: DiscountLookup,
) -> list[AppliedDiscount]:
    """Apply each requested discount to ``subtotal``, in input order.

    Coupon codes are resolved here, so they are only looked up once the
    lines have been priced. Any unknown, repeated or ineligible discount
    aborts evaluation of all of them.
    """
    validate_discount_requests(requests)

    applied = []
    resolved = set()
    for index, request in enumerate(requests):
        definition = resolve_definition(request, lookup)
        if definition.discount_id in resolved:
            raise InvalidInputError(
                "discount_duplicated",
                {f"discounts[{index}]": [f"Discount {definition.discount_id} is applied more than once"]},
            )
        resolved.add(definition.discount_id)

        check_eligibility(definition, subtotal, now)
        amount = discount_amount(definition, subtotal)
        applied.append(
            AppliedDiscount(
                discount_id=definition.discount_id,
                name=definition.name,
                amount=amount,
            )
        )
        logger.debug(
            "Discount applied",
            discount_id=definition.discount_id,
            amount=format_money(amount),
        )

    return applied
