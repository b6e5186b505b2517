"""Plain data exchanged by the pricing core.

Requests come in from the order commands, definitions and quotes come in
through the lookup ports, and the priced breakdown goes out to the order.
Every model is frozen: a pricing result is replaced wholesale, never patched.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bakery.shared.money import ZERO, decimal_places, to_decimal, to_money


def _as_decimal(value):
    try:
        return to_decimal(value)
    except TypeError as exc:
        raise ValueError(str(exc)) from None


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class LineItemRequest(_Frozen):
    """One requested line: a price reference, a quantity and an optional note.

    Quantity is checked by the pricer, not here, so that a malformed basket
    surfaces as an ``InvalidInputError`` rather than a schema error.
    """

    price_id: str = Field(min_length=1)
    quantity: int
    note: Optional[str] = None


class DiscountRequest(_Frozen):
    """A discount asked for by id or by coupon code, never both.

    Coupon codes are resolved by the evaluator, after the lines are priced.
    """

    discount_id: Optional[str] = Field(default=None, min_length=1)
    coupon_code: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def exactly_one_reference(self):
        if (self.discount_id is None) == (self.coupon_code is None):
            raise ValueError("A discount request names either a discount_id or a coupon_code")
        return self

    @property
    def reference(self):
        return self.discount_id if self.discount_id is not None else f"coupon {self.coupon_code}"


# ---------------------------------------------------------------------------
# Collaborator views
# ---------------------------------------------------------------------------
class PriceQuote(_Frozen):
    """The catalogue's current view of a price reference."""

    unit_price: Decimal = Field(ge=0)
    is_active: bool

    @field_validator("unit_price", mode="before")
    @classmethod
    def _no_floats(cls, value):
        return _as_decimal(value)


class DiscountDefinition(_Frozen):
    """A time-bounded percentage discount with an eligibility floor and a cap."""

    discount_id: str
    name: str
    discount_value: Decimal = Field(ge=0, le=100)
    min_required_order_value: Decimal = Field(ge=0)
    max_discount_amount: Decimal = Field(ge=0)
    is_active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: datetime

    @field_validator("discount_value", mode="before")
    @classmethod
    def _no_floats(cls, value):
        return _as_decimal(value)

    @field_validator("min_required_order_value", "max_discount_amount", mode="before")
    @classmethod
    def _amounts_are_money(cls, value):
        try:
            return to_money(value)
        except TypeError as exc:
            raise ValueError(str(exc)) from None

    @field_validator("discount_value")
    @classmethod
    def _one_decimal_place(cls, value):
        if decimal_places(value) > 1:
            raise ValueError("Discount percentage allows one decimal place")
        return value


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
class PricedLine(_Frozen):
    price_id: str
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)
    line_total: Decimal = Field(ge=0)
    note: Optional[str] = None

    @model_validator(mode="after")
    def line_total_must_match_unit_price(self):
        if self.line_total != self.unit_price * self.quantity:
            raise ValueError(f"Line total {self.line_total} is not {self.unit_price} x {self.quantity}")
        return self


class AppliedDiscount(_Frozen):
    discount_id: str
    name: str
    amount: Decimal = Field(ge=0)


class OrderPricingResult(_Frozen):
    """Self-consistent breakdown of one order's price.

    ``subtotal`` is the sum of line totals, ``total_discount`` the sum of
    applied amounts, and ``final_amount`` their difference floored at zero.
    """

    lines: tuple[PricedLine, ...]
    subtotal: Decimal
    discounts: tuple[AppliedDiscount, ...] = ()
    total_discount: Decimal = ZERO
    final_amount: Decimal

    @model_validator(mode="after")
    def totals_must_add_up(self):
        if self.subtotal != sum((line.line_total for line in self.lines), ZERO):
            raise ValueError("Subtotal does not equal the sum of line totals")
        if self.total_discount != sum((d.amount for d in self.discounts), ZERO):
            raise ValueError("Total discount does not equal the sum of applied discounts")
        if self.final_amount != max(ZERO, self.subtotal - self.total_discount):
            raise ValueError("Final amount must be the subtotal less discounts, floored at zero")
        return self
