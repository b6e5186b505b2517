"""Pydantic request/response schemas for the Bakery API.

These are external contracts, separate from the internal commands. Money
is exchanged as decimal strings or JSON numbers and always returned as
strings ("120000.00").
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class LineItemSchema(BaseModel):
    """Quantities below one are rejected by the pricing core with a 400."""

    price_id: str
    quantity: int
    note: Optional[str] = None


class PricedLineSchema(BaseModel):
    price_id: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    note: Optional[str] = None


class AppliedDiscountSchema(BaseModel):
    discount_id: str
    name: str
    amount: Decimal


class PricingResponse(BaseModel):
    lines: list[PricedLineSchema]
    subtotal: Decimal
    discounts: list[AppliedDiscountSchema]
    total_discount: Decimal
    final_amount: Decimal

    @classmethod
    def from_result(cls, result):
        return cls.model_validate(result.model_dump())


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    employee_id: str
    customer_id: Optional[str] = None
    customize_note: Optional[str] = None
    items: list[LineItemSchema]
    discount_ids: list[str] = Field(default_factory=list)
    coupon_codes: list[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "employee_id": "emp-001",
                    "customer_id": "cust-001",
                    "items": [
                        {"price_id": "croissant-l", "quantity": 2},
                        {"price_id": "latte-m", "quantity": 1, "note": "oat milk"},
                    ],
                    "coupon_codes": ["SPRING10"],
                }
            ]
        }
    }


class QuoteOrderRequest(BaseModel):
    items: list[LineItemSchema]
    discount_ids: list[str] = Field(default_factory=list)
    coupon_codes: list[str] = Field(default_factory=list)


class ReviseOrderRequest(BaseModel):
    """Omitted fields are left unchanged."""

    items: Optional[list[LineItemSchema]] = None
    discount_ids: Optional[list[str]] = None
    coupon_codes: Optional[list[str]] = None
    customer_id: Optional[str] = None
    clear_customer: bool = False
    customize_note: Optional[str] = None


class CancelOrderRequest(BaseModel):
    reason: Optional[str] = None


class OrderIdResponse(BaseModel):
    order_id: str


class OrderSummaryResponse(BaseModel):
    order_id: str
    employee_id: str
    customer_id: Optional[str] = None
    status: str
    item_count: int
    subtotal: Decimal
    total_discount: Decimal
    final_amount: Decimal
    order_time: datetime
    updated_at: datetime

    @classmethod
    def from_summary(cls, summary):
        return cls(
            order_id=str(summary.order_id),
            employee_id=summary.employee_id,
            customer_id=summary.customer_id,
            status=summary.status,
            item_count=summary.item_count,
            subtotal=Decimal(summary.subtotal),
            total_discount=Decimal(summary.total_discount),
            final_amount=Decimal(summary.final_amount),
            order_time=summary.order_time,
            updated_at=summary.updated_at,
        )


class OrderResponse(BaseModel):
    order_id: str
    employee_id: str
    customer_id: Optional[str] = None
    customize_note: Optional[str] = None
    status: str
    pricing: PricingResponse
    cancellation_reason: Optional[str] = None
    order_time: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order):
        return cls(
            order_id=str(order.id),
            employee_id=order.employee_id,
            customer_id=order.customer_id,
            customize_note=order.customize_note,
            status=order.status,
            pricing=PricingResponse.from_result(order.pricing_result),
            cancellation_reason=order.cancellation_reason,
            order_time=order.order_time,
            updated_at=order.updated_at,
        )


# ---------------------------------------------------------------------------
# Product prices
# ---------------------------------------------------------------------------
class RegisterProductPriceRequest(BaseModel):
    product_id: str
    product_name: str
    size: Optional[str] = None
    price: Decimal = Field(ge=0)
    is_active: bool = True


class ChangeProductPriceRequest(BaseModel):
    new_price: Decimal = Field(ge=0)


class PriceIdResponse(BaseModel):
    price_id: str


class ProductPriceResponse(BaseModel):
    price_id: str
    product_id: str
    product_name: str
    size: Optional[str] = None
    price: Decimal
    is_active: bool

    @classmethod
    def from_record(cls, record):
        return cls(
            price_id=str(record.id),
            product_id=record.product_id,
            product_name=record.product_name,
            size=record.size,
            price=record.unit_price,
            is_active=record.is_active,
        )


# ---------------------------------------------------------------------------
# Discounts
# ---------------------------------------------------------------------------
class CreateDiscountRequest(BaseModel):
    name: str
    description: Optional[str] = None
    coupon_code: str
    discount_value: Decimal = Field(ge=0, le=100)
    min_required_order_value: Decimal = Field(default=Decimal("0"), ge=0)
    max_discount_amount: Decimal = Field(ge=0)
    is_active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: datetime


class DiscountIdResponse(BaseModel):
    discount_id: str


class DiscountResponse(BaseModel):
    discount_id: str
    name: str
    description: Optional[str] = None
    coupon_code: str
    discount_value: Decimal
    min_required_order_value: Decimal
    max_discount_amount: Decimal
    is_active: bool
    valid_from: Optional[datetime] = None
    valid_until: datetime

    @classmethod
    def from_record(cls, record):
        return cls(
            discount_id=str(record.id),
            name=record.name,
            description=record.description,
            coupon_code=record.coupon_code,
            discount_value=Decimal(record.discount_value),
            min_required_order_value=Decimal(record.min_required_order_value),
            max_discount_amount=Decimal(record.max_discount_amount),
            is_active=record.is_active,
            valid_from=record.valid_from,
            valid_until=record.valid_until,
        )


class UpdateDiscountRequest(BaseModel):
    """Omitted fields are left unchanged."""

    name: Optional[str] = None
    description: Optional[str] = None
    coupon_code: Optional[str] = None
    discount_value: Optional[Decimal] = Field(default=None, ge=0, le=100)
    min_required_order_value: Optional[Decimal] = Field(default=None, ge=0)
    max_discount_amount: Optional[Decimal] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
