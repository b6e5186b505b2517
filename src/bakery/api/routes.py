"""FastAPI routes for the Bakery back office: orders, product prices and discounts."""

import json
from typing import Optional

from fastapi import APIRouter
from protean.utils.globals import current_domain

from bakery.api.schemas import (
    CancelOrderRequest,
    ChangeProductPriceRequest,
    CreateDiscountRequest,
    DiscountIdResponse,
    DiscountResponse,
    OrderIdResponse,
    OrderResponse,
    OrderSummaryResponse,
    PlaceOrderRequest,
    PriceIdResponse,
    PricingResponse,
    ProductPriceResponse,
    QuoteOrderRequest,
    RegisterProductPriceRequest,
    ReviseOrderRequest,
    StatusResponse,
    UpdateDiscountRequest,
)
from bakery.catalogue.management import (
    ActivateProductPrice,
    ChangeProductPrice,
    DeactivateProductPrice,
    RegisterProductPrice,
)
from bakery.catalogue.product_price import ProductPrice, list_product_prices
from bakery.discount.discount import Discount, find_by_coupon_code, list_discounts
from bakery.discount.management import CreateDiscount, DeactivateDiscount, UpdateDiscount
from bakery.exceptions import NotFoundError
from bakery.order.creation import PlaceOrder
from bakery.order.lifecycle import CancelOrder, CompleteOrder, RemoveOrder
from bakery.order.modification import ReviseOrder
from bakery.order.order import Order
from bakery.order.quoting import QuoteOrder
from bakery.order.receipt import Receipt, build_receipt
from bakery.projections.order_summary import list_order_summaries
from bakery.shared import records


def _items_json(items):
    return json.dumps([item.model_dump() for item in items])


def _list_json(values):
    return json.dumps(values) if values is not None else None


def _text(value):
    return str(value) if value is not None else None


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        employee_id=body.employee_id,
        customer_id=body.customer_id,
        customize_note=body.customize_note,
        items=_items_json(body.items),
        discount_ids=json.dumps(body.discount_ids),
        coupon_codes=json.dumps(body.coupon_codes),
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


@order_router.get("", response_model=list[OrderSummaryResponse])
async def list_orders(
    status: Optional[str] = None,
    employee_id: Optional[str] = None,
    customer_id: Optional[str] = None,
    skip: int = 0,
    take: int = 50,
) -> list[OrderSummaryResponse]:
    """Most recent orders first."""
    summaries = list_order_summaries(
        status=status,
        employee_id=employee_id,
        customer_id=customer_id,
        skip=skip,
        take=take,
    )
    return [OrderSummaryResponse.from_summary(summary) for summary in summaries]


@order_router.post("/quote", response_model=PricingResponse)
async def quote_order(body: QuoteOrderRequest) -> PricingResponse:
    """Price a basket without placing an order."""
    command = QuoteOrder(
        items=_items_json(body.items),
        discount_ids=json.dumps(body.discount_ids),
        coupon_codes=json.dumps(body.coupon_codes),
    )
    return PricingResponse.from_result(current_domain.process(command, asynchronous=False))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = records.load(Order, order_id, "order_not_found", "order_id")
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}", response_model=PricingResponse)
async def revise_order(order_id: str, body: ReviseOrderRequest) -> PricingResponse:
    """Revise an order; touching items or discounts re-prices it from scratch."""
    command = ReviseOrder(
        order_id=order_id,
        items=_items_json(body.items) if body.items is not None else None,
        discount_ids=_list_json(body.discount_ids),
        coupon_codes=_list_json(body.coupon_codes),
        customer_id=body.customer_id,
        clear_customer=body.clear_customer,
        customize_note=body.customize_note,
    )
    return PricingResponse.from_result(current_domain.process(command, asynchronous=False))


@order_router.delete("/{order_id}", response_model=OrderResponse)
async def remove_order(order_id: str) -> OrderResponse:
    """Delete an order and return it as it was."""
    removed = OrderResponse.from_order(records.load(Order, order_id, "order_not_found", "order_id"))
    current_domain.process(RemoveOrder(order_id=order_id), asynchronous=False)
    return removed


@order_router.put("/{order_id}/complete", response_model=StatusResponse)
async def complete_order(order_id: str) -> StatusResponse:
    current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id, reason=body.reason), asynchronous=False)
    return StatusResponse()


@order_router.get("/{order_id}/receipt", response_model=Receipt)
async def get_receipt(order_id: str) -> Receipt:
    return build_receipt(order_id)


# ---------------------------------------------------------------------------
# Product Price Router
# ---------------------------------------------------------------------------
product_price_router = APIRouter(prefix="/product-prices", tags=["product-prices"])


@product_price_router.post("", status_code=201, response_model=PriceIdResponse)
async def register_product_price(body: RegisterProductPriceRequest) -> PriceIdResponse:
    command = RegisterProductPrice(
        product_id=body.product_id,
        product_name=body.product_name,
        size=body.size,
        price=str(body.price),
        is_active=body.is_active,
    )
    return PriceIdResponse(price_id=current_domain.process(command, asynchronous=False))


@product_price_router.get("", response_model=list[ProductPriceResponse])
async def list_product_price_records(
    product_id: Optional[str] = None, active_only: bool = False
) -> list[ProductPriceResponse]:
    prices = list_product_prices(product_id=product_id, active_only=active_only)
    return [ProductPriceResponse.from_record(record) for record in prices]


@product_price_router.get("/{price_id}", response_model=ProductPriceResponse)
async def get_product_price(price_id: str) -> ProductPriceResponse:
    record = records.load(ProductPrice, price_id, "price_reference_not_found", "price_id")
    return ProductPriceResponse.from_record(record)


@product_price_router.put("/{price_id}/price", response_model=StatusResponse)
async def change_product_price(price_id: str, body: ChangeProductPriceRequest) -> StatusResponse:
    command = ChangeProductPrice(price_id=price_id, new_price=str(body.new_price))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_price_router.put("/{price_id}/deactivate", response_model=StatusResponse)
async def deactivate_product_price(price_id: str) -> StatusResponse:
    current_domain.process(DeactivateProductPrice(price_id=price_id), asynchronous=False)
    return StatusResponse()


@product_price_router.put("/{price_id}/activate", response_model=StatusResponse)
async def activate_product_price(price_id: str) -> StatusResponse:
    current_domain.process(ActivateProductPrice(price_id=price_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Discount Router
# ---------------------------------------------------------------------------
discount_router = APIRouter(prefix="/discounts", tags=["discounts"])


@discount_router.post("", status_code=201, response_model=DiscountIdResponse)
async def create_discount(body: CreateDiscountRequest) -> DiscountIdResponse:
    command = CreateDiscount(
        name=body.name,
        description=body.description,
        coupon_code=body.coupon_code,
        discount_value=str(body.discount_value),
        min_required_order_value=str(body.min_required_order_value),
        max_discount_amount=str(body.max_discount_amount),
        is_active=body.is_active,
        valid_from=body.valid_from,
        valid_until=body.valid_until,
    )
    return DiscountIdResponse(discount_id=current_domain.process(command, asynchronous=False))


@discount_router.get("", response_model=list[DiscountResponse])
async def list_discount_records(active_only: bool = False) -> list[DiscountResponse]:
    return [DiscountResponse.from_record(record) for record in list_discounts(active_only=active_only)]


@discount_router.get("/coupons/{coupon_code}", response_model=DiscountResponse)
async def get_discount_by_coupon(coupon_code: str) -> DiscountResponse:
    discount = find_by_coupon_code(coupon_code)
    if discount is None:
        raise NotFoundError(
            "discount_not_found",
            {"coupon_code": [f"No discount is associated with coupon code '{coupon_code}'"]},
        )
    return DiscountResponse.from_record(discount)


@discount_router.get("/{discount_id}", response_model=DiscountResponse)
async def get_discount(discount_id: str) -> DiscountResponse:
    return DiscountResponse.from_record(records.load(Discount, discount_id, "discount_not_found", "discount_id"))


@discount_router.patch("/{discount_id}", response_model=DiscountResponse)
async def update_discount(discount_id: str, body: UpdateDiscountRequest) -> DiscountResponse:
    """Change a discount's terms; orders priced afterwards use the new terms."""
    command = UpdateDiscount(
        discount_id=discount_id,
        name=body.name,
        description=body.description,
        coupon_code=body.coupon_code,
        discount_value=_text(body.discount_value),
        min_required_order_value=_text(body.min_required_order_value),
        max_discount_amount=_text(body.max_discount_amount),
        is_active=body.is_active,
        valid_from=body.valid_from,
        valid_until=body.valid_until,
    )
    current_domain.process(command, asynchronous=False)
    return DiscountResponse.from_record(records.load(Discount, discount_id, "discount_not_found", "discount_id"))


@discount_router.put("/{discount_id}/deactivate", response_model=StatusResponse)
async def deactivate_discount(discount_id: str) -> StatusResponse:
    current_domain.process(DeactivateDiscount(discount_id=discount_id), asynchronous=False)
    return StatusResponse()
