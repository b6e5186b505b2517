"""Receipt view: the human-readable breakdown an invoice is rendered from.

Amounts and discount names come straight from the order's persisted pricing
result; only product descriptions are read from the catalogue. A price
reference missing from the catalogue renders under its id.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from bakery.catalogue.product_price import ProductPrice
from bakery.config import get_settings
from bakery.order.order import Order
from bakery.shared import records


class ReceiptLine(BaseModel):
    price_id: str
    description: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    note: Optional[str] = None


class ReceiptDiscount(BaseModel):
    discount_id: str
    name: str
    amount: Decimal


class Receipt(BaseModel):
    store_name: str
    currency: str
    order_id: str
    order_time: datetime
    status: str
    employee_id: str
    customer_id: Optional[str] = None
    customize_note: Optional[str] = None
    lines: list[ReceiptLine]
    discounts: list[ReceiptDiscount]
    subtotal: Decimal
    total_discount: Decimal
    final_amount: Decimal


def build_receipt(order_id) -> Receipt:
    order = records.load(Order, order_id, "order_not_found", "order_id")
    pricing = order.pricing_result
    settings = get_settings()

    lines = []
    for line in pricing.lines:
        product_price = records.find(ProductPrice, line.price_id)
        lines.append(
            ReceiptLine(
                price_id=line.price_id,
                description=product_price.label if product_price else line.price_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
                note=line.note,
            )
        )

    return Receipt(
        store_name=settings.store_name,
        currency=settings.currency,
        order_id=str(order.id),
        order_time=order.order_time,
        status=order.status,
        employee_id=order.employee_id,
        customer_id=order.customer_id,
        customize_note=order.customize_note,
        lines=lines,
        discounts=[
            ReceiptDiscount(discount_id=d.discount_id, name=d.name, amount=d.amount) for d in pricing.discounts
        ],
        subtotal=pricing.subtotal,
        total_discount=pricing.total_discount,
        final_amount=pricing.final_amount,
    )
