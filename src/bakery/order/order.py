"""Order aggregate: a counter order and the pricing result it owns.

The order keeps the requested items and the discounts it was priced with
next to the priced breakdown so that any edit can re-price it wholesale.
The breakdown is never patched: ``reprice`` swaps in a freshly computed
``OrderPricingResult``.

State Machine:
    PROCESSING → COMPLETED
    PROCESSING → CANCELLED
"""

import json
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text

from bakery.domain import bakery
from bakery.exceptions import UnprocessableError
from bakery.pricing.models import DiscountRequest, LineItemRequest, OrderPricingResult
from bakery.shared.clock import utcnow
from bakery.shared.money import format_money


class OrderStatus(Enum):
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


_VALID_TRANSITIONS = {
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def _items_json(items):
    return json.dumps([item.model_dump() for item in items])


def _discount_ids_json(pricing):
    return json.dumps([discount.discount_id for discount in pricing.discounts])


@bakery.aggregate
class Order:
    """Order aggregate root."""

    employee_id: Identifier(required=True)
    customer_id: Identifier()
    customize_note: String(max_length=500)
    status: String(choices=OrderStatus, default=OrderStatus.PROCESSING.value)
    items: Text(required=True)  # JSON: list of {price_id, quantity, note}
    discounts: Text(default="[]")  # JSON: ids of the discounts the order was priced with
    pricing: Text(required=True)  # JSON: OrderPricingResult
    cancellation_reason: String(max_length=500)
    order_time: DateTime(default=utcnow)
    updated_at: DateTime(default=utcnow)

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, employee_id, items, pricing, now, customer_id=None, customize_note=None):
        """Create a new order from already-priced items."""
        from bakery.order.events import OrderPlaced

        order = cls(
            employee_id=employee_id,
            customer_id=customer_id,
            customize_note=customize_note,
            items=_items_json(items),
            discounts=_discount_ids_json(pricing),
            pricing=pricing.model_dump_json(),
            order_time=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                employee_id=employee_id,
                customer_id=customer_id,
                item_count=len(pricing.lines),
                pricing=order.pricing,
                subtotal=format_money(pricing.subtotal),
                total_discount=format_money(pricing.total_discount),
                final_amount=format_money(pricing.final_amount),
                order_time=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def line_items(self) -> list[LineItemRequest]:
        return [LineItemRequest(**item) for item in json.loads(self.items)]

    @property
    def discount_requests(self) -> list[DiscountRequest]:
        return [DiscountRequest(discount_id=discount_id) for discount_id in json.loads(self.discounts or "[]")]

    @property
    def pricing_result(self) -> OrderPricingResult:
        return OrderPricingResult.model_validate_json(self.pricing)

    @property
    def final_amount(self):
        return self.pricing_result.final_amount

    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise UnprocessableError(
                "invalid_status_transition",
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]},
            )

    def ensure_modifiable(self):
        """Items, discounts and details can only change while the order is processing."""
        if self.status != OrderStatus.PROCESSING.value:
            raise UnprocessableError(
                "order_not_modifiable",
                {"status": [f"Order {self.id} is {self.status} and can no longer be modified"]},
            )

    # -------------------------------------------------------------------
    # Modification (PROCESSING only)
    # -------------------------------------------------------------------
    def reprice(self, items, pricing, now):
        """Replace items, discounts and the whole pricing breakdown."""
        from bakery.order.events import OrderRepriced

        self.ensure_modifiable()

        previous_final_amount = self.final_amount
        self.items = _items_json(items)
        self.discounts = _discount_ids_json(pricing)
        self.pricing = pricing.model_dump_json()
        self.updated_at = now

        self.raise_(
            OrderRepriced(
                order_id=self.id,
                item_count=len(pricing.lines),
                pricing=self.pricing,
                previous_final_amount=format_money(previous_final_amount),
                subtotal=format_money(pricing.subtotal),
                total_discount=format_money(pricing.total_discount),
                final_amount=format_money(pricing.final_amount),
                repriced_at=now,
            )
        )

    def update_details(self, now, customer_id=None, customize_note=None, clear_customer=False):
        from bakery.order.events import OrderDetailsUpdated

        self.ensure_modifiable()

        if clear_customer:
            self.customer_id = None
        elif customer_id is not None:
            self.customer_id = customer_id
        if customize_note is not None:
            self.customize_note = customize_note
        self.updated_at = now

        self.raise_(
            OrderDetailsUpdated(
                order_id=self.id,
                customer_id=self.customer_id,
                customize_note=self.customize_note,
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def complete(self, now):
        from bakery.order.events import OrderCompleted

        self._assert_can_transition(OrderStatus.COMPLETED)
        self.status = OrderStatus.COMPLETED.value
        self.updated_at = now
        self.raise_(
            OrderCompleted(
                order_id=self.id,
                final_amount=format_money(self.final_amount),
                completed_at=now,
            )
        )

    def cancel(self, now, reason=None):
        from bakery.order.events import OrderCancelled

        self._assert_can_transition(OrderStatus.CANCELLED)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=self.id,
                reason=reason,
                cancelled_at=now,
            )
        )

    def remove(self, now):
        """Mark the order for deletion; any status may be removed."""
        from bakery.order.events import OrderRemoved

        self.updated_at = now
        self.raise_(OrderRemoved(order_id=self.id, status=self.status, removed_at=now))
