"""Order summary: lightweight listing view for the back office."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderDetailsUpdated,
    OrderPlaced,
    OrderRemoved,
    OrderRepriced,
)
from bakery.order.order import Order


@bakery.projection
class OrderSummary:
    order_id = Identifier(identifier=True, required=True)
    employee_id = Identifier(required=True)
    customer_id = Identifier()
    status = String(required=True)
    item_count = Integer(default=0)
    subtotal = String()
    total_discount = String()
    final_amount = String()
    order_time = DateTime()
    updated_at = DateTime()


@bakery.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                employee_id=event.employee_id,
                customer_id=event.customer_id,
                status="PROCESSING",
                item_count=event.item_count,
                subtotal=event.subtotal,
                total_discount=event.total_discount,
                final_amount=event.final_amount,
                order_time=event.order_time,
                updated_at=event.order_time,
            )
        )

    @on(OrderRepriced)
    def on_order_repriced(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.item_count = event.item_count
        summary.subtotal = event.subtotal
        summary.total_discount = event.total_discount
        summary.final_amount = event.final_amount
        summary.updated_at = event.repriced_at
        repo.add(summary)

    @on(OrderDetailsUpdated)
    def on_order_details_updated(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.customer_id = event.customer_id
        summary.updated_at = event.updated_at
        repo.add(summary)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.status = "COMPLETED"
        summary.updated_at = event.completed_at
        repo.add(summary)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.status = "CANCELLED"
        summary.updated_at = event.cancelled_at
        repo.add(summary)

    @on(OrderRemoved)
    def on_order_removed(self, event):
        repo = current_domain.repository_for(OrderSummary)
        try:
            summary = repo.get(event.order_id)
        except ObjectNotFoundError:
            return
        repo._dao.delete(summary)


def list_order_summaries(status=None, employee_id=None, customer_id=None, skip=0, take=50):
    """Most recent orders first, optionally filtered."""
    filters = {}
    if status is not None:
        filters["status"] = status
    if employee_id is not None:
        filters["employee_id"] = employee_id
    if customer_id is not None:
        filters["customer_id"] = customer_id

    query = current_domain.repository_for(OrderSummary)._dao.query
    if filters:
        query = query.filter(**filters)
    return query.order_by("-order_time").offset(skip).limit(take).all().items
