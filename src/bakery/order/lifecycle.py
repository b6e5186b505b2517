"""Order completion, cancellation and removal: commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.order.order import Order
from bakery.shared import clock, records
from bakery.utils.logging import get_logger

logger = get_logger(__name__)


@bakery.command(part_of="Order")
class CompleteOrder:
    order_id: Identifier(required=True)


@bakery.command(part_of="Order")
class CancelOrder:
    order_id: Identifier(required=True)
    reason: String(max_length=500)


@bakery.command(part_of="Order")
class RemoveOrder:
    order_id: Identifier(required=True)


@bakery.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(CompleteOrder)
    def complete_order(self, command):
        order = records.load(Order, command.order_id, "order_not_found", "order_id")
        order.complete(now=clock.now())
        current_domain.repository_for(Order).add(order)
        logger.info("Order completed", order_id=command.order_id)

    @handle(CancelOrder)
    def cancel_order(self, command):
        order = records.load(Order, command.order_id, "order_not_found", "order_id")
        order.cancel(now=clock.now(), reason=command.reason)
        current_domain.repository_for(Order).add(order)
        logger.info("Order cancelled", order_id=command.order_id, reason=command.reason)

    @handle(RemoveOrder)
    def remove_order(self, command):
        repo = current_domain.repository_for(Order)
        order = records.load(Order, command.order_id, "order_not_found", "order_id")
        order.remove(now=clock.now())
        repo.add(order)
        repo._dao.delete(order)
        logger.info("Order removed", order_id=command.order_id, status=order.status)
