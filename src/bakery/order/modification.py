"""Order revision: command and handler.

Any revision that touches items or discounts re-prices the order from
scratch against the current catalogue and discount state, reusing whichever
of the two the revision leaves out. Nothing is diffed or patched.
"""

from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.order.order import Order
from bakery.order.quoting import discount_requests, json_list, line_items, price_basket
from bakery.shared import clock, records
from bakery.shared.money import format_money
from bakery.utils.logging import get_logger

logger = get_logger(__name__)


@bakery.command(part_of="Order")
class ReviseOrder:
    """Change an order's items, discounts or details.

    An omitted field leaves that part unchanged; an empty ``discount_ids``
    list removes all discounts.
    """

    order_id: Identifier(required=True)
    items: Text()  # JSON: list of {price_id, quantity, note}
    discount_ids: Text()  # JSON: list of discount ids
    coupon_codes: Text()  # JSON: list of coupon codes
    customer_id: Identifier()
    clear_customer: Boolean(default=False)
    customize_note: String(max_length=500)


def touches_items(command):
    return command.items is not None


def touches_discounts(command):
    return command.discount_ids is not None or command.coupon_codes is not None


def touches_details(command):
    return command.customer_id is not None or command.clear_customer or command.customize_note is not None


@bakery.command_handler(part_of=Order)
class ReviseOrderHandler:
    @handle(ReviseOrder)
    def revise_order(self, command):
        order = records.load(Order, command.order_id, "order_not_found", "order_id")
        order.ensure_modifiable()
        now = clock.now()

        if touches_items(command) or touches_discounts(command):
            items = line_items(command.items) if touches_items(command) else order.line_items
            if touches_discounts(command):
                discounts = discount_requests(
                    json_list(command.discount_ids, "discount_ids"),
                    json_list(command.coupon_codes, "coupon_codes"),
                )
            else:
                discounts = order.discount_requests

            previous_final_amount = order.final_amount
            order.reprice(items, price_basket(items, discounts), now=now)
            logger.info(
                "Order repriced",
                order_id=str(order.id),
                previous_final_amount=format_money(previous_final_amount),
                final_amount=format_money(order.final_amount),
            )

        if touches_details(command):
            order.update_details(
                now=now,
                customer_id=command.customer_id,
                customize_note=command.customize_note,
                clear_customer=command.clear_customer,
            )

        current_domain.repository_for(Order).add(order)
        return order.pricing_result
