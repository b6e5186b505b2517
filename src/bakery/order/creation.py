"""Order placement: command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.order.order import Order
from bakery.order.quoting import discount_requests, json_list, line_items, price_basket
from bakery.shared import clock
from bakery.shared.money import format_money
from bakery.utils.logging import get_logger

logger = get_logger(__name__)


@bakery.command(part_of="Order")
class PlaceOrder:
    employee_id: Identifier(required=True)
    customer_id: Identifier()
    customize_note: String(max_length=500)
    items: Text(required=True)  # JSON: list of {price_id, quantity, note}
    discount_ids: Text()  # JSON: list of discount ids
    coupon_codes: Text()  # JSON: list of coupon codes


@bakery.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items = line_items(command.items)
        pricing = price_basket(
            items,
            discount_requests(
                json_list(command.discount_ids, "discount_ids"),
                json_list(command.coupon_codes, "coupon_codes"),
            ),
        )

        order = Order.place(
            employee_id=command.employee_id,
            customer_id=command.customer_id,
            customize_note=command.customize_note,
            items=items,
            pricing=pricing,
            now=clock.now(),
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            employee_id=command.employee_id,
            final_amount=format_money(pricing.final_amount),
        )
        return str(order.id)
