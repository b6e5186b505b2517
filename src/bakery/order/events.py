"""Domain events for the Order aggregate.

Amounts are canonical decimal strings; ``pricing`` carries the full
breakdown as JSON so consumers (receipts, reporting) never recompute it.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from bakery.domain import bakery


@bakery.event(part_of="Order")
class OrderPlaced:
    """A new order was placed at the counter and priced."""

    __version__ = 1

    order_id: Identifier(required=True)
    employee_id: Identifier(required=True)
    customer_id: Identifier()
    item_count: Integer(required=True)
    pricing: Text(required=True)  # JSON: OrderPricingResult
    subtotal: String(required=True)
    total_discount: String(required=True)
    final_amount: String(required=True)
    order_time: DateTime(required=True)


@bakery.event(part_of="Order")
class OrderRepriced:
    """The order's items or discounts changed and it was priced again from scratch."""

    __version__ = 1

    order_id: Identifier(required=True)
    item_count: Integer(required=True)
    pricing: Text(required=True)  # JSON: OrderPricingResult
    previous_final_amount: String(required=True)
    subtotal: String(required=True)
    total_discount: String(required=True)
    final_amount: String(required=True)
    repriced_at: DateTime(required=True)


@bakery.event(part_of="Order")
class OrderDetailsUpdated:
    __version__ = 1

    order_id: Identifier(required=True)
    customer_id: Identifier()
    customize_note: String()
    updated_at: DateTime(required=True)


@bakery.event(part_of="Order")
class OrderCompleted:
    __version__ = 1

    order_id: Identifier(required=True)
    final_amount: String(required=True)
    completed_at: DateTime(required=True)


@bakery.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id: Identifier(required=True)
    reason: String()
    cancelled_at: DateTime(required=True)


@bakery.event(part_of="Order")
class OrderRemoved:
    """The order was deleted from the back office."""

    __version__ = 1

    order_id: Identifier(required=True)
    status: String(required=True)
    removed_at: DateTime(required=True)
