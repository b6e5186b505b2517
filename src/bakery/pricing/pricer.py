"""Line-item pricing against the catalogue."""

from typing import Sequence

import structlog

from bakery.exceptions import InvalidInputError, NotFoundError, UnprocessableError
from bakery.pricing.models import LineItemRequest, PricedLine
from bakery.pricing.ports import CatalogPriceLookup
from bakery.shared.money import quantize_money

logger = structlog.get_logger(__name__)


def validate_lines(lines: Sequence[LineItemRequest]) -> None:
    """Reject a malformed basket before anything is looked up."""
    if not lines:
        raise InvalidInputError(
            "order_items_empty",
            {"items": ["Order must contain at least one product"]},
        )
    for index, line in enumerate(lines):
        if line.quantity < 1:
            raise InvalidInputError(
                "quantity_not_positive",
                {f"items[{index}].quantity": [f"Quantity must be at least 1, got {line.quantity}"]},
            )


def price_lines(lines: Sequence[LineItemRequest], catalog: CatalogPriceLookup) -> list[PricedLine]:
    """Resolve each line's unit price from the catalogue, in input order.

    The first unknown or inactive price reference aborts the whole batch.
    """
    validate_lines(lines)

    priced = []
    for line in lines:
        quote = catalog.get_price(line.price_id)
        if quote is None:
            raise NotFoundError(
                "price_reference_not_found",
                {"price_id": [f"Product price {line.price_id} not found"]},
            )
        if not quote.is_active:
            raise UnprocessableError(
                "price_reference_inactive",
                {"price_id": [f"Product price {line.price_id} is not active"]},
            )

        unit_price = quantize_money(quote.unit_price)
        priced.append(
            PricedLine(
                price_id=line.price_id,
                quantity=line.quantity,
                unit_price=unit_price,
                line_total=unit_price * line.quantity,
                note=line.note,
            )
        )

    logger.debug("Priced order lines", line_count=len(priced))
    return priced
