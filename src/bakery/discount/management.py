"""Discount management: commands and handler."""

from protean import handle
from protean.fields import Boolean, DateTime, Identifier, String
from protean.utils.globals import current_domain

from bakery.discount.discount import Discount, find_by_coupon_code
from bakery.domain import bakery
from bakery.exceptions import ConflictError
from bakery.shared import clock, records
from bakery.utils.logging import get_logger

logger = get_logger(__name__)


@bakery.command(part_of="Discount")
class CreateDiscount:
    name: String(required=True, max_length=100)
    description: String(max_length=500)
    coupon_code: String(required=True, max_length=50)
    discount_value: String(required=True, max_length=10)
    min_required_order_value: String(default="0", max_length=30)
    max_discount_amount: String(required=True, max_length=30)
    is_active: Boolean(default=True)
    valid_from: DateTime()
    valid_until: DateTime(required=True)


@bakery.command(part_of="Discount")
class UpdateDiscount:
    """Change a discount's terms. Omitted fields keep their current value."""

    discount_id: Identifier(required=True)
    name: String(max_length=100)
    description: String(max_length=500)
    coupon_code: String(max_length=50)
    discount_value: String(max_length=10)
    min_required_order_value: String(max_length=30)
    max_discount_amount: String(max_length=30)
    is_active: Boolean()
    valid_from: DateTime()
    valid_until: DateTime()


@bakery.command(part_of="Discount")
class DeactivateDiscount:
    discount_id: Identifier(required=True)


def _ensure_coupon_code_free(coupon_code, discount_id=None):
    existing = find_by_coupon_code(coupon_code)
    if existing is not None and str(existing.id) != discount_id:
        raise ConflictError(
            "coupon_code_taken",
            {"coupon_code": [f"Coupon code '{coupon_code}' is already associated with another discount"]},
        )


@bakery.command_handler(part_of=Discount)
class DiscountManagementHandler:
    @handle(CreateDiscount)
    def create_discount(self, command):
        _ensure_coupon_code_free(command.coupon_code)

        discount = Discount.create(
            name=command.name,
            description=command.description,
            coupon_code=command.coupon_code,
            discount_value=command.discount_value,
            min_required_order_value=command.min_required_order_value,
            max_discount_amount=command.max_discount_amount,
            is_active=command.is_active,
            valid_from=command.valid_from,
            valid_until=command.valid_until,
            now=clock.now(),
        )
        current_domain.repository_for(Discount).add(discount)
        logger.info(
            "Discount created",
            discount_id=str(discount.id),
            coupon_code=discount.coupon_code,
            discount_value=discount.discount_value,
        )
        return str(discount.id)

    @handle(UpdateDiscount)
    def update_discount(self, command):
        discount = records.load(Discount, command.discount_id, "discount_not_found", "discount_id")
        if command.coupon_code is not None:
            _ensure_coupon_code_free(command.coupon_code, discount_id=str(discount.id))

        discount.update(
            now=clock.now(),
            name=command.name,
            description=command.description,
            coupon_code=command.coupon_code,
            discount_value=command.discount_value,
            min_required_order_value=command.min_required_order_value,
            max_discount_amount=command.max_discount_amount,
            is_active=command.is_active,
            valid_from=command.valid_from,
            valid_until=command.valid_until,
        )
        current_domain.repository_for(Discount).add(discount)
        logger.info("Discount updated", discount_id=str(discount.id))

    @handle(DeactivateDiscount)
    def deactivate_discount(self, command):
        discount = records.load(Discount, command.discount_id, "discount_not_found", "discount_id")
        discount.deactivate(now=clock.now())
        current_domain.repository_for(Discount).add(discount)
