"""Discount aggregate: a coupon-backed percentage discount with a payout cap.

Pricing reads discounts only through ``DiscountCatalog``, which hands out
frozen ``DiscountDefinition`` snapshots of the current terms.
"""

import json
from datetime import UTC
from decimal import Decimal
from typing import Optional

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String

from bakery.domain import bakery
from bakery.exceptions import UnprocessableError
from bakery.pricing.discounts import normalize_coupon_code
from bakery.pricing.models import DiscountDefinition
from bakery.shared import records
from bakery.shared.clock import utcnow
from bakery.shared.money import decimal_places, money_text, to_decimal

# Fields an update may change, in the order they are reported
_UPDATABLE_FIELDS = (
    "name",
    "description",
    "coupon_code",
    "discount_value",
    "min_required_order_value",
    "max_discount_amount",
    "is_active",
    "valid_from",
    "valid_until",
)


def _as_utc(moment):
    # Naive timestamps are taken to be UTC
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def percentage_text(value) -> str:
    """Canonical string ("10.0") of a percentage between 0 and 100 with at most one decimal place."""
    try:
        percentage = to_decimal(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError({"discount_value": [str(exc)]}) from None
    if decimal_places(percentage) > 1:
        raise ValidationError({"discount_value": ["Discount percentage allows one decimal place, e.g. 10.5"]})
    if not Decimal(0) <= percentage <= Decimal(100):
        raise ValidationError({"discount_value": ["Discount percentage must be between 0 and 100"]})
    return str(percentage.quantize(Decimal("0.1")))


@bakery.aggregate
class Discount:
    """Discount aggregate root."""

    name: String(required=True, max_length=100)
    description: String(max_length=500)
    coupon_code: String(required=True, max_length=50)
    discount_value: String(required=True, max_length=10)
    min_required_order_value: String(required=True, max_length=30)
    max_discount_amount: String(required=True, max_length=30)
    is_active: Boolean(default=True)
    valid_from: DateTime()
    valid_until: DateTime(required=True)
    created_at: DateTime(default=utcnow)
    updated_at: DateTime(default=utcnow)

    @invariant.post
    def validity_window_must_be_ordered(self):
        if self.valid_from is not None and _as_utc(self.valid_until) <= _as_utc(self.valid_from):
            raise ValidationError({"valid_until": ["valid_until must be later than valid_from"]})

    @property
    def percentage(self) -> Decimal:
        return Decimal(self.discount_value)

    @classmethod
    def create(
        cls,
        name,
        coupon_code,
        discount_value,
        min_required_order_value,
        max_discount_amount,
        valid_until,
        now,
        valid_from=None,
        description=None,
        is_active=True,
    ):
        from bakery.discount.events import DiscountCreated

        discount = cls(
            name=name,
            description=description,
            coupon_code=normalize_coupon_code(coupon_code),
            discount_value=percentage_text(discount_value),
            min_required_order_value=money_text(min_required_order_value, "min_required_order_value"),
            max_discount_amount=money_text(max_discount_amount, "max_discount_amount"),
            is_active=is_active,
            valid_from=_as_utc(valid_from),
            valid_until=_as_utc(valid_until),
            created_at=now,
            updated_at=now,
        )
        discount.raise_(
            DiscountCreated(
                discount_id=discount.id,
                name=discount.name,
                coupon_code=discount.coupon_code,
                discount_value=discount.discount_value,
                min_required_order_value=discount.min_required_order_value,
                max_discount_amount=discount.max_discount_amount,
                valid_from=discount.valid_from,
                valid_until=discount.valid_until,
                created_at=now,
            )
        )
        return discount

    def update(self, now, **changes):
        """Apply the given term changes; ``None`` values leave a term as it is."""
        from bakery.discount.events import DiscountUpdated

        changes = {field: value for field, value in changes.items() if value is not None}
        unknown = set(changes) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        if "coupon_code" in changes:
            changes["coupon_code"] = normalize_coupon_code(changes["coupon_code"])
        if "discount_value" in changes:
            changes["discount_value"] = percentage_text(changes["discount_value"])
        for field in ("min_required_order_value", "max_discount_amount"):
            if field in changes:
                changes[field] = money_text(changes[field], field)
        for field in ("valid_from", "valid_until"):
            if field in changes:
                changes[field] = _as_utc(changes[field])

        changed_fields = [field for field in _UPDATABLE_FIELDS if field in changes]
        if not changed_fields:
            return

        with atomic_change(self):
            for field in changed_fields:
                setattr(self, field, changes[field])
            self.updated_at = now

        self.raise_(
            DiscountUpdated(
                discount_id=self.id,
                changed_fields=json.dumps(changed_fields),
                updated_at=now,
            )
        )

    def deactivate(self, now):
        from bakery.discount.events import DiscountDeactivated

        if not self.is_active:
            raise UnprocessableError(
                "discount_inactive",
                {"is_active": [f"Discount {self.id} ('{self.name}') is already inactive"]},
            )
        self.is_active = False
        self.updated_at = now
        self.raise_(DiscountDeactivated(discount_id=self.id, deactivated_at=now))

    def to_definition(self) -> DiscountDefinition:
        return DiscountDefinition(
            discount_id=str(self.id),
            name=self.name,
            discount_value=self.discount_value,
            min_required_order_value=self.min_required_order_value,
            max_discount_amount=self.max_discount_amount,
            is_active=self.is_active,
            valid_from=self.valid_from,
            valid_until=self.valid_until,
        )


def find_by_coupon_code(coupon_code) -> Optional[Discount]:
    code = normalize_coupon_code(coupon_code)
    return next(iter(records.query(Discount).filter(coupon_code=code).all().items), None)


def list_discounts(active_only=False):
    query = records.query(Discount)
    if active_only:
        query = query.filter(is_active=True)
    return query.all().items


class DiscountCatalog:
    """The pricing core's view of the discount store."""

    def get_discount(self, discount_id: str) -> Optional[DiscountDefinition]:
        record = records.find(Discount, discount_id)
        return record.to_definition() if record is not None else None

    def find_by_coupon_code(self, coupon_code: str) -> Optional[DiscountDefinition]:
        record = find_by_coupon_code(coupon_code)
        return record.to_definition() if record is not None else None
