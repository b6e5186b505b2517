"""Fixed-point money helpers.

All amounts are ``decimal.Decimal``. Binary floats are refused outright so
that repeated re-pricing of an order can never drift.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

MONEY_PLACES = 2
MINOR_UNIT = Decimal(1).scaleb(-MONEY_PLACES)  # Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value):
    """Convert an int, str or Decimal to a finite Decimal."""
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Monetary values must not be {type(value).__name__}: {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a decimal amount: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Not a finite decimal amount: {value!r}")
    return result


def decimal_places(value: Decimal) -> int:
    """Number of significant fractional digits (``Decimal("10.50")`` has one)."""
    if value == 0:
        return 0
    exponent = value.normalize().as_tuple().exponent
    return max(0, -exponent)


def quantize_money(amount: Decimal) -> Decimal:
    """Round half-up to the currency minor unit."""
    return amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)


def to_money(value) -> Decimal:
    """Parse ``value`` as a monetary amount with at most two decimal places."""
    amount = to_decimal(value)
    if decimal_places(amount) > MONEY_PLACES:
        raise ValueError(f"Monetary values allow at most {MONEY_PLACES} decimal places: {value!r}")
    return quantize_money(amount)


def format_money(amount: Decimal) -> str:
    """Canonical string form used in logs and events, e.g. ``"120000.00"``."""
    return str(quantize_money(amount))


def money_text(value, field_name) -> str:
    """Canonical string for a money field stored as text.

    Raises a protean ``ValidationError`` keyed by ``field_name`` when ``value``
    is a float, has more than two decimal places or is negative.
    """
    try:
        amount = to_money(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError({field_name: [str(exc)]}) from None
    if amount < 0:
        raise ValidationError({field_name: [f"Amount must not be negative: {value!r}"]})
    return format_money(amount)
