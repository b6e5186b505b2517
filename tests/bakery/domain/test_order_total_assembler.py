"""Tests for reducing priced lines and applied discounts to order totals."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from bakery.pricing.assembler import assemble
from bakery.pricing.models import AppliedDiscount, OrderPricingResult, PricedLine


def _line(price_id, unit_price, quantity):
    unit_price = Decimal(unit_price)
    return PricedLine(price_id=price_id, quantity=quantity, unit_price=unit_price, line_total=unit_price * quantity)


def _discount(discount_id, amount):
    return AppliedDiscount(discount_id=discount_id, name=discount_id, amount=Decimal(amount))


class TestAssemble:
    def test_without_discounts(self):
        result = assemble([_line("A", "50000.00", 2), _line("B", "30000.00", 1)], [])

        assert result.subtotal == Decimal("130000.00")
        assert result.total_discount == Decimal("0.00")
        assert result.final_amount == Decimal("130000.00")
        assert result.discounts == ()

    def test_with_discounts(self):
        result = assemble([_line("A", "50000.00", 2)], [_discount("x", "10000.00"), _discount("y", "2500.50")])

        assert result.total_discount == Decimal("12500.50")
        assert result.final_amount == Decimal("87499.50")

    def test_over_stacked_discounts_clamp_to_zero(self):
        result = assemble([_line("A", "50000.00", 2)], [_discount("x", "80000.00"), _discount("y", "80000.00")])

        assert result.total_discount == Decimal("160000.00")
        assert result.final_amount == Decimal("0.00")

    def test_totals_are_two_place_decimals(self):
        result = assemble([_line("A", "50000", 1)], [])
        assert str(result.subtotal) == "50000.00"
        assert str(result.final_amount) == "50000.00"

    def test_result_keeps_line_and_discount_order(self):
        lines = [_line("B", "1.00", 1), _line("A", "2.00", 1)]
        discounts = [_discount("y", "0.10"), _discount("x", "0.20")]
        result = assemble(lines, discounts)

        assert [line.price_id for line in result.lines] == ["B", "A"]
        assert [d.discount_id for d in result.discounts] == ["y", "x"]


class TestPricingResultConsistency:
    def test_subtotal_must_match_lines(self):
        with pytest.raises(ValidationError):
            OrderPricingResult(
                lines=(_line("A", "10.00", 1),),
                subtotal=Decimal("11.00"),
                final_amount=Decimal("11.00"),
            )

    def test_final_amount_must_be_floored_difference(self):
        with pytest.raises(ValidationError):
            OrderPricingResult(
                lines=(_line("A", "10.00", 1),),
                subtotal=Decimal("10.00"),
                discounts=(_discount("x", "15.00"),),
                total_discount=Decimal("15.00"),
                final_amount=Decimal("-5.00"),
            )

    def test_line_total_must_match_unit_price(self):
        with pytest.raises(ValidationError):
            PricedLine(price_id="A", quantity=2, unit_price=Decimal("10.00"), line_total=Decimal("25.00"))

    def test_result_is_immutable(self):
        result = assemble([_line("A", "10.00", 1)], [])
        with pytest.raises(ValidationError):
            result.final_amount = Decimal("0.00")
