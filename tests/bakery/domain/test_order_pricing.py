"""End-to-end tests of the order pricing pipeline over fake lookups."""

from decimal import Decimal

import pytest

from bakery.exceptions import InvalidInputError, NotFoundError, UnprocessableError
from bakery.pricing.engine import price_order
from bakery.pricing.models import DiscountRequest, LineItemRequest, PriceQuote

BASKET = [
    LineItemRequest(price_id="A", quantity=2),
    LineItemRequest(price_id="B", quantity=1),
]


def _discounts(*ids):
    return [DiscountRequest(discount_id=discount_id) for discount_id in ids]


@pytest.fixture()
def price(catalog, discount_lookup, now):
    def _price(lines, discounts=()):
        return price_order(lines, list(discounts), catalog=catalog, discount_lookup=discount_lookup, now=now)

    return _price


class TestPricingScenarios:
    def test_two_lines_without_discounts(self, price):
        result = price(BASKET)

        assert [line.line_total for line in result.lines] == [Decimal("100000.00"), Decimal("30000.00")]
        assert result.subtotal == Decimal("130000.00")
        assert result.discounts == ()
        assert result.final_amount == Decimal("130000.00")

    def test_discount_capped_at_maximum(self, price):
        result = price(BASKET, _discounts("d-10"))

        # 10% of 130,000 would be 13,000
        assert result.discounts[0].amount == Decimal("10000.00")
        assert result.total_discount == Decimal("10000.00")
        assert result.final_amount == Decimal("120000.00")

    def test_minimum_order_value_not_met(self, price):
        with pytest.raises(UnprocessableError) as exc:
            price(BASKET, _discounts("d-min-200k"))
        assert exc.value.reason == "discount_minimum_not_met"

    def test_inactive_price_fails_before_discounts_are_evaluated(self, price, discount_lookup):
        with pytest.raises(UnprocessableError) as exc:
            price([LineItemRequest(price_id="OLD", quantity=1)], _discounts("d-10"))

        assert exc.value.reason == "price_reference_inactive"
        assert discount_lookup.calls == []

    def test_over_stacked_discounts_clamp_final_amount_to_zero(self, price):
        result = price([LineItemRequest(price_id="A", quantity=2)], _discounts("d-80k-a", "d-80k-b"))

        assert result.subtotal == Decimal("100000.00")
        assert result.total_discount == Decimal("160000.00")
        assert result.final_amount == Decimal("0.00")

    def test_repricing_same_inputs_is_byte_identical(self, price):
        first = price(BASKET, _discounts("d-10"))
        second = price(BASKET, _discounts("d-10"))

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()


class TestPricingProperties:
    @pytest.mark.parametrize(
        "discount_ids",
        [(), ("d-10",), ("d-80k-a",), ("d-80k-a", "d-80k-b"), ("d-10", "d-80k-a", "d-80k-b")],
    )
    def test_totals_add_up_and_final_amount_is_never_negative(self, price, discount_ids):
        result = price(BASKET, _discounts(*discount_ids))

        assert result.subtotal == sum(line.line_total for line in result.lines)
        assert result.total_discount == sum(d.amount for d in result.discounts)
        assert result.final_amount >= 0
        assert result.final_amount == max(Decimal("0"), result.subtotal - result.total_discount)

    def test_output_lines_correspond_to_input_lines(self, price):
        lines = [
            LineItemRequest(price_id="B", quantity=4, note="to go"),
            LineItemRequest(price_id="A", quantity=1),
        ]
        result = price(lines)

        assert [(line.price_id, line.quantity, line.note) for line in result.lines] == [
            ("B", 4, "to go"),
            ("A", 1, None),
        ]

    def test_reads_current_catalogue_state_on_every_run(self, price, catalog):
        before = price(BASKET)
        catalog.quotes["B"] = PriceQuote(unit_price=Decimal("35000"), is_active=True)
        after = price(BASKET)

        assert before.subtotal == Decimal("130000.00")
        assert after.subtotal == Decimal("135000.00")


class TestPricingFailures:
    def test_empty_basket(self, price, catalog):
        with pytest.raises(InvalidInputError) as exc:
            price([], _discounts("d-10"))
        assert exc.value.reason == "order_items_empty"
        assert catalog.calls == []

    def test_duplicate_discount_rejected_before_any_lookup(self, price, catalog, discount_lookup):
        with pytest.raises(InvalidInputError):
            price(BASKET, _discounts("d-10", "d-10"))
        assert catalog.calls == []
        assert discount_lookup.calls == []

    def test_unknown_price_reference(self, price):
        with pytest.raises(NotFoundError) as exc:
            price([LineItemRequest(price_id="Z", quantity=1)])
        assert exc.value.reason == "price_reference_not_found"

    def test_unknown_discount(self, price):
        with pytest.raises(NotFoundError) as exc:
            price(BASKET, _discounts("missing"))
        assert exc.value.reason == "discount_not_found"


class TestCouponResolutionOrder:
    def test_empty_basket_is_reported_before_unknown_coupon(self, price, discount_lookup):
        with pytest.raises(InvalidInputError) as exc:
            price([], [DiscountRequest(coupon_code="NOPE")])

        assert exc.value.reason == "order_items_empty"
        assert discount_lookup.calls == []

    def test_inactive_price_is_reported_before_unknown_coupon(self, price, discount_lookup):
        with pytest.raises(UnprocessableError) as exc:
            price([LineItemRequest(price_id="OLD", quantity=1)], [DiscountRequest(coupon_code="NOPE")])

        assert exc.value.reason == "price_reference_inactive"
        assert discount_lookup.calls == []

    def test_coupons_resolve_after_lines_are_priced(self, price, catalog, discount_lookup):
        result = price(BASKET, [DiscountRequest(coupon_code="SPRING10")])

        assert catalog.calls == ["A", "B"]
        assert discount_lookup.calls == ["coupon:SPRING10"]
        assert result.final_amount == Decimal("120000.00")
