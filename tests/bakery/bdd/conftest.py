"""Shared BDD fixtures and step definitions for order pricing."""

import json
from datetime import timedelta
from decimal import Decimal

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when

from bakery.catalogue.management import RegisterProductPrice
from bakery.discount.management import CreateDiscount
from bakery.exceptions import BakeryError
from bakery.order.creation import PlaceOrder
from bakery.order.order import Order
from bakery.shared import records


def process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Scenario state
# ---------------------------------------------------------------------------
@pytest.fixture()
def menu():
    """Price ids by the short name used in the feature files."""
    return {}


@pytest.fixture()
def basket():
    return []


@pytest.fixture()
def applied_coupons():
    return []


@pytest.fixture()
def outcome():
    """The placed order id and its pricing, or the rejection."""
    return {"order_id": None, "placed": None, "exc": None}


def placed_pricing(outcome):
    assert outcome["exc"] is None, outcome["exc"]
    return current_domain.repository_for(Order).get(outcome["order_id"]).pricing_result


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
def _register(menu, name, amount, is_active):
    menu[name] = process(
        RegisterProductPrice(
            product_id=f"prod-{name.lower()}",
            product_name=name,
            price=amount,
            is_active=is_active,
        )
    )


@given(parsers.cfparse('a product price "{name}" of {amount}'))
def _(menu, name, amount):
    _register(menu, name, amount, is_active=True)


@given(parsers.cfparse('an inactive product price "{name}" of {amount}'))
def _(menu, name, amount):
    _register(menu, name, amount, is_active=False)


@given(parsers.cfparse('a discount "{code}" of {percent} percent with minimum {minimum} and cap {cap}'))
def _(now, code, percent, minimum, cap):
    process(
        CreateDiscount(
            name=code.title(),
            coupon_code=code,
            discount_value=percent,
            min_required_order_value=minimum,
            max_discount_amount=cap,
            valid_from=now - timedelta(days=1),
            valid_until=now + timedelta(days=1),
        )
    )


@given(parsers.cfparse('the basket holds {quantity:d} of "{name}"'))
def _(menu, basket, quantity, name):
    basket.append({"price_id": menu[name], "quantity": quantity})


@given(parsers.cfparse('coupon "{code}" is applied'))
def _(applied_coupons, code):
    applied_coupons.append(code)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the basket is ordered")
def _(basket, applied_coupons, outcome):
    try:
        outcome["order_id"] = process(
            PlaceOrder(
                employee_id="emp-001",
                items=json.dumps(basket),
                coupon_codes=json.dumps(applied_coupons),
            )
        )
    except BakeryError as exc:
        outcome["exc"] = exc
    else:
        outcome["placed"] = placed_pricing(outcome)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order subtotal is {amount}"))
def _(outcome, amount):
    assert placed_pricing(outcome).subtotal == Decimal(amount)


@then(parsers.cfparse("the order total discount is {amount}"))
def _(outcome, amount):
    assert placed_pricing(outcome).total_discount == Decimal(amount)


@then(parsers.cfparse("the order final amount is {amount}"))
def _(outcome, amount):
    assert placed_pricing(outcome).final_amount == Decimal(amount)


@then(parsers.cfparse('the order is rejected with "{reason}"'))
def _(outcome, reason):
    assert outcome["exc"] is not None
    assert outcome["exc"].reason == reason


@then("no order was placed")
def _():
    assert records.query(Order).all().items == []
