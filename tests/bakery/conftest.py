import os
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from bakery.pricing.models import DiscountDefinition, PriceQuote

NOW = datetime(2025, 3, 15, 9, 30, tzinfo=UTC)


class FakeCatalog:
    """Dict-backed catalogue lookup that records every price id it was asked for."""

    def __init__(self, quotes=None):
        self.quotes = dict(quotes or {})
        self.calls = []

    def get_price(self, price_id):
        self.calls.append(price_id)
        return self.quotes.get(price_id)


class FakeDiscounts:
    def __init__(self, definitions=None, coupons=None):
        self.definitions = {d.discount_id: d for d in (definitions or [])}
        self.coupons = dict(coupons or {})
        self.calls = []

    def get_discount(self, discount_id):
        self.calls.append(discount_id)
        return self.definitions.get(discount_id)

    def find_by_coupon_code(self, coupon_code):
        self.calls.append(f"coupon:{coupon_code}")
        discount_id = self.coupons.get(coupon_code)
        return self.definitions.get(discount_id) if discount_id else None


def make_definition(discount_id="d-10", **overrides):
    values = {
        "discount_id": discount_id,
        "name": "Spring sale",
        "discount_value": Decimal("10"),
        "min_required_order_value": Decimal("100000"),
        "max_discount_amount": Decimal("10000"),
        "is_active": True,
        "valid_from": NOW - timedelta(days=7),
        "valid_until": NOW + timedelta(days=7),
    }
    values.update(overrides)
    return DiscountDefinition(**values)


def process(command):
    from protean import current_domain

    return current_domain.process(command, asynchronous=False)


@pytest.fixture(scope="session")
def _bakery_domain(request):
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from bakery.domain import bakery

    bakery.init()
    return bakery


@pytest.fixture(autouse=True)
def run_around_tests(_bakery_domain):
    from bakery.config import set_settings_for_test
    from bakery.shared.clock import set_clock

    set_clock(lambda: NOW)
    set_settings_for_test(env="test", store_name="Corner Bakery")
    ctx = _bakery_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()
    set_clock()


@pytest.fixture()
def catalog():
    return FakeCatalog(
        {
            "A": PriceQuote(unit_price=Decimal("50000"), is_active=True),
            "B": PriceQuote(unit_price=Decimal("30000"), is_active=True),
            "OLD": PriceQuote(unit_price=Decimal("20000"), is_active=False),
        }
    )


@pytest.fixture()
def discount_lookup():
    return FakeDiscounts(
        [
            make_definition("d-10"),
            make_definition("d-min-200k", name="Big basket", min_required_order_value=Decimal("200000")),
            make_definition("d-off", name="Retired", is_active=False),
            make_definition(
                "d-80k-a",
                name="Staff treat",
                discount_value=Decimal("80"),
                min_required_order_value=Decimal("0"),
                max_discount_amount=Decimal("80000"),
            ),
            make_definition(
                "d-80k-b",
                name="Owner treat",
                discount_value=Decimal("80"),
                min_required_order_value=Decimal("0"),
                max_discount_amount=Decimal("80000"),
            ),
        ],
        coupons={"SPRING10": "d-10", "STAFF80": "d-80k-a"},
    )


@pytest.fixture()
def prices():
    """Register a small menu and return its price ids by short name."""
    from bakery.catalogue.management import RegisterProductPrice

    def register(product_id, product_name, size, price, is_active=True):
        return process(
            RegisterProductPrice(
                product_id=product_id,
                product_name=product_name,
                size=size,
                price=price,
                is_active=is_active,
            )
        )

    return {
        "croissant": register("prod-croissant", "Croissant", "L", "50000"),
        "latte": register("prod-latte", "Latte", "M", "30000"),
        "baguette": register("prod-baguette", "Baguette", None, "20000", is_active=False),
    }


@pytest.fixture()
def coupons():
    """Create a set of discounts and return their ids by coupon code."""
    from bakery.discount.management import CreateDiscount

    def create(coupon_code, **overrides):
        values = {
            "name": "Spring sale",
            "coupon_code": coupon_code,
            "discount_value": "10",
            "min_required_order_value": "100000",
            "max_discount_amount": "10000",
            "valid_from": NOW - timedelta(days=7),
            "valid_until": NOW + timedelta(days=7),
        }
        values.update(overrides)
        return process(CreateDiscount(**values))

    return {
        "SPRING10": create("SPRING10"),
        "BIGBASKET": create("BIGBASKET", name="Big basket", min_required_order_value="200000"),
        "EXPIRED": create(
            "EXPIRED",
            name="Winter sale",
            valid_from=NOW - timedelta(days=60),
            valid_until=NOW - timedelta(days=1),
        ),
        "STAFF80": create(
            "STAFF80",
            name="Staff treat",
            discount_value="80",
            min_required_order_value="0",
            max_discount_amount="80000",
        ),
    }


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def definition_factory():
    return make_definition
