from datetime import date, timedelta

import pytest

from src.dairyops.models.domain import Customer, DeliveryCadence, Product, ProductLine
from src.dairyops.services.scheduling import evaluate_lines, is_absent, should_deliver
from src.dairyops.services.scheduling.eligibility import CADENCE_RULES, resolve_window


def _product(pid: str = "p1", price: float = 20) -> Product:
    return Product(id=pid, product_name=f"Milk {pid}", description="", size="1ltr", price=price)


def _line(**overrides) -> ProductLine:
    line = ProductLine(product_id="p1", product_size="1ltr", quantity=1, price=20, product=_product())
    for key, value in overrides.items():
        setattr(line, key, value)
    return line


def _customer(plan: str = "Monthly", **overrides) -> Customer:
    customer = Customer(
        id="c1",
        name="Asha",
        phone_number="9876543210",
        address="12 Lake Road",
        subscription_plan=plan,
        subscription_status="active",
        start_date="01/01/2025",
        end_date="31/01/2025",
        products=[_line()],
    )
    for key, value in overrides.items():
        setattr(customer, key, value)
    return customer


def test_absent_day_blocks_every_plan() -> None:
    for plan, extra in (
        ("Monthly", {}),
        ("Alternate Days", {}),
        ("Custom Date", {"custom_delivery_dates": ["05/01/2025"]}),
    ):
        customer = _customer(plan, absent_days=["05/01/2025"], **extra)
        assert is_absent(customer, date(2025, 1, 5))
        assert not should_deliver(customer, customer.products[0], date(2025, 1, 5))


def test_absent_days_in_mixed_formats() -> None:
    customer = _customer(absent_days=["2025-01-07", "08-01-2025", "junk"])
    assert is_absent(customer, "07/01/2025")
    assert is_absent(customer, date(2025, 1, 8))
    assert not is_absent(customer, date(2025, 1, 9))


def test_daily_within_window_only() -> None:
    customer = _customer()
    line = customer.products[0]
    day = date(2025, 1, 1)
    while day <= date(2025, 1, 31):
        assert should_deliver(customer, line, day)
        day += timedelta(days=1)
    assert not should_deliver(customer, line, date(2024, 12, 31))
    assert not should_deliver(customer, line, date(2025, 2, 1))


def test_alternate_days_parity_from_start() -> None:
    customer = _customer("Alternate Days")
    line = customer.products[0]
    assert [should_deliver(customer, line, f"0{d}/01/2025") for d in range(1, 6)] == [
        True, False, True, False, True
    ]


def test_alternate_days_parity_from_line_start() -> None:
    customer = _customer("Alternate Days")
    line = _line(start_date="2025-01-04")

    assert not should_deliver(customer, line, date(2025, 1, 3))
    assert [should_deliver(customer, line, date(2025, 1, d)) for d in range(4, 8)] == [True, False, True, False]
    # the customer start would have put 5 Jan on the schedule
    assert should_deliver(customer, customer.products[0], date(2025, 1, 5))


def test_custom_dates_only() -> None:
    customer = _customer("Custom Date", custom_delivery_dates=["05/01/2025", "10/01/2025"])
    line = customer.products[0]
    assert should_deliver(customer, line, date(2025, 1, 5))
    assert should_deliver(customer, line, date(2025, 1, 10))
    assert not should_deliver(customer, line, date(2025, 1, 6))


def test_custom_cadence_without_dates_is_ineligible() -> None:
    customer = _customer("Custom Date", custom_delivery_dates=[])
    assert not should_deliver(customer, customer.products[0], date(2025, 1, 5))


def test_weekday_and_weekend_cadences() -> None:
    customer = _customer()
    weekdays = _line(delivery_days="Monday to Friday")
    weekends = _line(delivery_days="Weekends")
    friday, saturday = date(2025, 1, 3), date(2025, 1, 4)
    assert should_deliver(customer, weekdays, friday)
    assert not should_deliver(customer, weekdays, saturday)
    assert should_deliver(customer, weekends, saturday)
    assert not should_deliver(customer, weekends, friday)


def test_line_window_overrides_customer_window() -> None:
    customer = _customer()
    line = _line(start_date="2025-01-10", end_date="2025-01-12")
    assert not should_deliver(customer, line, date(2025, 1, 9))
    assert should_deliver(customer, line, date(2025, 1, 11))
    assert not should_deliver(customer, line, date(2025, 1, 13))


def test_line_custom_dates_override_customer_dates() -> None:
    customer = _customer("Custom Date", custom_delivery_dates=["05/01/2025"])
    line = _line(custom_delivery_dates=["2025-01-06"])
    assert resolve_window(customer, line).cadence is DeliveryCadence.CUSTOM
    assert should_deliver(customer, line, date(2025, 1, 6))
    assert not should_deliver(customer, line, date(2025, 1, 5))


def test_unknown_plan_is_ineligible() -> None:
    customer = _customer("Quarterly")
    assert not should_deliver(customer, customer.products[0], date(2025, 1, 5))


def test_unknown_line_cadence_is_ineligible() -> None:
    customer = _customer()
    assert not should_deliver(customer, _line(delivery_days="Fortnightly"), date(2025, 1, 5))


@pytest.mark.parametrize(
    "overrides",
    [{"start_date": "not a date"}, {"end_date": None}, {"start_date": {"bad": True}}],
)
def test_malformed_window_is_ineligible(overrides) -> None:
    customer = _customer(**overrides)
    assert not should_deliver(customer, customer.products[0], date(2025, 1, 5))


def test_malformed_target_is_ineligible() -> None:
    customer = _customer()
    assert not should_deliver(customer, customer.products[0], "someday")


def test_every_cadence_has_a_rule() -> None:
    assert set(CADENCE_RULES) == set(DeliveryCadence)


def test_evaluate_lines_reports_each_line() -> None:
    customer = _customer(products=[_line(), _line(product_id="p2", delivery_days="Weekends")])
    results = evaluate_lines(customer, date(2025, 1, 3))
    assert [(item.product_id, item.cadence, item.eligible) for item in results] == [
        ("p1", "Daily", True),
        ("p2", "Weekends", False),
    ]
