from datetime import date

import pytest

from src.dairyops.models.domain import Customer, Product, ProductLine
from src.dairyops.services.orders import build_delivery_schedule, materialize_items, materialize_order
from src.dairyops.services.orders.materializer import CustomItem

MILK = Product(id="milk", product_name="Cow Milk", description="", size="1/2ltr", price=20)
CURD = Product(id="curd", product_name="Curd", description="", size="1ltr", price=50)


def _customer(cid: str = "c1", **overrides) -> Customer:
    customer = Customer(
        id=cid,
        name=f"Customer {cid}",
        phone_number="9876543210",
        address="12 Lake Road",
        subscription_plan="Monthly",
        subscription_status="active",
        start_date="2025-01-01",
        end_date="2025-01-31",
        products=[
            ProductLine(product_id="milk", product_size="1/2ltr", quantity=2, price=20, product=MILK),
            ProductLine(product_id="curd", product_size="1ltr", quantity=1, price=50, product=CURD),
        ],
    )
    for key, value in overrides.items():
        setattr(customer, key, value)
    return customer


def test_totals_eligible_lines() -> None:
    result = materialize_order(_customer(), date(2025, 1, 5))
    assert [(line.product_name, line.quantity, line.total_price) for line in result.lines] == [
        ("Cow Milk", 2, 40),
        ("Curd", 1, 50),
    ]
    assert result.total_amount == 90


def test_nothing_due_when_absent() -> None:
    result = materialize_order(_customer(absent_days=["05/01/2025"]), date(2025, 1, 5))
    assert result.is_empty
    assert result.total_amount == 0


def test_unresolved_products_are_skipped() -> None:
    customer = _customer()
    customer.products[1].product = None
    result = materialize_order(customer, date(2025, 1, 5))
    assert [line.product_id for line in result.lines] == ["milk"]
    assert result.total_amount == 40


def test_weekend_line_only_counted_on_weekends() -> None:
    customer = _customer()
    customer.products[1].delivery_days = "Weekends"
    assert materialize_order(customer, date(2025, 1, 3)).total_amount == 40
    assert materialize_order(customer, date(2025, 1, 4)).total_amount == 90


def test_custom_items_default_to_catalogue_price() -> None:
    result = materialize_items([CustomItem(product=MILK, quantity=3), CustomItem(product=CURD, quantity=1, price=45)])
    assert [line.price for line in result.lines] == [20, 45]
    assert result.total_amount == 105


def test_custom_items_reject_bad_quantities() -> None:
    with pytest.raises(ValueError):
        materialize_items([CustomItem(product=MILK, quantity=0)])
    with pytest.raises(ValueError):
        materialize_items([CustomItem(product=MILK, quantity=1, price=-1)])


def test_delivery_schedule_groups_by_customer() -> None:
    customers = [_customer("c1"), _customer("c2", absent_days=["2025-01-05"]), _customer("c3")]
    schedule = build_delivery_schedule(customers, "05/01/2025")

    assert schedule["date"] == "05/01/2025"
    assert [entry["customer_id"] for entry in schedule["customers"]] == ["c1", "c3"]
    assert schedule["total_customers"] == 2
    assert schedule["total_deliveries"] == 4
    assert schedule["bottles_by_size"] == {"1/2ltr": 4, "1ltr": 2}
    assert schedule["total_bottles"] == 6
    assert schedule["customers"][0]["total_amount"] == 90


def test_delivery_schedule_rejects_bad_date() -> None:
    with pytest.raises(ValueError):
        build_delivery_schedule([_customer()], "not a date")
