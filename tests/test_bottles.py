from datetime import date

import pytest

from src.dairyops.errors import NotFoundError
from src.dairyops.services.bottles import bottle_balance, bottle_size, record_bottle_transaction
from src.dairyops.services.orders import create_automatic_orders, transition_order_status


def _deliver(seeded, day: date):
    order = create_automatic_orders(seeded.customer.id, target_date=day).created[0]
    transition_order_status(order.id, "Out for Delivery")
    return transition_order_status(order.id, "Delivered")


def test_bottle_size_labels() -> None:
    assert bottle_size("1/2ltr") == "1/2ltr"
    assert bottle_size("1/2 Ltr") == "1/2ltr"
    assert bottle_size("500ml") == "1/2ltr"
    assert bottle_size("1ltr") == "1ltr"
    assert bottle_size(None) == "1ltr"


def test_delivery_issues_bottles(seeded) -> None:
    order = _deliver(seeded, date(2025, 1, 5))

    balance = bottle_balance(seeded.customer.id)
    assert balance["sizes"]["1/2ltr"] == {"issued": 2, "returned": 0, "pending": 2}
    assert balance["sizes"]["1ltr"] == {"issued": 1, "returned": 0, "pending": 1}
    assert balance["total_pending"] == 3
    assert {item.order_id for item in balance["transactions"]} == {order.id}


def test_scheduled_orders_issue_nothing(seeded) -> None:
    create_automatic_orders(seeded.customer.id, target_date=date(2025, 1, 5))
    assert bottle_balance(seeded.customer.id)["total_pending"] == 0


def test_returns_reduce_pending(seeded) -> None:
    _deliver(seeded, date(2025, 1, 5))

    record_bottle_transaction(seeded.customer.id, "1/2ltr", returned=2, day="06/01/2025")
    assert bottle_balance(seeded.customer.id)["sizes"]["1/2ltr"]["pending"] == 0

    with pytest.raises(ValueError):
        record_bottle_transaction(seeded.customer.id, "1/2ltr", returned=1)

    # swapping a bottle in one visit
    record_bottle_transaction(seeded.customer.id, "1ltr", issued=1, returned=2)
    assert bottle_balance(seeded.customer.id)["sizes"]["1ltr"]["pending"] == 0


def test_bottle_transaction_validation(seeded) -> None:
    with pytest.raises(ValueError):
        record_bottle_transaction(seeded.customer.id, "2ltr", issued=1)
    with pytest.raises(ValueError):
        record_bottle_transaction(seeded.customer.id, "1ltr")
    with pytest.raises(ValueError):
        record_bottle_transaction(seeded.customer.id, "1ltr", issued=-1)
    with pytest.raises(NotFoundError):
        record_bottle_transaction("ghost", "1ltr", issued=1)
