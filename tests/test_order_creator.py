import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from src.dairyops.errors import ConflictError, NotFoundError
from src.dairyops.persistence import customers as customer_store
from src.dairyops.persistence import orders as order_store
from src.dairyops.services.notifications import whatsapp
from src.dairyops.services.orders import create_automatic_orders, create_custom_order, format_order_number
from src.dairyops.services.orders import numbering


def test_order_number_format() -> None:
    assert format_order_number(date(2025, 1, 5), 7) == "ORD-20250105-0007"
    with pytest.raises(ValueError):
        format_order_number(date(2025, 1, 5), 0)


def test_initial_order_uses_start_date(seeded) -> None:
    result = create_automatic_orders(seeded.customer.id)

    assert result.skipped is None
    (order,) = result.created
    assert order.delivery_date == date(2025, 1, 1)
    assert order.order_number == "ORD-20250101-0001"
    assert order.total_amount == 90
    assert order.delivery_boy_id == seeded.boy.id
    assert [line.product_name for line in order.lines] == ["Cow Milk", "Curd"]


def test_numbers_are_sequential_per_day(seeded) -> None:
    create_automatic_orders(seeded.customer.id, target_date=date(2025, 1, 5))
    custom = create_custom_order(seeded.customer.id, [{"product_id": seeded.milk.id, "quantity": 1}], "05/01/2025")
    other_day = create_automatic_orders(seeded.customer.id, target_date=date(2025, 1, 6))

    assert custom.order_number == "ORD-20250105-0002"
    assert other_day.created[0].order_number == "ORD-20250106-0001"


def test_duplicate_subscription_order_is_skipped(seeded) -> None:
    first = create_automatic_orders(seeded.customer.id, target_date="2025-01-05")
    second = create_automatic_orders(seeded.customer.id, target_date="2025-01-05")

    assert len(first.created) == 1
    assert second.created == []
    assert second.skipped == "duplicate"
    assert len(seeded.db.tables["orders"]) == 1


def test_absent_day_creates_nothing(seeded) -> None:
    customer_store.update_customer(seeded.customer.id, {"absent_days": ["2025-01-05"]})
    result = create_automatic_orders(seeded.customer.id, target_date=date(2025, 1, 5))

    assert result.skipped == "not_eligible"
    assert seeded.db.tables["orders"] == []


def test_explicit_delivery_boy_must_exist(seeded) -> None:
    with pytest.raises(NotFoundError):
        create_automatic_orders(seeded.customer.id, delivery_boy_id="missing")


def test_missing_delivery_boy_is_rejected(seeded) -> None:
    customer_store.update_customer(seeded.customer.id, {"delivery_boy_id": None})
    with pytest.raises(ValueError):
        create_automatic_orders(seeded.customer.id)


def test_unknown_customer(fake_db) -> None:
    with pytest.raises(NotFoundError):
        create_automatic_orders("nope")


def test_invalid_target_date(seeded) -> None:
    with pytest.raises(ValueError):
        create_automatic_orders(seeded.customer.id, target_date="soon")


def test_conflicting_number_is_retried(seeded) -> None:
    # A number issued outside the counter collides with the first reservation.
    seeded.db.tables["orders"].append({"id": "legacy", "order_number": "ORD-20250105-0001"})

    result = create_automatic_orders(seeded.customer.id, target_date=date(2025, 1, 5))
    assert result.created[0].order_number == "ORD-20250105-0002"


def test_conflict_retries_are_bounded(seeded, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(numbering, "next_order_sequence", lambda day: 1)
    seeded.db.tables["orders"].append({"id": "legacy", "order_number": "ORD-20250105-0001"})

    with pytest.raises(ConflictError):
        create_automatic_orders(seeded.customer.id, target_date=date(2025, 1, 5))


def test_concurrent_creations_get_distinct_numbers(seeded) -> None:
    customer_ids = [seeded.customer.id]
    for index in range(7):
        clone = customer_store.insert_customer(
            {
                "name": f"Clone {index}",
                "phone_number": f"98000000{index:02d}",
                "address": "Somewhere",
                "subscription_plan": "Monthly",
                "subscription_status": "active",
                "start_date": "2025-01-01",
                "end_date": "2025-01-31",
                "products": [{"product_id": seeded.milk.id, "product_size": "1/2ltr", "quantity": 1, "price": 20}],
                "delivery_boy_id": seeded.boy.id,
            }
        )
        customer_ids.append(clone.id)

    errors: list[Exception] = []
    barrier = threading.Barrier(len(customer_ids))

    def worker(customer_id: str) -> None:
        barrier.wait()
        try:
            create_automatic_orders(customer_id, target_date=date(2025, 1, 5))
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(cid,)) for cid in customer_ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    numbers = [row["order_number"] for row in seeded.db.tables["orders"]]
    assert len(numbers) == len(customer_ids)
    assert len(set(numbers)) == len(numbers)


def test_custom_order(seeded) -> None:
    order = create_custom_order(
        seeded.customer.id,
        [{"product_id": seeded.curd.id, "quantity": 2, "price": 45}],
        delivery_date=date(2025, 2, 10),
    )
    assert order.order_type == "custom"
    assert order.total_amount == 90
    assert order.delivery_date == date(2025, 2, 10)
    assert order_store.get_order(order.id).order_number == order.order_number


def test_custom_order_validation(seeded) -> None:
    with pytest.raises(ValueError):
        create_custom_order(seeded.customer.id, [])
    with pytest.raises(NotFoundError):
        create_custom_order(seeded.customer.id, [{"product_id": "ghost", "quantity": 1}])


def test_custom_order_does_not_block_subscription_order(seeded) -> None:
    create_custom_order(seeded.customer.id, [{"product_id": seeded.milk.id, "quantity": 1}], "2025-01-05")
    result = create_automatic_orders(seeded.customer.id, target_date="2025-01-05")
    assert len(result.created) == 1


def test_notification_does_not_hold_up_order_creation(seeded, monkeypatch: pytest.MonkeyPatch) -> None:
    release = threading.Event()
    sent: list[str] = []

    def slow_notify(customer, order, client=None):
        release.wait(timeout=5)
        sent.append(order.order_number)
        return True

    executor = ThreadPoolExecutor(max_workers=1)
    monkeypatch.setattr(whatsapp.settings, "whatsapp_phone_number_id", "12345")
    monkeypatch.setattr(whatsapp.settings, "whatsapp_access_token", "secret")
    monkeypatch.setattr(whatsapp, "notify_order_scheduled", slow_notify)
    monkeypatch.setattr(whatsapp, "_executor", executor)

    result = create_automatic_orders(seeded.customer.id, target_date=date(2025, 1, 5))

    assert [order.order_number for order in result.created] == ["ORD-20250105-0001"]
    assert sent == []
    release.set()
    executor.shutdown(wait=True)
    assert sent == ["ORD-20250105-0001"]
