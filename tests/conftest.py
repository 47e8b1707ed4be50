"""In-memory stand-in for the Supabase client used by the persistence layer."""

from __future__ import annotations

import json
import threading
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest
from postgrest.exceptions import APIError

UNIQUE_COLUMNS = {
    "customers": ("phone_number",),
    "products": ("product_code",),
    "delivery_boys": ("email", "phone_number"),
    "orders": ("order_number",),
}

TABLES = (*UNIQUE_COLUMNS, "payments", "bottle_transactions")


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self.db = db
        self.table = table
        self.action = "select"
        self.payload: dict | None = None
        self.count_mode: str | None = None
        self.filters: list = []
        self.ordering: tuple[str, bool] | None = None
        self.window: tuple[int, int] | None = None
        self.max_rows: int | None = None

    def select(self, *columns, count=None):
        self.action = "select"
        self.count_mode = count
        return self

    def insert(self, payload: dict):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def ilike(self, column, pattern):
        needle = pattern.strip("%").lower()
        self.filters.append(lambda row: needle in str(row.get(column) or "").lower())
        return self

    def in_(self, column, values):
        allowed = set(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] <= value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def range(self, start, end):
        self.window = (start, end)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(check(row) for check in self.filters)

    def execute(self):
        with self.db.lock:
            return getattr(self, f"_execute_{self.action}")()

    def _execute_select(self):
        rows = [row for row in self.db.tables[self.table] if self._matches(row)]
        if self.ordering:
            column, desc = self.ordering
            rows.sort(key=lambda row: row.get(column) or "", reverse=desc)
        total = len(rows)
        if self.window:
            rows = rows[self.window[0] : self.window[1] + 1]
        if self.max_rows is not None:
            rows = rows[: self.max_rows]
        return SimpleNamespace(data=_copy(rows), count=total if self.count_mode else None)

    def _execute_insert(self):
        row = _copy(self.payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.db.next_timestamp())
        self.db.check_unique(self.table, row)
        self.db.tables[self.table].append(row)
        return SimpleNamespace(data=_copy([row]), count=None)

    def _execute_update(self):
        changes = _copy(self.payload)
        updated = []
        for row in self.db.tables[self.table]:
            if self._matches(row):
                self.db.check_unique(self.table, {**row, **changes}, exclude=row)
                row.update(changes)
                updated.append(row)
        return SimpleNamespace(data=_copy(updated), count=None)

    def _execute_delete(self):
        kept, removed = [], []
        for row in self.db.tables[self.table]:
            (removed if self._matches(row) else kept).append(row)
        self.db.tables[self.table] = kept
        return SimpleNamespace(data=_copy(removed), count=None)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict) -> None:
        self.db = db
        self.name = name
        self.params = params

    def execute(self):
        assert self.name == "next_order_sequence"
        with self.db.lock:
            day = self.params["p_day"]
            self.db.counters[day] = self.db.counters.get(day, 0) + 1
            return SimpleNamespace(data=self.db.counters[day], count=None)


class FakeSupabase:
    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.tables: dict[str, list[dict]] = {name: [] for name in TABLES}
        self.counters: dict[str, int] = {}
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        return FakeRpc(self, name, params)

    def next_timestamp(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def check_unique(self, table: str, row: dict, exclude: dict | None = None) -> None:
        for column in UNIQUE_COLUMNS.get(table, ()):
            value = row.get(column)
            if value is None:
                continue
            for existing in self.tables[table]:
                if existing is not exclude and existing.get(column) == value:
                    raise APIError(
                        {
                            "code": "23505",
                            "message": f'duplicate key value violates unique constraint "{table}_{column}_key"',
                            "details": None,
                            "hint": None,
                        }
                    )


def _copy(value):
    # Rows travel as JSON, so anything not serialisable fails here as it would over the wire.
    return json.loads(json.dumps(value))


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeSupabase:
    from src.dairyops.persistence import base

    db = FakeSupabase()
    monkeypatch.setattr(base, "get_supabase_client", lambda: db)
    return db


@pytest.fixture
def storage_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    from src.dairyops.persistence.filesystem import FileStorage
    from src.dairyops.services.reports import delivery_sheet

    monkeypatch.setattr(delivery_sheet, "FileStorage", lambda: FileStorage(root=tmp_path))
    return tmp_path


@pytest.fixture
def seeded(fake_db: FakeSupabase) -> SimpleNamespace:
    """Two products, a delivery boy and a Daily customer starting 01/01/2025."""
    from src.dairyops.persistence import customers, delivery_boys, products

    milk = products.insert_product(
        {"product_name": "Cow Milk", "description": "Fresh", "size": "1/2ltr", "price": 20, "stock": 100,
         "product_code": "COW-MILK-001"}
    )
    curd = products.insert_product(
        {"product_name": "Curd", "description": "Set curd", "size": "1ltr", "price": 50, "stock": 40,
         "product_code": "CURD-001"}
    )
    boy = delivery_boys.insert_delivery_boy(
        {"name": "Ravi", "email": "ravi@example.com", "phone_number": "9000000001", "area": "North"}
    )
    customer = customers.insert_customer(
        {
            "name": "Asha",
            "phone_number": "9876543210",
            "address": "12 Lake Road",
            "subscription_plan": "Monthly",
            "subscription_status": "active",
            "start_date": "2025-01-01",
            "end_date": "2025-01-31",
            "custom_delivery_dates": [],
            "absent_days": [],
            "products": [
                {"product_id": milk.id, "product_size": "1/2ltr", "quantity": 2, "price": 20, "total_price": 40},
                {"product_id": curd.id, "product_size": "1ltr", "quantity": 1, "price": 50, "total_price": 50},
            ],
            "delivery_boy_id": boy.id,
            "payment_method": "COD",
        }
    )
    return SimpleNamespace(db=fake_db, milk=milk, curd=curd, boy=boy, customer=customer)
