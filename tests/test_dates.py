from datetime import date, datetime, timezone

import pytest

from src.dairyops.services.scheduling.dates import (
    end_of_next_month,
    format_ddmmyyyy,
    normalize_date,
    parse_clock_time,
    parse_universal_date,
    to_iso,
)


def test_universal_format_round_trips() -> None:
    assert format_ddmmyyyy(parse_universal_date("05/01/2025")) == "05/01/2025"


@pytest.mark.parametrize("text", ["05/01/2025", "05-01-2025", "5/1/2025"])
def test_day_first_separators(text: str) -> None:
    assert parse_universal_date(text) == date(2025, 1, 5)


@pytest.mark.parametrize("text", ["2025-01-05", "05/01-2025", "31/02/2025", "", "tomorrow", None])
def test_parse_universal_date_rejects_other_shapes(text) -> None:
    assert parse_universal_date(text) is None


def test_normalize_accepts_iso_and_objects() -> None:
    assert normalize_date("2025-01-05") == date(2025, 1, 5)
    assert normalize_date(date(2025, 1, 5)) == date(2025, 1, 5)
    assert normalize_date(datetime(2025, 1, 5, 23, 59)) == date(2025, 1, 5)


def test_normalize_converts_aware_values_to_business_day() -> None:
    # 20:00 UTC is already the next day in Asia/Kolkata (+05:30)
    assert normalize_date("2025-01-05T20:00:00Z") == date(2025, 1, 6)
    assert normalize_date(datetime(2025, 1, 5, 20, 0, tzinfo=timezone.utc)) == date(2025, 1, 6)


def test_normalize_epoch_seconds_and_millis() -> None:
    seconds = datetime(2025, 1, 5, 6, 0, tzinfo=timezone.utc).timestamp()
    assert normalize_date(seconds) == date(2025, 1, 5)
    assert normalize_date(seconds * 1000) == date(2025, 1, 5)


@pytest.mark.parametrize("value", [None, True, "", "not a date", object()])
def test_normalize_never_raises(value) -> None:
    assert normalize_date(value) is None


def test_storage_and_display_formats() -> None:
    assert to_iso("05/01/2025") == "2025-01-05"
    assert format_ddmmyyyy("2025-01-05") == "05/01/2025"
    assert format_ddmmyyyy("garbage") is None


def test_end_of_next_month() -> None:
    assert end_of_next_month(date(2025, 1, 31)) == date(2025, 2, 28)
    assert end_of_next_month(date(2024, 1, 15)) == date(2024, 2, 29)
    assert end_of_next_month(date(2025, 12, 31)) == date(2026, 1, 31)


def test_parse_clock_time() -> None:
    assert parse_clock_time("03:00").hour == 3
    assert parse_clock_time("09:30").minute == 30
