from datetime import datetime, time

from src.dairyops.services.jobs import OrderScheduler, next_run_after
from src.dairyops.services.jobs.scheduler import ScheduledJob


def test_next_run_later_today() -> None:
    assert next_run_after(datetime(2025, 1, 5, 2, 15), time(3, 0)) == datetime(2025, 1, 5, 3, 0)


def test_next_run_rolls_to_tomorrow() -> None:
    assert next_run_after(datetime(2025, 1, 5, 3, 0), time(3, 0)) == datetime(2025, 1, 6, 3, 0)
    assert next_run_after(datetime(2025, 1, 31, 10, 0), time(9, 0)) == datetime(2025, 2, 1, 9, 0)


def test_next_due_picks_earliest_job() -> None:
    jobs = [ScheduledJob("daily", time(3, 0), lambda: None), ScheduledJob("lookahead", time(9, 0), lambda: None)]
    scheduler = OrderScheduler(jobs=jobs, clock=lambda: datetime(2025, 1, 5, 4, 0))

    due_at, job = scheduler.next_due()
    assert job.name == "lookahead"
    assert due_at == datetime(2025, 1, 5, 9, 0)


def test_failing_job_is_contained(caplog) -> None:
    def boom():
        raise RuntimeError("database down")

    scheduler = OrderScheduler(jobs=[], clock=lambda: datetime(2025, 1, 5))
    scheduler.run_job(ScheduledJob("daily", time(3, 0), boom))

    assert "database down" in caplog.text


def test_start_and_stop() -> None:
    scheduler = OrderScheduler(
        jobs=[ScheduledJob("daily", time(3, 0), lambda: None)],
        clock=lambda: datetime(2025, 1, 5, 4, 0),
    )
    scheduler.start()
    scheduler.stop(timeout=1.0)
    assert scheduler._thread is None
