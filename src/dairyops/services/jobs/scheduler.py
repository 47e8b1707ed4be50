"""In-process clock for the daily order jobs."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Callable, Optional, Sequence

from ...config import settings
from ..scheduling.dates import now as business_now
from ..scheduling.dates import parse_clock_time
from .runner import run_daily_orders, run_lookahead_orders

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScheduledJob:
    name: str
    at: time
    func: Callable[[], object]


def next_run_after(current: datetime, at: time) -> datetime:
    """First moment strictly after ``current`` whose wall-clock time is ``at``."""
    candidate = current.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)
    if candidate <= current:
        candidate += timedelta(days=1)
    return candidate


def default_jobs() -> list[ScheduledJob]:
    return [
        ScheduledJob("daily-orders", parse_clock_time(settings.daily_order_time), run_daily_orders),
        ScheduledJob("lookahead-orders", parse_clock_time(settings.lookahead_order_time), run_lookahead_orders),
    ]


class OrderScheduler:
    """Runs each job once a day on a daemon thread.

    Jobs run on this thread alongside request handling; there is no locking
    against concurrent HTTP-triggered order creation.
    """

    def __init__(
        self,
        jobs: Sequence[ScheduledJob] | None = None,
        clock: Callable[[], datetime] = business_now,
    ) -> None:
        self.jobs = list(jobs) if jobs is not None else default_jobs()
        self._clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def next_due(self) -> tuple[datetime, ScheduledJob]:
        current = self._clock()
        return min(((next_run_after(current, job.at), job) for job in self.jobs), key=lambda item: item[0])

    def run_job(self, job: ScheduledJob) -> None:
        logger.info(f"Running scheduled job '{job.name}'")
        try:
            job.func()
        except Exception as exc:
            logger.exception(f"Scheduled job '{job.name}' failed: {exc}")

    def _loop(self) -> None:
        while not self._stop.is_set():
            due_at, job = self.next_due()
            wait_seconds = max((due_at - self._clock()).total_seconds(), 0.0)
            logger.debug(f"Next job '{job.name}' at {due_at.isoformat()} (in {wait_seconds:.0f}s)")
            if self._stop.wait(wait_seconds):
                break
            if self._clock() < due_at:
                continue
            self.run_job(job)

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="order-scheduler", daemon=True)
        self._thread.start()
        logger.info(f"Order scheduler started with jobs: {[(job.name, job.at.strftime('%H:%M')) for job in self.jobs]}")

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None
