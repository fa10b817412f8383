from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

_DAILY_JOB_EXCEPTIONS = (LookupError, OSError, RuntimeError, ValueError, SQLAlchemyError)


def parse_run_time(value: str) -> time:
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError("Run time must be in HH:MM format")
    hour = int(parts[0])
    minute = int(parts[1])
    second = int(parts[2]) if len(parts) > 2 else 0
    return time(hour=hour, minute=minute, second=second)


def next_run_after(run_time: time, now: datetime) -> datetime:
    candidate = now.replace(
        hour=run_time.hour,
        minute=run_time.minute,
        second=run_time.second,
        microsecond=0,
    )
    if candidate <= now:
        candidate = candidate + timedelta(days=1)
    return candidate


@dataclass
class DailyJob:
    name: str
    run_time: time
    func: Callable[[date], object]
    next_run: Optional[datetime] = None
    last_run_date: Optional[date] = None
    last_result: object = None
    last_error: Optional[str] = None


class DailyScheduler:
    """Runs date-keyed jobs once per day on a background thread.

    Each job receives the calendar day it runs for, so a job that fires a
    little after midnight works on the new day.
    """

    def __init__(self, *, timezone_mode: str = "local", poll_seconds: int = 30):
        self._jobs: list[DailyJob] = []
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._poll_seconds = max(1, int(poll_seconds))
        self._tz = timezone.utc if timezone_mode.lower() == "utc" else None

    def _now(self) -> datetime:
        return datetime.now(tz=self._tz)

    def add_daily_job(self, name: str, run_time: str, func: Callable[[date], object]) -> DailyJob:
        job = DailyJob(name=name, run_time=parse_run_time(run_time), func=func)
        job.next_run = next_run_after(job.run_time, self._now())
        with self._lock:
            self._jobs.append(job)
        return job

    def jobs(self) -> list[DailyJob]:
        with self._lock:
            return list(self._jobs)

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="stock-scheduler", daemon=True)
        self._thread.start()
        logger.info("Scheduler started with %d job(s).", len(self._jobs))

    def stop(self) -> None:
        if not self._thread:
            return
        self._stop_event.set()
        self._thread.join(timeout=self._poll_seconds + 1)
        self._thread = None
        logger.info("Scheduler stopped.")

    def run_pending(self) -> None:
        now = self._now()
        for job in self.jobs():
            if job.next_run and now >= job.next_run:
                self.run_job(job, now.date())
                job.next_run = next_run_after(job.run_time, now)

    def run_job(self, job: DailyJob, run_date: date):
        logger.info("Running daily job %s for %s", job.name, run_date)
        try:
            job.last_result = job.func(run_date)
            job.last_error = None
        except _DAILY_JOB_EXCEPTIONS as exc:
            job.last_error = str(exc)
            logger.exception("Daily job failed: %s", job.name)
        job.last_run_date = run_date
        return job.last_result

    def run_forever(self) -> None:
        """Poll in the calling thread until ``stop()`` is called."""
        self._stop_event.clear()
        self._run()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.run_pending()
            self._stop_event.wait(self._poll_seconds)


__all__ = ["DailyJob", "DailyScheduler", "next_run_after", "parse_run_time"]
