"""
Cleanup module for removing stale job records.

Stale records are those scraped more than a given number of days ago
(default: 7). A background scheduler runs the sweep on a fixed interval
(default: weekly) for the lifetime of the process.
"""

import threading
from typing import Optional, Tuple

from .jobs import JobStore, now_ms

RETENTION_DAYS = 7
DAY_MS = 24 * 60 * 60 * 1000
SWEEP_INTERVAL_MINUTES = 10080


def cutoff_ms(days: int = RETENTION_DAYS, now: Optional[int] = None) -> int:
    """Epoch milliseconds before which a record counts as stale."""
    if now is None:
        now = now_ms()
    return now - days * DAY_MS


def sweep_stale_jobs(
    job_store: JobStore,
    days: int = RETENTION_DAYS,
    now: Optional[int] = None,
) -> Tuple[int, int]:
    """
    Remove job records older than the specified number of days.

    Only records with a timestamp strictly after the cutoff are kept.

    Args:
        job_store: Store holding the records
        days: Number of days to keep records (default: 7)
        now: Current time in epoch milliseconds (default: wall clock)

    Returns:
        Tuple of (total_jobs_before, total_jobs_after)
    """
    logger = job_store.logger
    cutoff = cutoff_ms(days, now)

    with job_store.lock:
        jobs = job_store.load_jobs()
        fresh = [j for j in jobs if j["timestamp"] > cutoff]
        job_store.save_jobs(fresh)
        job_store.badge.reflect_count(len(fresh))

    removed = len(jobs) - len(fresh)
    logger.record_evicted(removed)
    logger.info(
        f"Cleanup complete: {removed} removed, {len(fresh)} remaining",
        jobs_before=len(jobs),
        jobs_removed=removed,
        jobs_after=len(fresh),
        cutoff=cutoff,
    )
    return (len(jobs), len(fresh))


class RetentionScheduler:
    """Runs sweep_stale_jobs every interval on a daemon thread."""

    def __init__(
        self,
        job_store: JobStore,
        interval_minutes: float = SWEEP_INTERVAL_MINUTES,
        days: int = RETENTION_DAYS,
    ):
        self.job_store = job_store
        self.interval_seconds = interval_minutes * 60
        self.days = days
        self.runs = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="retention-sweeper", daemon=True)
        self._thread.start()
        self.job_store.logger.info("Retention sweeper started", interval_minutes=self.interval_seconds / 60)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        # first sweep fires one full interval after start
        while not self._stop.wait(self.interval_seconds):
            try:
                sweep_stale_jobs(self.job_store, days=self.days)
            except Exception as e:
                self.job_store.logger.record_error(type(e).__name__)
                self.job_store.logger.error(f"Cleanup failed: {e}", error=str(e), days=self.days)
            self.runs += 1
