"""
Job record store: URL deduplication, the MAX_JOBS cap and clearing.

All read-modify-write cycles on the record list run under one lock, so
concurrent scrapes and sweeps cannot lose each other's updates.
"""

import threading
import time
from typing import Any, Dict, List, Optional

from .badge import StatusBadge
from .logger import StructuredLogger, get_logger
from .schema import validate_job_record
from .storage import KeyValueStore
from .trends import get_trends

STORAGE_KEY = "skillos_jobs"
MAX_JOBS = 100


def now_ms() -> int:
    return int(time.time() * 1000)


class JobStore:
    """Job records kept in insertion (recency) order inside one bucket."""

    def __init__(
        self,
        store: KeyValueStore,
        badge: Optional[StatusBadge] = None,
        logger: Optional[StructuredLogger] = None,
        max_jobs: int = MAX_JOBS,
    ):
        self.store = store
        self.badge = badge if badge is not None else StatusBadge()
        self.logger = logger if logger is not None else get_logger()
        self.max_jobs = max_jobs
        self.lock = threading.RLock()

    def load_jobs(self) -> List[Dict[str, Any]]:
        """Read stored records, dropping any that fail validation."""
        raw = self.store.get(STORAGE_KEY, [])
        if not isinstance(raw, list):
            self.logger.warning("Stored job list is not a list, ignoring it", type=type(raw).__name__)
            return []

        jobs = []
        for record in raw:
            errors = validate_job_record(record)
            if errors:
                self.logger.warning("Dropping malformed stored record", errors=errors)
                continue
            jobs.append(record)
        return jobs

    def save_jobs(self, jobs: List[Dict[str, Any]]) -> None:
        self.store.set(STORAGE_KEY, jobs)

    def count(self) -> int:
        return len(self.load_jobs())

    def add_job(self, record: Any) -> Dict[str, Any]:
        """
        Append a scraped record unless its URL is already stored.

        The list is then capped to the newest max_jobs records, written
        back, and the badge updated. A duplicate is not an error.

        Returns:
            {"status": "new" | "duplicate", "count": n} or
            {"status": "validation_error", "errors": [...]}
        """
        errors = validate_job_record(record)
        if errors:
            self.logger.record_rejected()
            self.logger.warning("Rejected job record", url=_url_of(record), errors=errors)
            return {"status": "validation_error", "errors": errors}

        with self.lock:
            jobs = self.load_jobs()
            exists = any(j["url"] == record["url"] for j in jobs)
            if exists:
                status = "duplicate"
                self.logger.record_duplicate()
            else:
                jobs.append(record)
                status = "new"
                self.logger.record_job_added()

            overflow = len(jobs) - self.max_jobs
            if overflow > 0:
                jobs = jobs[-self.max_jobs:]
                self.logger.record_evicted(overflow)
                self.logger.debug("Evicted oldest records over cap", evicted=overflow, cap=self.max_jobs)

            self.save_jobs(jobs)
            self.badge.show_count(len(jobs))

        self.logger.debug(f"Job record {status}", url=record["url"], count=len(jobs))
        return {"status": status, "count": len(jobs)}

    def get_trends(self) -> List[Dict[str, Any]]:
        return get_trends(self.load_jobs())

    def clear(self) -> None:
        """Delete every stored record and clear the badge."""
        with self.lock:
            self.store.remove(STORAGE_KEY)
            self.badge.clear()
        self.logger.info("Cleared all job records")


def _url_of(record: Any) -> Optional[str]:
    if isinstance(record, dict) and isinstance(record.get("url"), str):
        return record["url"]
    return None
