"""
Pytest configuration and shared fixtures.
"""

import pytest
import requests
from typing import Any, Dict

from skilltrends.logger import StructuredLogger, get_logger

# Global logger used by module-level code; keep it off disk during tests.
get_logger(enable_file=False, enable_console=False)

from skilltrends.badge import StatusBadge  # noqa: E402
from skilltrends.jobs import JobStore  # noqa: E402
from skilltrends.router import MessageRouter  # noqa: E402
from skilltrends.storage import MemoryStore  # noqa: E402
from skilltrends.sync import SyncDispatcher  # noqa: E402

NOW_MS = 1_760_000_000_000


@pytest.fixture
def quiet_logger() -> StructuredLogger:
    """Logger with no handlers and fresh metrics."""
    return StructuredLogger(name="skilltrends-test", enable_file=False, enable_console=False)


@pytest.fixture
def make_job():
    """Factory for valid job records."""
    def _make(n: int = 0, skills=None, timestamp: int = NOW_MS, **extra) -> Dict[str, Any]:
        record = {
            "title": f"engineer {n}",
            "company": f"company{n}",
            "url": f"https://www.linkedin.com/jobs/view/{n}",
            "skills": ["Python"] if skills is None else skills,
            "timestamp": timestamp,
            "source": "linkedin.com",
        }
        record.update(extra)
        return record
    return _make


@pytest.fixture
def local_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def config_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def badge() -> StatusBadge:
    return StatusBadge()


@pytest.fixture
def job_store(local_store, badge, quiet_logger) -> JobStore:
    return JobStore(local_store, badge, logger=quiet_logger)


@pytest.fixture
def dispatcher(job_store, config_store) -> SyncDispatcher:
    return SyncDispatcher(job_store, config_store)


@pytest.fixture
def router(job_store, dispatcher):
    r = MessageRouter(job_store, dispatcher)
    yield r
    r.close()


class FakeResponse:
    """Stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


@pytest.fixture
def fake_response():
    return FakeResponse
