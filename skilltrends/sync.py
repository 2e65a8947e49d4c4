"""
Push the current trend snapshot to the configured SkillOS endpoint.

One POST per call, no retries. Failures come back as a result dict instead
of an exception so the caller can relay them unchanged.
"""

from typing import Any, Dict, Optional

import requests

from .jobs import JobStore, now_ms
from .storage import KeyValueStore

API_URL_KEY = "skillos_api_url"
NO_URL_ERROR = "No API URL configured"


def get_api_url(config_store: KeyValueStore) -> Optional[str]:
    url = config_store.get(API_URL_KEY)
    if isinstance(url, str) and url.strip():
        return url.strip()
    return None


def set_api_url(config_store: KeyValueStore, url: Optional[str]) -> None:
    if url:
        config_store.set(API_URL_KEY, url)
    else:
        config_store.remove(API_URL_KEY)


class SyncDispatcher:
    def __init__(
        self,
        job_store: JobStore,
        config_store: KeyValueStore,
        timeout: Optional[float] = None,
    ):
        self.job_store = job_store
        self.config_store = config_store
        # None = wait indefinitely
        self.timeout = timeout

    @property
    def logger(self):
        return self.job_store.logger

    def sync(self) -> Dict[str, Any]:
        """
        Send {"trends": [...], "synced_at": epoch_ms} to the configured URL.

        Returns:
            {"success": True} on a 2xx response, otherwise
            {"success": False, "error": message}
        """
        api_url = get_api_url(self.config_store)
        if not api_url:
            self.logger.warning("Sync skipped: no API URL configured")
            return {"success": False, "error": NO_URL_ERROR}

        self.logger.record_sync_attempt()
        try:
            trends = self.job_store.get_trends()
            resp = requests.post(
                api_url,
                json={"trends": trends, "synced_at": now_ms()},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            if not 200 <= resp.status_code < 300:
                self.logger.record_sync_failure(f"HTTPError_{resp.status_code}")
                self.logger.error("Sync rejected by endpoint", url=api_url, status=resp.status_code)
                return {"success": False, "error": f"HTTP {resp.status_code}"}
        except requests.exceptions.RequestException as e:
            self.logger.record_sync_failure(type(e).__name__)
            self.logger.error("Sync request error", url=api_url, error=str(e))
            return {"success": False, "error": str(e)}

        self.logger.record_sync_success()
        self.logger.info("Synced trends", url=api_url, skills=len(trends))
        return {"success": True}
