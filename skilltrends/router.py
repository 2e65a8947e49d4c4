"""
Message router for inbound commands.

Messages are dicts with a "type" and an optional "data" payload:

    JOB_SCRAPED      add data as a job record          -> None
    GET_TRENDS       compute current trends            -> Future[list]
    CLEAR_DATA       delete all records, clear badge   -> None
    SYNC_TO_SKILLOS  push trends to the API            -> Future[dict]

dispatch() returns a Future only for commands that reply; a caller gets
None back for fire-and-forget commands and for unknown message types.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

from .jobs import JobStore
from .sync import SyncDispatcher

JOB_SCRAPED = "JOB_SCRAPED"
GET_TRENDS = "GET_TRENDS"
CLEAR_DATA = "CLEAR_DATA"
SYNC_TO_SKILLOS = "SYNC_TO_SKILLOS"


class MessageRouter:
    def __init__(self, job_store: JobStore, dispatcher: SyncDispatcher):
        self.job_store = job_store
        self.dispatcher = dispatcher
        self.logger = job_store.logger
        # one worker: replies are produced in the order requests arrive
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="router")
        self._fire: Dict[str, Callable[[Any], None]] = {
            JOB_SCRAPED: self._handle_job_scraped,
            CLEAR_DATA: self._handle_clear_data,
        }
        self._reply: Dict[str, Callable[[Any], Any]] = {
            GET_TRENDS: self._handle_get_trends,
            SYNC_TO_SKILLOS: self._handle_sync,
        }

    def dispatch(self, message: Any) -> Optional[Future]:
        """Route one message; returns a Future when a reply will follow."""
        if not isinstance(message, dict):
            return None
        msg_type = message.get("type")
        data = message.get("data")
        if not isinstance(msg_type, str):
            return None

        if msg_type in self._fire:
            try:
                self._fire[msg_type](data)
            except Exception as e:
                self.logger.record_error(type(e).__name__)
                self.logger.error(f"{msg_type} handler failed", error=str(e))
            return None

        if msg_type in self._reply:
            return self._executor.submit(self._reply[msg_type], data)

        self.logger.debug("Ignoring unknown message", type=str(msg_type))
        return None

    def request(self, message: Any, timeout: Optional[float] = None) -> Any:
        """Dispatch and wait for the reply, if the command has one."""
        future = self.dispatch(message)
        if future is None:
            return None
        return future.result(timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _handle_job_scraped(self, data: Any) -> None:
        self.job_store.add_job(data)

    def _handle_clear_data(self, data: Any) -> None:
        self.job_store.clear()

    def _handle_get_trends(self, data: Any):
        try:
            return self.job_store.get_trends()
        except Exception as e:
            self.logger.record_error(type(e).__name__)
            self.logger.error("GET_TRENDS failed", error=str(e))
            return []

    def _handle_sync(self, data: Any) -> Dict[str, Any]:
        try:
            return self.dispatcher.sync()
        except Exception as e:
            self.logger.record_sync_failure(type(e).__name__)
            self.logger.error("Sync failed", error=str(e))
            return {"success": False, "error": str(e)}
