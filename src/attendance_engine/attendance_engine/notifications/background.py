from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationEvent
from .dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


class BackgroundNotifier:
    """Fire-and-forget wrapper around a dispatcher.

    Deliveries run on a small thread pool; their failures are logged and never
    reach the caller that triggered them.
    """

    def __init__(self, dispatcher: NotificationDispatcher, *, max_workers: int = 2):
        self._dispatcher = dispatcher
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def _deliver(self, username: str, event: NotificationEvent, timestamp: datetime) -> bool:
        try:
            self._dispatcher.notify_remote_work(username, event, timestamp)
            return True
        except Exception:
            logger.warning("Remote work %s notification failed for %s", event.value, username, exc_info=True)
            return False

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def notify(self, username: str, event: NotificationEvent, timestamp: datetime) -> Optional[Future]:
        try:
            future = self._executor.submit(self._deliver, username, event, timestamp)
        except RuntimeError:
            # Executor already shut down.
            logger.warning("Notifier is closed; dropping %s notification for %s", event.value, username)
            return None
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait for queued deliveries (scripts and tests)."""
        with self._lock:
            pending = list(self._pending)
        wait(pending, timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
