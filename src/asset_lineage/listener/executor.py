"""Concurrent dispatch that preserves per-originator ordering.

Notifications from one originator are dispatched strictly in submission
order, each finishing (publish included) before the next starts.
Notifications from different originators run in parallel on a thread pool.

Example:
    >>> with OriginatorOrderedExecutor(listener, max_workers=4) as executor:
    ...     futures = [executor.submit(n) for n in notifications]
    >>> for future in futures:
    ...     future.result()  # re-raises the dispatch error, if any
"""

from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from types import TracebackType

    from asset_lineage.listener.dispatcher import AssetLineageListener
    from asset_lineage.listener.types import ChangeNotification

logger = structlog.get_logger(__name__)

DEFAULT_MAX_WORKERS = 4
"""Default number of originators dispatched in parallel."""

_UNKNOWN_ORIGINATOR = ""

_Pending = tuple["ChangeNotification | None", "Future[None]"]


def _ordering_key(notification: ChangeNotification | None) -> str:
    if notification is None or notification.originator is None:
        return _UNKNOWN_ORIGINATOR
    return notification.originator.metadata_collection_id


class OriginatorOrderedExecutor:
    """Dispatches notifications concurrently across originators.

    Each originator has its own FIFO lane. At most one worker drains a lane
    at a time, so a lane never blocks a pool thread while waiting.

    Thread Safety:
        submit() may be called from any number of threads.
    """

    def __init__(
        self,
        listener: AssetLineageListener,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """Initialize the executor.

        Args:
            listener: Listener that dispatches each notification.
            max_workers: Maximum number of originators dispatched in parallel.

        Raises:
            ValueError: If max_workers is less than 1.
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._listener = listener
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="asset-lineage"
        )
        self._lanes: dict[str, deque[_Pending]] = {}
        self._lock = threading.Lock()
        self._shutdown = False

    def submit(self, notification: ChangeNotification | None) -> Future[None]:
        """Queue a notification behind earlier ones from the same originator.

        Args:
            notification: The inbound notification.

        Returns:
            Future resolved when the notification has been dispatched. It
            carries the dispatch exception if dispatch failed.

        Raises:
            RuntimeError: If the executor has been shut down.
        """
        future: Future[None] = Future()
        key = _ordering_key(notification)
        with self._lock:
            if self._shutdown:
                raise RuntimeError("Cannot submit after shutdown")
            lane = self._lanes.get(key)
            if lane is None:
                lane = deque()
                self._lanes[key] = lane
                self._pool.submit(self._drain, key)
            lane.append((notification, future))
        return future

    def _drain(self, key: str) -> None:
        """Dispatch a lane's notifications in order until it is empty."""
        while True:
            with self._lock:
                lane = self._lanes[key]
                if not lane:
                    del self._lanes[key]
                    return
                notification, future = lane.popleft()

            if not future.set_running_or_notify_cancel():
                continue
            try:
                self._listener.process_instance_event(notification)
            except BaseException as e:
                # Failure is confined to this notification; the lane keeps draining.
                logger.debug(
                    "lane_dispatch_failed",
                    originator=key,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                future.set_exception(e)
            else:
                future.set_result(None)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting notifications and optionally wait for queued ones.

        Args:
            wait: Block until every queued notification has been dispatched.
        """
        with self._lock:
            self._shutdown = True
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> OriginatorOrderedExecutor:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown(wait=True)


__all__ = ["DEFAULT_MAX_WORKERS", "OriginatorOrderedExecutor"]
