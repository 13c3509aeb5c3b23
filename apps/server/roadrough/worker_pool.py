"""Small thread-pool wrapper for work that must not block the event stream.

Record uploads go through here so a slow network never delays motion or
GPS processing.

Usage::

    pool = WorkerPool(max_workers=2)
    future = pool.submit(uploader.submit, record)
    pool.shutdown()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TypeVar

LOGGER = logging.getLogger(__name__)

R = TypeVar("R")

DEFAULT_MAX_WORKERS = 2


class WorkerPool:
    """Fixed-size thread pool with lightweight metrics.

    Parameters
    ----------
    max_workers:
        Number of worker threads.
    thread_name_prefix:
        Prefix for worker-thread names (aids debugging).
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        thread_name_prefix: str = "roadrough-worker",
    ) -> None:
        self._max_workers = max(1, int(max_workers))
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix=thread_name_prefix,
        )
        self._total_tasks: int = 0
        self._pending: int = 0
        self._metrics_lock = threading.Lock()
        self._alive = True

    def submit(self, fn: Callable[..., R], *args: Any, **kwargs: Any) -> Future[R]:
        """Submit a single callable; returns a ``Future``."""
        if not self._alive:
            raise RuntimeError("WorkerPool is shut down")
        with self._metrics_lock:
            self._total_tasks += 1
            self._pending += 1
        future = self._executor.submit(fn, *args, **kwargs)
        future.add_done_callback(self._task_done)
        return future

    def _task_done(self, _future: Future[Any]) -> None:
        with self._metrics_lock:
            self._pending -= 1

    def shutdown(self, wait: bool = True) -> None:
        """Shut down the pool.  Safe to call multiple times."""
        self._alive = False
        self._executor.shutdown(wait=wait)

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def pending(self) -> int:
        with self._metrics_lock:
            return self._pending

    def stats(self) -> dict[str, Any]:
        with self._metrics_lock:
            return {
                "max_workers": self._max_workers,
                "total_tasks": self._total_tasks,
                "pending": self._pending,
                "alive": self._alive,
            }
