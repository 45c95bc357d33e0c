"""Fire-and-forget work that must not delay the HTTP response.

Tasks run on a process-wide thread pool. Lambda may freeze the execution
environment as soon as the handler returns; pending tasks then resume on
the next invocation of the same environment.
"""

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from aws_lambda_powertools import Logger

logger = Logger(utc=True)


class BackgroundTasks:
    """Thread pool for best-effort side work (cache writes, analytics)."""

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="background",
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        future = self._executor.submit(self._run, func, *args, **kwargs)

        with self._lock:
            self._pending.add(future)

        future.add_done_callback(self._discard)
        return future

    def drain(self, timeout: float | None = None) -> None:
        """Block until every task submitted so far has finished."""
        with self._lock:
            pending = list(self._pending)

        if pending:
            wait(pending, timeout=timeout)

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    @staticmethod
    def _run(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception(
                "Background task failed",
                extra={"task": getattr(func, "__qualname__", repr(func))},
            )
            return None


background_tasks = BackgroundTasks()
