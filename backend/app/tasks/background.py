"""
Bounded execution helpers.

- `call_with_timeout` runs a blocking call with an upper bound on how long the
  request path waits for it.
- `BackgroundTaskQueue` runs fire-and-forget work (turn recording, pattern
  learning) on a small thread pool; failures are logged and kept in a sink.
"""

from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FuturesTimeoutError, wait
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from backend.app.observability.logging import log_event

T = TypeVar("T")


def call_with_timeout(label: str, fn: Callable[..., T], *args: Any, timeout_seconds: float, **kwargs: Any) -> T:
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"bounded-{label}")
    try:
        future = executor.submit(fn, *args, **kwargs)
        try:
            return future.result(timeout=timeout_seconds)
        except FuturesTimeoutError as exc:
            future.cancel()
            raise TimeoutError(f"`{label}` timed out after {timeout_seconds}s") from exc
    finally:
        executor.shutdown(wait=False)


@dataclass
class TaskFailure:
    task: str
    error_class: str
    error: str
    at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class BackgroundTaskQueue:
    def __init__(self, max_workers: int = 2, max_pending: int = 256, name: str = "learning"):
        self.name = name
        self.max_pending = max_pending
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=f"{name}-task")
        self._slots = threading.BoundedSemaphore(max_pending)
        self._lock = threading.Lock()
        self._futures: set[Future] = set()
        self._pending = 0
        self._closed = False
        self.failures: deque[TaskFailure] = deque(maxlen=200)
        self.completed = 0
        self.dropped = 0

    def _drop(self, task: str) -> bool:
        with self._lock:
            self.dropped += 1
        log_event("background_task_dropped", level="warning", queue=self.name, task=task)
        return False

    def submit(self, task: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
        """Schedule `fn`; returns False when the queue is full or closed."""
        if self._closed or not self._slots.acquire(blocking=False):
            return self._drop(task)
        with self._lock:
            self._pending += 1
        try:
            future = self._executor.submit(self._run, task, fn, args, kwargs)
        except RuntimeError:
            self._release()
            return self._drop(task)
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)
        return True

    def _run(self, task: str, fn: Callable[..., Any], args: tuple, kwargs: dict) -> None:
        try:
            fn(*args, **kwargs)
        except Exception as exc:
            failure = TaskFailure(task=task, error_class=type(exc).__name__, error=str(exc))
            with self._lock:
                self.failures.append(failure)
            log_event(
                "background_task_failed",
                level="error",
                queue=self.name,
                task=task,
                error_class=failure.error_class,
                error=failure.error,
            )
        else:
            with self._lock:
                self.completed += 1
        finally:
            self._release()

    def _release(self) -> None:
        with self._lock:
            self._pending -= 1
        self._slots.release()

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    def pending(self) -> int:
        with self._lock:
            return self._pending

    def drain(self, timeout: float | None = 5.0) -> bool:
        """Wait for every task submitted so far; True when none is left running."""
        with self._lock:
            outstanding = list(self._futures)
        if not outstanding:
            return True
        _, not_done = wait(outstanding, timeout=timeout)
        return not not_done

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "queue": self.name,
                "pending": self._pending,
                "max_pending": self.max_pending,
                "completed": self.completed,
                "dropped": self.dropped,
                "failed": len(self.failures),
            }

    def shutdown(self, wait_for_pending: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait_for_pending)
