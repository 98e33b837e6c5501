import threading
import time

import pytest

from backend.app.tasks.background import BackgroundTaskQueue, call_with_timeout


@pytest.fixture
def queue():
    q = BackgroundTaskQueue(max_workers=1, max_pending=4, name="test")
    yield q
    q.shutdown()


def test_submitted_tasks_run(queue):
    seen = []
    assert queue.submit("append", seen.append, 1) is True
    assert queue.submit("append", seen.append, 2) is True
    assert queue.drain(timeout=5.0)
    assert seen == [1, 2]
    assert queue.stats()["completed"] == 2
    assert queue.pending() == 0


def test_failures_are_kept_in_the_sink(queue):
    def boom():
        raise ValueError("bad input")

    queue.submit("boom", boom)
    assert queue.drain(timeout=5.0)
    assert len(queue.failures) == 1
    failure = queue.failures[0]
    assert failure.task == "boom"
    assert failure.error_class == "ValueError"
    assert failure.error == "bad input"
    assert queue.stats()["failed"] == 1


def test_full_queue_drops_tasks():
    q = BackgroundTaskQueue(max_workers=1, max_pending=1, name="tiny")
    release = threading.Event()
    try:
        assert q.submit("block", release.wait, 5.0) is True
        assert q.submit("extra", lambda: None) is False
        assert q.stats()["dropped"] == 1
        release.set()
        assert q.drain(timeout=5.0)
        assert q.submit("after", lambda: None) is True
    finally:
        release.set()
        q.shutdown()


def test_closed_queue_rejects_tasks():
    q = BackgroundTaskQueue(max_workers=1, max_pending=2)
    q.shutdown()
    assert q.submit("late", lambda: None) is False


def test_call_with_timeout_returns_result():
    assert call_with_timeout("add", lambda a, b: a + b, 2, 3, timeout_seconds=1.0) == 5


def test_call_with_timeout_raises_on_slow_call():
    with pytest.raises(TimeoutError):
        call_with_timeout("slow", time.sleep, 0.5, timeout_seconds=0.05)


def test_call_with_timeout_propagates_errors():
    def boom():
        raise KeyError("missing")

    with pytest.raises(KeyError):
        call_with_timeout("boom", boom, timeout_seconds=1.0)
