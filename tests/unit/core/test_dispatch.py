"""
Tests for SerialDispatcher.
"""

import threading

import pytest

from network_activity_logger.core.dispatch import SerialDispatcher


@pytest.fixture
def dispatcher():
    d = SerialDispatcher(maxsize=100)
    yield d
    d.close()


class TestSerialDispatcher:
    """Ordering, draining, errors."""

    def test_runs_in_submission_order(self, dispatcher):
        results = []
        for i in range(50):
            dispatcher.submit(results.append, i)

        assert dispatcher.flush(timeout=5.0)
        assert results == list(range(50))

    def test_runs_on_worker_thread(self, dispatcher):
        threads = []
        dispatcher.submit(lambda: threads.append(threading.current_thread()))
        dispatcher.flush(timeout=5.0)

        assert threads[0] is not threading.current_thread()
        assert threads[0].daemon

    def test_task_exception_does_not_stop_worker(self, dispatcher, caplog):
        results = []

        def boom():
            raise RuntimeError("task failed")

        dispatcher.submit(boom)
        dispatcher.submit(results.append, "after")
        dispatcher.flush(timeout=5.0)

        assert results == ["after"]
        assert "task failed" in caplog.text

    def test_flush_on_idle_dispatcher(self, dispatcher):
        assert dispatcher.flush(timeout=1.0)

    def test_flush_times_out_while_blocked(self, dispatcher):
        gate = threading.Event()
        dispatcher.submit(gate.wait)

        assert dispatcher.flush(timeout=0.05) is False
        gate.set()
        assert dispatcher.flush(timeout=5.0)

    def test_invalid_maxsize(self):
        with pytest.raises(ValueError):
            SerialDispatcher(maxsize=0)


class TestBackPressure:
    """Drop-oldest when full."""

    def test_drops_oldest(self):
        dispatcher = SerialDispatcher(maxsize=3)
        gate = threading.Event()
        started = threading.Event()
        results = []

        def block():
            started.set()
            gate.wait()

        dispatcher.submit(block)
        started.wait(timeout=5.0)

        for i in range(5):
            dispatcher.submit(results.append, i)

        assert dispatcher.dropped_count == 2
        assert dispatcher.pending == 3

        gate.set()
        dispatcher.flush(timeout=5.0)
        dispatcher.close()

        assert results == [2, 3, 4]

    def test_shrinking_maxsize_drops_backlog(self):
        dispatcher = SerialDispatcher(maxsize=10)
        gate = threading.Event()
        started = threading.Event()

        def block():
            started.set()
            gate.wait()

        dispatcher.submit(block)
        started.wait(timeout=5.0)
        for i in range(6):
            dispatcher.submit(lambda: None)

        dispatcher.maxsize = 2

        assert dispatcher.pending == 2
        assert dispatcher.dropped_count == 4

        gate.set()
        dispatcher.close()


class TestClose:
    """Shutdown."""

    def test_close_drains_queue(self):
        dispatcher = SerialDispatcher()
        results = []
        for i in range(20):
            dispatcher.submit(results.append, i)

        dispatcher.close()

        assert results == list(range(20))

    def test_submit_after_close_ignored(self):
        dispatcher = SerialDispatcher()
        dispatcher.close()

        assert dispatcher.closed
        assert dispatcher.submit(print, "x") is False

    def test_close_is_idempotent(self):
        dispatcher = SerialDispatcher()
        dispatcher.submit(lambda: None)
        dispatcher.close()
        dispatcher.close()

    def test_flush_from_worker_does_not_deadlock(self, dispatcher):
        outcome = []
        dispatcher.submit(lambda: outcome.append(dispatcher.flush(timeout=1.0)))
        dispatcher.flush(timeout=5.0)

        assert outcome == [False]
