# src/network_activity_logger/core/dispatch.py
"""
Serial work lane for the activity logger.

Signal handlers run on the host client's threads; they must return
immediately. They submit work here, and a single daemon worker executes it in
submission order.
"""
import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

logger = logging.getLogger(__name__)

Task = Tuple[Callable[..., Any], Tuple[Any, ...]]


class SerialDispatcher:
    """
    Bounded FIFO queue with one consumer thread.

    - submit() never blocks: when the queue is full the oldest pending task is
      discarded and dropped_count is incremented
    - tasks run one at a time, in order, on the worker thread
    - an exception in a task is logged and the worker carries on

    The worker is started lazily on the first submit().

    Example:
        >>> dispatcher = SerialDispatcher(maxsize=100)
        >>> dispatcher.submit(print, "hello")
        >>> dispatcher.flush(timeout=1.0)
        True
        >>> dispatcher.close()
    """

    def __init__(self, maxsize: int = 1000, name: str = "network-activity-logger"):
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self._maxsize = maxsize
        self._name = name
        self._queue: Deque[Task] = deque()
        self._cond = threading.Condition()
        self._thread: Optional[threading.Thread] = None
        self._busy = False
        self._closed = False
        self._dropped = 0

    @property
    def maxsize(self) -> int:
        return self._maxsize

    @maxsize.setter
    def maxsize(self, value: int) -> None:
        """Shrinking below the current backlog drops the oldest tasks."""
        if value <= 0:
            raise ValueError("maxsize must be positive")
        with self._cond:
            self._maxsize = value
            while len(self._queue) > value:
                self._queue.popleft()
                self._dropped += 1
            self._cond.notify_all()

    @property
    def dropped_count(self) -> int:
        with self._cond:
            return self._dropped

    @property
    def pending(self) -> int:
        with self._cond:
            return len(self._queue)

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, func: Callable[..., Any], *args: Any) -> bool:
        """
        Queue func(*args) for the worker.

        Returns:
            False if the dispatcher is closed and the task was ignored
        """
        with self._cond:
            if self._closed:
                return False
            if len(self._queue) >= self._maxsize:
                self._queue.popleft()
                self._dropped += 1
            self._queue.append((func, args))
            self._ensure_worker()
            self._cond.notify_all()
        return True

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until every queued task has run.

        Returns:
            True if the queue drained, False on timeout
        """
        if self._thread is threading.current_thread():
            # Called from a task: waiting would deadlock
            return False
        with self._cond:
            return self._cond.wait_for(
                lambda: not self._queue and not self._busy,
                timeout=timeout
            )

    def close(self, timeout: Optional[float] = 5.0) -> None:
        """
        Stop accepting work, let the worker finish what is queued, join it.

        Idempotent.
        """
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _ensure_worker(self) -> None:
        # Caller holds self._cond
        if self._thread is None or not self._thread.is_alive():
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._queue and not self._closed:
                    self._cond.wait()
                if not self._queue:
                    return
                func, args = self._queue.popleft()
                self._busy = True

            try:
                func(*args)
            except Exception:
                logger.exception("Activity logger task %r failed", func)
            finally:
                # A queued task may hold the only reference to its owner
                del func, args
                with self._cond:
                    self._busy = False
                    self._cond.notify_all()
