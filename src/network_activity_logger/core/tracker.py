# src/network_activity_logger/core/tracker.py
"""
In-flight request tracking.

Maps request identity to the monotonic time its "started" signal was seen.
"""
import threading
import time
from typing import Callable, Dict, Hashable, Optional


class RequestTracker:
    """
    Thread-safe start-time registry.

    Every operation on a single identity is atomic, so a finish can never
    observe a half-recorded start. Entries for requests whose finish never
    arrives stay until clear() (bounded by the number of such requests).

    Example:
        >>> tracker = RequestTracker()
        >>> tracker.on_start("req-1", at=10.0)
        >>> tracker.on_finish("req-1", at=10.25)
        0.25
        >>> tracker.on_finish("req-1")  # already removed
        0.0
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            clock: Time source used when no explicit timestamp is passed
        """
        self._clock = clock
        self._starts: Dict[Hashable, float] = {}
        self._lock = threading.Lock()

    def on_start(self, request_id: Hashable, at: Optional[float] = None) -> None:
        """
        Record the start of a request.

        A repeated start for the same identity overwrites the earlier one
        (treated as a restart).
        """
        started_at = self._clock() if at is None else at
        with self._lock:
            self._starts[request_id] = started_at

    def on_finish(self, request_id: Hashable, at: Optional[float] = None) -> float:
        """
        Remove the request and return seconds since its start.

        Returns 0.0 when no start was recorded (e.g. logging began while the
        request was already in flight).
        """
        finished_at = self._clock() if at is None else at
        with self._lock:
            started_at = self._starts.pop(request_id, None)

        if started_at is None:
            return 0.0
        return max(0.0, finished_at - started_at)

    def clear(self) -> None:
        with self._lock:
            self._starts.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._starts)

    def __contains__(self, request_id: Hashable) -> bool:
        with self._lock:
            return request_id in self._starts
