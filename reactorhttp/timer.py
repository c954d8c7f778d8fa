"""Expiry timers for idle connections, kept in a lazily pruned heap."""

from __future__ import annotations

import heapq
import threading
import time
from typing import Any, Callable, Optional

Clock = Callable[[], int]


def _now_ms() -> int:
    return time.monotonic_ns() // 1_000_000


class TimerNode:
    """A deadline attached to a request; the request is dropped once detached."""

    def __init__(self, request: Any, timeout_ms: int, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or _now_ms
        self.request = request
        self.deleted = False
        self.expires_at = self._clock() + timeout_ms

    def update(self, timeout_ms: int) -> None:
        """Move the deadline to ``timeout_ms`` from now."""
        self.expires_at = self._clock() + timeout_ms

    def is_valid(self) -> bool:
        """Return True before the deadline; otherwise mark the node deleted."""
        if self._clock() < self.expires_at:
            return True
        self.mark_deleted()
        return False

    def clear_request(self) -> None:
        """Detach the request and mark the node deleted."""
        self.request = None
        self.mark_deleted()

    def mark_deleted(self) -> None:
        self.deleted = True

    def __lt__(self, other: "TimerNode") -> bool:
        return self.expires_at < other.expires_at


class TimerManager:
    """Holds timer nodes ordered by deadline.

    Deleted nodes are not removed at once; they are discarded when they reach
    the front of the heap. A node that leaves the heap still holding its
    request hands that request to ``on_expire``.
    """

    def __init__(
        self,
        on_expire: Optional[Callable[[Any], None]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._on_expire = on_expire
        self._clock: Clock = clock or _now_ms
        self._heap: list[TimerNode] = []
        self._lock = threading.Lock()

    def add_timer(self, request: Any, timeout_ms: int) -> TimerNode:
        """Create a node for ``request`` and link it to the request."""
        node = TimerNode(request, timeout_ms, self._clock)
        with self._lock:
            heapq.heappush(self._heap, node)
        request.link_timer(node)
        return node

    def handle_expired(self) -> list[Any]:
        """Drop deleted and expired nodes from the front; return the requests that expired."""
        expired: list[Any] = []
        with self._lock:
            while self._heap:
                top = self._heap[0]
                if top.deleted or not top.is_valid():
                    heapq.heappop(self._heap)
                    if top.request is not None:
                        expired.append(top.request)
                else:
                    break
        if self._on_expire is not None:
            for request in expired:
                self._on_expire(request)
        return expired

    def __len__(self) -> int:
        with self._lock:
            return len(self._heap)