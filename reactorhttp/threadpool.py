"""A fixed-size pool of worker threads fed from a bounded task queue."""

from __future__ import annotations

import enum
import logging
import threading
from collections import deque
from types import TracebackType
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

MAX_THREADS = 1024
MAX_QUEUE = 65535
DEFAULT_THREADS = 4
DEFAULT_QUEUE = 1024

Task = Callable[[Any], Any]


class ShutdownMode(enum.IntEnum):
    IMMEDIATE = 1
    GRACEFUL = 2


class ThreadPoolError(Exception):
    """Base class for thread pool failures."""


class QueueFullError(ThreadPoolError):
    """The task queue holds as many tasks as it can."""


class PoolShutdownError(ThreadPoolError):
    """The pool is shutting down or has shut down."""


class ThreadPool:
    """Runs ``function(argument)`` tasks on a fixed set of worker threads.

    Sizes outside ``1..MAX_THREADS`` threads or ``1..MAX_QUEUE`` queued tasks
    fall back to 4 threads and a queue of 1024.
    """

    def __init__(self, thread_count: int = DEFAULT_THREADS, queue_size: int = DEFAULT_QUEUE) -> None:
        if not (0 < thread_count <= MAX_THREADS and 0 < queue_size <= MAX_QUEUE):
            thread_count, queue_size = DEFAULT_THREADS, DEFAULT_QUEUE
        self.queue_size = queue_size
        self._queue: deque[tuple[Task, Any]] = deque()
        self._notify = threading.Condition(threading.Lock())
        self._shutdown: Optional[ShutdownMode] = None
        self._threads: list[threading.Thread] = []
        self.started = 0
        for index in range(thread_count):
            worker = threading.Thread(target=self._work, name=f"pool-worker-{index}", daemon=True)
            try:
                worker.start()
            except RuntimeError as exc:
                self.destroy(ShutdownMode.IMMEDIATE)
                raise ThreadPoolError("failed to start worker thread") from exc
            self._threads.append(worker)
            with self._notify:
                self.started += 1

    @property
    def thread_count(self) -> int:
        return len(self._threads)

    @property
    def pending(self) -> int:
        """Number of tasks waiting for a worker."""
        with self._notify:
            return len(self._queue)

    @property
    def is_shutdown(self) -> bool:
        with self._notify:
            return self._shutdown is not None

    def add(self, function: Task, argument: Any = None) -> None:
        """Queue ``function(argument)`` for a worker.

        Raises QueueFullError when the queue is full and PoolShutdownError
        once the pool is shutting down.
        """
        with self._notify:
            if len(self._queue) == self.queue_size:
                raise QueueFullError("task queue is full")
            if self._shutdown is not None:
                raise PoolShutdownError("thread pool is shut down")
            self._queue.append((function, argument))
            self._notify.notify()

    def destroy(self, mode: ShutdownMode = ShutdownMode.GRACEFUL) -> None:
        """Stop the workers and wait for them.

        A graceful shutdown runs every queued task first; an immediate one
        drops what is still queued. Raises PoolShutdownError if the pool is
        already shutting down.
        """
        with self._notify:
            if self._shutdown is not None:
                raise PoolShutdownError("thread pool is already shut down")
            self._shutdown = ShutdownMode(mode)
            self._notify.notify_all()
        current = threading.current_thread()
        for worker in self._threads:
            if worker is not current:
                worker.join()

    def _work(self) -> None:
        while True:
            with self._notify:
                while not self._queue and self._shutdown is None:
                    self._notify.wait()
                if self._shutdown is ShutdownMode.IMMEDIATE or (
                    self._shutdown is ShutdownMode.GRACEFUL and not self._queue
                ):
                    self.started -= 1
                    return
                function, argument = self._queue.popleft()
            try:
                function(argument)
            except Exception:
                logger.exception("task raised an exception")

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if not self.is_shutdown:
            self.destroy(ShutdownMode.GRACEFUL)