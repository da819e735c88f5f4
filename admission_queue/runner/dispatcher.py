"""
Dispatcher that drives a KeyedQueue on an asyncio event loop.

Submitted lanes are admitted up to the pool size, each admitted item runs
as its own task, and the slot is released when the handler finishes so the
next lane can be admitted.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from functools import partial
from typing import Any, Generic

from admission_queue.config import get_settings
from admission_queue.constants import DEFAULT_QUEUE_NAME, SPAN_EXECUTE_WORK, WorkStatus
from admission_queue.observability.logging import lane_context
from admission_queue.observability.metrics import MetricsCollector, get_metrics
from admission_queue.observability.tracing import create_span
from admission_queue.queue.keyed import KeyedQueue
from admission_queue.types.lane import K, Lane, T
from admission_queue.types.work import QueueStats, WorkResult

logger = logging.getLogger(__name__)

# Type alias for work handler functions
WorkHandler = Callable[[T], Awaitable[Any]]
ResultCallback = Callable[[K, WorkResult], None]


class Dispatcher(Generic[K, T]):
    """
    Keyed work dispatcher with a fixed concurrency budget.

    Features:
    - Key deduplication across pending and in-flight work
    - FIFO admission bounded by pool_size
    - Slot release on success, failure and cancellation

    All methods must be called from the event loop that runs the tasks.
    """

    def __init__(
        self,
        handler: WorkHandler,
        pool_size: int | None = None,
        name: str = DEFAULT_QUEUE_NAME,
        metrics: MetricsCollector | None = None,
        on_result: ResultCallback | None = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            handler: Async callable executed once per admitted item.
            pool_size: Maximum items in flight. Defaults to settings.
            name: Queue name used in logs and metric labels.
            metrics: Metrics collector. Defaults to the global collector.
            on_result: Optional callback invoked with (key, result).
        """
        if pool_size is None:
            pool_size = get_settings().default_pool_size

        self.name = name
        self._handler = handler
        self._on_result = on_result
        self._metrics = metrics or get_metrics()
        self._queue: KeyedQueue[K, T] = KeyedQueue.empty(pool_size)
        self._tasks: dict[K, asyncio.Task] = {}

    @property
    def queue(self) -> KeyedQueue[K, T]:
        """The current queue value."""
        return self._queue

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def stats(self) -> QueueStats:
        return self._queue.stats()

    def submit(self, key: K, item: T) -> int:
        """
        Enqueue a lane and admit as much work as the pool allows.

        Args:
            key: Unique identifier for the work.
            item: Payload passed to the handler.

        Returns:
            Number of lanes admitted by this call.
        """
        self._enqueue(key, item)
        return self._pump()

    def submit_many(self, pairs: Iterable[tuple[K, T]]) -> int:
        """Enqueue several lanes, then run a single admission pass."""
        for key, item in pairs:
            self._enqueue(key, item)
        return self._pump()

    def cancel(self, key: K) -> bool:
        """
        Cancel the in-flight task for a key.

        The slot is released and the next lane admitted once the task has
        finished cancelling. Pending and unknown keys are left alone.

        Returns:
            True if a cancellation was requested.
        """
        task = self._tasks.get(key)
        if task is None:
            return False
        return task.cancel()

    async def join(self) -> None:
        """Wait until no admitted work is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    def _enqueue(self, key: K, item: T) -> None:
        if key in self._queue:
            logger.debug(
                "Duplicate key ignored",
                extra={"queue": self.name, "key": str(key)}
            )
            self._metrics.record_duplicate(self.name)
            return

        self._queue = self._queue.enqueue(key, item)
        self._metrics.record_enqueued(self.name)

    def _pump(self) -> int:
        """Admit backlog lanes into free slots and schedule their tasks."""
        self._queue, lanes = self._queue.start_lanes()

        for lane in lanes:
            task = asyncio.create_task(self._execute(lane))
            task.add_done_callback(partial(self._on_done, lane))
            self._tasks[lane.key] = task

        if lanes:
            self._metrics.record_admitted(self.name, len(lanes))
            logger.info(
                f"Admitted {len(lanes)} lanes",
                extra={"queue": self.name, "active": self._queue.active_count}
            )

        self._metrics.update_queue_stats(self.name, self._queue.stats())
        return len(lanes)

    async def _execute(self, lane: Lane[K, T]) -> WorkResult:
        """
        Execute a single admitted lane.

        Runs the handler inside a span and converts the outcome into a
        WorkResult. Slot release happens in _on_done.
        """
        start_time = time.perf_counter()

        with lane_context(self.name, lane.key):
            try:
                with create_span(SPAN_EXECUTE_WORK, queue=self.name, key=lane.key):
                    output = await self._handler(lane.item)

                result = WorkResult(success=True, output=output)

            except Exception as e:
                logger.exception(
                    "Exception executing work",
                    extra={"error": str(e)}
                )
                result = WorkResult(success=False, error=str(e))

        result.duration_ms = (time.perf_counter() - start_time) * 1000

        status = WorkStatus.SUCCEEDED if result.success else WorkStatus.FAILED
        self._metrics.record_work_completed(
            queue=self.name,
            status=status,
            duration_seconds=result.duration_ms / 1000,
        )
        return result

    def _on_done(self, lane: Lane[K, T], task: asyncio.Task) -> None:
        """
        Release the lane's slot and admit the next lane.

        Runs on every exit path of the task, including cancellation before
        the handler was ever entered.
        """
        self._tasks.pop(lane.key, None)
        self._queue = self._queue.dequeue(lane.key)

        if task.cancelled():
            logger.warning(
                "Work cancelled",
                extra={"queue": self.name, "key": str(lane.key)}
            )
            self._metrics.record_work_cancelled(self.name)
        elif task.exception() is not None:
            logger.error(
                "Work aborted",
                exc_info=task.exception(),
                extra={"queue": self.name, "key": str(lane.key)}
            )
        elif self._on_result is not None:
            try:
                self._on_result(lane.key, task.result())
            except Exception:
                logger.exception(
                    "Result callback failed",
                    extra={"queue": self.name, "key": str(lane.key)}
                )

        self._pump()
