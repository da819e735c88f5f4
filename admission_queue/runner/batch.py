"""
Batch runner that drives an UnkeyedQueue.

Each pass releases up to batch_size items, executes them concurrently and
waits for the whole batch before the next one.
"""

import asyncio
import logging
import time
from collections.abc import Iterable
from typing import Generic

from admission_queue.config import get_settings
from admission_queue.constants import (
    DEFAULT_QUEUE_NAME,
    SPAN_EXECUTE_WORK,
    SPAN_RUN_BATCH,
    WorkStatus,
)
from admission_queue.observability.logging import lane_context
from admission_queue.observability.metrics import MetricsCollector, get_metrics
from admission_queue.observability.tracing import create_span
from admission_queue.queue.unkeyed import UnkeyedQueue
from admission_queue.runner.dispatcher import WorkHandler
from admission_queue.types.lane import T
from admission_queue.types.work import QueueStats, WorkResult

logger = logging.getLogger(__name__)


class BatchRunner(Generic[T]):
    """
    Fire-and-forget batch executor for unkeyed work.

    batch_size caps the number of items released per run_batch call; items
    are not tracked once released.
    """

    def __init__(
        self,
        handler: WorkHandler,
        batch_size: int | None = None,
        name: str = DEFAULT_QUEUE_NAME,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the batch runner.

        Args:
            handler: Async callable executed once per released item.
            batch_size: Items released per batch. Defaults to settings.
            name: Queue name used in logs and metric labels.
            metrics: Metrics collector. Defaults to the global collector.
        """
        if batch_size is None:
            batch_size = get_settings().default_batch_size

        self.name = name
        self._handler = handler
        self._metrics = metrics or get_metrics()
        self._queue: UnkeyedQueue[T] = UnkeyedQueue.empty(batch_size)

    @property
    def queue(self) -> UnkeyedQueue[T]:
        """The current queue value."""
        return self._queue

    def stats(self) -> QueueStats:
        return self._queue.stats()

    def submit(self, item: T) -> None:
        """Append an item to the backlog."""
        self._queue = self._queue.enqueue(item)
        self._metrics.record_enqueued(self.name)
        self._metrics.update_queue_stats(self.name, self._queue.stats())

    def submit_many(self, items: Iterable[T]) -> None:
        """Append items to the backlog in order."""
        before = self._queue.pending_count
        self._queue = self._queue.enqueue_many(items)
        self._metrics.record_enqueued(self.name, self._queue.pending_count - before)
        self._metrics.update_queue_stats(self.name, self._queue.stats())

    async def run_batch(self) -> list[WorkResult]:
        """
        Release one batch and execute it.

        Returns:
            Results in release order. Empty when nothing was released.
        """
        self._queue, items = self._queue.start()
        self._metrics.update_queue_stats(self.name, self._queue.stats())

        if not items:
            return []

        self._metrics.record_admitted(self.name, len(items))
        logger.info(
            f"Released batch of {len(items)} items",
            extra={"queue": self.name, "remaining": self._queue.pending_count}
        )

        with create_span(SPAN_RUN_BATCH, queue=self.name, size=len(items)):
            return list(await asyncio.gather(*(self._execute(item) for item in items)))

    async def drain(self) -> list[WorkResult]:
        """Run batches until the backlog releases nothing more."""
        results: list[WorkResult] = []
        while True:
            batch = await self.run_batch()
            if not batch:
                return results
            results.extend(batch)

    async def _execute(self, item: T) -> WorkResult:
        start_time = time.perf_counter()

        with lane_context(self.name):
            try:
                with create_span(SPAN_EXECUTE_WORK, queue=self.name):
                    output = await self._handler(item)
                result = WorkResult(success=True, output=output)
            except Exception as e:
                logger.exception(
                    "Exception executing work",
                    extra={"error": str(e)}
                )
                result = WorkResult(success=False, error=str(e))

        duration = time.perf_counter() - start_time
        result.duration_ms = duration * 1000

        self._metrics.record_work_completed(
            queue=self.name,
            status=WorkStatus.SUCCEEDED if result.success else WorkStatus.FAILED,
            duration_seconds=duration,
        )
        return result
