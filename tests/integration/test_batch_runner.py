"""
Integration tests for the unkeyed BatchRunner.
"""

import asyncio

import pytest
from prometheus_client import CollectorRegistry

from admission_queue.observability.metrics import MetricsCollector
from admission_queue.runner import BatchRunner


class TestBatchRunner:
    """Tests for BatchRunner."""

    @pytest.mark.asyncio
    async def test_run_batch_releases_at_most_batch_size(self, metrics: MetricsCollector):
        """Test one batch executes at most batch_size items."""

        async def handler(item: int) -> int:
            return item + 1

        runner: BatchRunner[int] = BatchRunner(handler, batch_size=2, metrics=metrics)
        runner.submit_many([1, 2, 3])

        results = await runner.run_batch()

        assert [r.output for r in results] == [2, 3]
        assert runner.stats().pending == 1

    @pytest.mark.asyncio
    async def test_drain_runs_until_empty(
        self,
        metrics: MetricsCollector,
        registry: CollectorRegistry,
    ):
        """Test drain executes every item with bounded concurrency."""
        running = 0
        peak = 0

        async def handler(item: str) -> str:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return item

        runner: BatchRunner[str] = BatchRunner(
            handler, batch_size=2, name="batches", metrics=metrics
        )
        for item in ["a", "b", "a", "c", "d"]:
            runner.submit(item)

        results = await runner.drain()

        assert [r.output for r in results] == ["a", "b", "a", "c", "d"]
        assert peak <= 2
        assert len(runner.queue) == 0
        assert registry.get_sample_value(
            "admission_queue_admitted_total", {"queue": "batches"}
        ) == 5

    @pytest.mark.asyncio
    async def test_failures_are_reported(self, metrics: MetricsCollector):
        """Test a raising handler yields a failed result without stopping the batch."""

        async def handler(item: int) -> int:
            if item < 0:
                raise ValueError("negative")
            return item

        runner: BatchRunner[int] = BatchRunner(handler, batch_size=3, metrics=metrics)
        runner.submit_many([1, -1, 2])

        results = await runner.drain()

        assert [r.success for r in results] == [True, False, True]
        assert results[1].error == "negative"
        assert all(r.duration_ms is not None for r in results)

    @pytest.mark.asyncio
    async def test_zero_batch_size_drains_nothing(self, metrics: MetricsCollector):
        """Test a zero batch size never releases."""

        async def handler(item: int) -> int:
            return item

        runner: BatchRunner[int] = BatchRunner(handler, batch_size=0, metrics=metrics)
        runner.submit(1)

        assert await runner.drain() == []
        assert runner.stats().pending == 1
