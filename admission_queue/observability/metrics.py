"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from admission_queue.constants import (
    METRIC_ACTIVE_LANES,
    METRIC_ADMITTED,
    METRIC_BACKLOG_DEPTH,
    METRIC_DUPLICATES,
    METRIC_ENQUEUED,
    METRIC_WORK_COMPLETED,
    METRIC_WORK_DURATION,
    WorkStatus,
)
from admission_queue.types.work import QueueStats

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for admission queues.

    Collects metrics for:
    - Backlog depth and active lanes
    - Enqueues, dropped duplicates and admissions
    - Work completions and execution duration
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.backlog_depth = Gauge(
            METRIC_BACKLOG_DEPTH,
            "Number of items waiting for admission",
            ["queue"],
            registry=self._registry,
        )

        self.active_lanes = Gauge(
            METRIC_ACTIVE_LANES,
            "Number of admitted items occupying a slot",
            ["queue"],
            registry=self._registry,
        )

        self.enqueued = Counter(
            METRIC_ENQUEUED,
            "Total number of items accepted into the backlog",
            ["queue"],
            registry=self._registry,
        )

        self.duplicates = Counter(
            METRIC_DUPLICATES,
            "Total number of enqueues ignored because the key was present",
            ["queue"],
            registry=self._registry,
        )

        self.admitted = Counter(
            METRIC_ADMITTED,
            "Total number of items admitted by start",
            ["queue"],
            registry=self._registry,
        )

        self.work_completed = Counter(
            METRIC_WORK_COMPLETED,
            "Total number of admitted items that finished executing",
            ["queue", "status"],
            registry=self._registry,
        )

        self.work_duration = Histogram(
            METRIC_WORK_DURATION,
            "Handler execution duration in seconds",
            ["queue", "status"],
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
            registry=self._registry,
        )

    def record_enqueued(self, queue: str, count: int = 1) -> None:
        """Record items accepted into the backlog."""
        if count:
            self.enqueued.labels(queue=queue).inc(count)

    def record_duplicate(self, queue: str) -> None:
        """Record an enqueue dropped by key deduplication."""
        self.duplicates.labels(queue=queue).inc()

    def record_admitted(self, queue: str, count: int = 1) -> None:
        """Record admission of items."""
        if count:
            self.admitted.labels(queue=queue).inc(count)

    def record_work_completed(
        self,
        queue: str,
        status: str,
        duration_seconds: float,
    ) -> None:
        """Record a finished unit of work."""
        self.work_completed.labels(queue=queue, status=status).inc()
        self.work_duration.labels(queue=queue, status=status).observe(
            duration_seconds
        )

    def record_work_cancelled(self, queue: str) -> None:
        """Record admitted work cancelled before it finished."""
        self.work_completed.labels(queue=queue, status=WorkStatus.CANCELLED).inc()

    def update_queue_stats(self, queue: str, stats: QueueStats) -> None:
        """Update backlog and active gauges for a queue."""
        self.backlog_depth.labels(queue=queue).set(stats.pending)
        self.active_lanes.labels(queue=queue).set(stats.active)

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics
