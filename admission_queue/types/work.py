"""
Snapshot and result types used for observability and by the runners.
"""

from typing import Any

from pydantic import BaseModel, computed_field


class QueueStats(BaseModel):
    """
    Point-in-time counts for a queue.
    Used for metrics gauges and reporting.
    """

    pool_size: int
    pending: int
    active: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def available(self) -> int:
        """Slots free for admission on the next start."""
        return max(0, self.pool_size - self.active)


class WorkResult(BaseModel):
    """
    Result of executing an admitted item.
    Produced by the runners after the handler returns or raises.
    """

    success: bool
    output: Any = None
    error: str | None = None
    duration_ms: float | None = None
