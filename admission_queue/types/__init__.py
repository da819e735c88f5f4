"""
Type definitions for the admission queue.
Contains the lane value type and the snapshot/result models.
"""

from admission_queue.types.lane import K, Lane, T
from admission_queue.types.work import QueueStats, WorkResult

__all__ = [
    # Core types
    "Lane",
    "K",
    "T",
    # Reporting types
    "QueueStats",
    "WorkResult",
]
