"""
Bounded Admission Queue

Pure, immutable work queues that decide which pending items may become active
under a fixed pool size, plus asyncio runners that drive them.
"""

__version__ = "1.0.0"

from admission_queue.queue import KeyedQueue, UnkeyedQueue
from admission_queue.types import Lane, QueueStats, WorkResult

__all__ = [
    "KeyedQueue",
    "UnkeyedQueue",
    "Lane",
    "QueueStats",
    "WorkResult",
]
