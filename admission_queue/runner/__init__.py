"""
Runner module.
Contains asyncio callers that execute work admitted by the queues.
"""

from admission_queue.runner.batch import BatchRunner
from admission_queue.runner.dispatcher import Dispatcher, WorkHandler

__all__ = [
    "Dispatcher",
    "BatchRunner",
    "WorkHandler",
]
