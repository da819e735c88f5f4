"""
Queue module.
Contains the keyed and unkeyed admission queues.
"""

from admission_queue.queue.admission import available_slots, take_oldest
from admission_queue.queue.keyed import KeyedQueue
from admission_queue.queue.unkeyed import UnkeyedQueue

__all__ = [
    "KeyedQueue",
    "UnkeyedQueue",
    "available_slots",
    "take_oldest",
]
