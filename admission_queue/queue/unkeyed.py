"""
Unkeyed admission queue.

A batched admission cutter with no identity tracking and no completion
signal.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Generic

from admission_queue.queue.admission import available_slots, take_oldest
from admission_queue.types.lane import T
from admission_queue.types.work import QueueStats


@dataclass(frozen=True)
class UnkeyedQueue(Generic[T]):
    """
    Immutable FIFO queue that releases at most pool_size items per start.

    Unlike KeyedQueue, emitted items are not tracked: active_lanes is kept
    for symmetry with the keyed queue but is never populated, so every call
    to start sees the full pool_size as available. pool_size is therefore a
    per-call batch ceiling, not a limit on items in flight.

    Lifecycle of an item: absent -> backlog -> emitted.
    """

    pool_size: int
    backlog: tuple[T, ...] = ()
    active_lanes: tuple[T, ...] = ()

    @classmethod
    def empty(cls, pool_size: int) -> "UnkeyedQueue[T]":
        """Create a queue with an empty backlog."""
        return cls(pool_size=pool_size)

    def __len__(self) -> int:
        return len(self.backlog)

    @property
    def pending_count(self) -> int:
        return len(self.backlog)

    def enqueue(self, item: T) -> "UnkeyedQueue[T]":
        """Append an item to the backlog. Duplicates are kept."""
        return replace(self, backlog=self.backlog + (item,))

    def enqueue_many(self, items: Iterable[T]) -> "UnkeyedQueue[T]":
        """Append items to the backlog in order."""
        return replace(self, backlog=self.backlog + tuple(items))

    def start(self) -> tuple["UnkeyedQueue[T]", list[T]]:
        """
        Release the oldest items, up to pool_size of them.

        Returns:
            Tuple of (updated queue, released items oldest first).
        """
        slots = available_slots(self.pool_size, len(self.active_lanes))
        released, remaining = take_oldest(self.backlog, slots)
        if not released:
            return self, []
        return replace(self, backlog=remaining), list(released)

    def stats(self) -> QueueStats:
        """Snapshot the queue counts."""
        return QueueStats(pool_size=self.pool_size, pending=len(self.backlog))
