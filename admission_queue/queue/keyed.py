"""
Keyed admission queue.

Deduplicates work by key and tracks admitted lanes until the caller
signals completion with dequeue.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from itertools import chain
from typing import Generic

from admission_queue.constants import LaneState
from admission_queue.queue.admission import available_slots, take_oldest
from admission_queue.types.lane import K, Lane, T
from admission_queue.types.work import QueueStats


@dataclass(frozen=True)
class KeyedQueue(Generic[K, T]):
    """
    Immutable bounded-admission queue keyed by a unique identifier.

    Every operation returns a new queue; the receiver is never modified.

    Invariants:
    - len(active_lanes) <= max(0, pool_size)
    - a key appears at most once across backlog and active_lanes

    Lifecycle of a lane: absent -> backlog -> active -> absent.
    """

    pool_size: int
    backlog: tuple[Lane[K, T], ...] = ()
    active_lanes: tuple[Lane[K, T], ...] = ()

    @classmethod
    def empty(cls, pool_size: int) -> "KeyedQueue[K, T]":
        """Create a queue with no pending or active lanes."""
        return cls(pool_size=pool_size)

    def __contains__(self, key: object) -> bool:
        return any(lane.key == key for lane in chain(self.backlog, self.active_lanes))

    def __len__(self) -> int:
        return len(self.backlog) + len(self.active_lanes)

    def is_active(self, key: K) -> bool:
        """Check if the key currently occupies a slot."""
        return any(lane.key == key for lane in self.active_lanes)

    def is_pending(self, key: K) -> bool:
        """Check if the key is waiting in the backlog."""
        return any(lane.key == key for lane in self.backlog)

    def state(self, key: K) -> LaneState | None:
        """Return where the key currently sits, or None if it is absent."""
        if self.is_active(key):
            return LaneState.ACTIVE
        if self.is_pending(key):
            return LaneState.BACKLOG
        return None

    @property
    def pending_count(self) -> int:
        return len(self.backlog)

    @property
    def active_count(self) -> int:
        return len(self.active_lanes)

    @property
    def available_slots(self) -> int:
        return available_slots(self.pool_size, len(self.active_lanes))

    def enqueue(self, key: K, item: T) -> "KeyedQueue[K, T]":
        """
        Add a lane to the end of the backlog.

        If the key is already pending or active the queue is returned
        unchanged, so the first item enqueued under a key wins.

        Args:
            key: Unique identifier for the unit of work.
            item: Opaque payload.

        Returns:
            The updated queue.
        """
        if key in self:
            return self
        return replace(self, backlog=self.backlog + (Lane(key, item),))

    def enqueue_many(self, pairs: Iterable[tuple[K, T]]) -> "KeyedQueue[K, T]":
        """Enqueue each (key, item) pair left to right, dropping duplicate keys."""
        queue = self
        for key, item in pairs:
            queue = queue.enqueue(key, item)
        return queue

    def start_lanes(self) -> tuple["KeyedQueue[K, T]", tuple[Lane[K, T], ...]]:
        """
        Admit the oldest backlog lanes into free slots.

        Returns:
            Tuple of (updated queue, admitted lanes oldest first). When
            nothing is admitted the queue itself is returned.
        """
        admitted, remaining = take_oldest(self.backlog, self.available_slots)
        if not admitted:
            return self, ()
        return (
            replace(self, backlog=remaining, active_lanes=self.active_lanes + admitted),
            admitted,
        )

    def start(self) -> tuple["KeyedQueue[K, T]", list[T]]:
        """
        Admit the oldest backlog lanes into free slots.

        Returns:
            Tuple of (updated queue, admitted items oldest first).
        """
        queue, lanes = self.start_lanes()
        return queue, [lane.item for lane in lanes]

    def enqueue_and_start(self, key: K, item: T) -> tuple["KeyedQueue[K, T]", list[T]]:
        """Enqueue a lane and immediately run an admission pass."""
        return self.enqueue(key, item).start()

    def dequeue(self, key: K) -> "KeyedQueue[K, T]":
        """
        Release the slot held by an active lane.

        Keys that are absent, or still only in the backlog, leave the
        queue unchanged.
        """
        remaining = tuple(lane for lane in self.active_lanes if lane.key != key)
        if len(remaining) == len(self.active_lanes):
            return self
        return replace(self, active_lanes=remaining)

    def stats(self) -> QueueStats:
        """Snapshot the queue counts."""
        return QueueStats(
            pool_size=self.pool_size,
            pending=len(self.backlog),
            active=len(self.active_lanes),
        )
