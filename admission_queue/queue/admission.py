"""
Admission arithmetic shared by the keyed and unkeyed queues.
"""

from typing import TypeVar

E = TypeVar("E")


def available_slots(pool_size: int, active_count: int) -> int:
    """
    Compute how many backlog entries may be admitted right now.

    Args:
        pool_size: Capacity fixed at construction. May be zero or negative.
        active_count: Number of entries currently occupying the pool.

    Returns:
        The free slot count, clamped to zero.
    """
    return max(0, pool_size - active_count)


def take_oldest(backlog: tuple[E, ...], count: int) -> tuple[tuple[E, ...], tuple[E, ...]]:
    """
    Split an oldest-first backlog into the admitted head and the remainder.

    Args:
        backlog: Entries ordered oldest first.
        count: Maximum number of entries to admit.

    Returns:
        Tuple of (admitted, remaining), both oldest first.
    """
    if count <= 0:
        return (), backlog
    return backlog[:count], backlog[count:]
