"""
Lane type definitions shared by the queue implementations.
"""

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


@dataclass(frozen=True)
class Lane(Generic[K, T]):
    """
    One unit of work tracked by a keyed queue.

    The key identifies the lane across backlog and active set; the item is
    an opaque payload that the queue never inspects.
    """

    key: K
    item: T
