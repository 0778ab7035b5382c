"""Binary min-heap priority queue used by the corridor search.

Ordering among equal priorities is undefined and callers must not rely on
it. Entries carry an insertion counter as a tie-key so items themselves are
never compared; shape variety in corridors comes from the pathfinder's
enqueue jitter instead.
"""
from __future__ import annotations

import heapq
import itertools
from typing import Any, Generic, List, Tuple, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    __slots__ = ("_heap", "_counter")

    def __init__(self):
        self._heap: List[Tuple[Any, int, T]] = []
        self._counter = itertools.count()

    def enqueue(self, item: T, priority) -> None:
        heapq.heappush(self._heap, (priority, next(self._counter), item))

    def dequeue(self) -> T:
        if not self._heap:
            raise IndexError("dequeue from an empty PriorityQueue")
        return heapq.heappop(self._heap)[2]

    def peek(self) -> T:
        if not self._heap:
            raise IndexError("peek at an empty PriorityQueue")
        return self._heap[0][2]

    def peek_priority(self):
        if not self._heap:
            raise IndexError("peek at an empty PriorityQueue")
        return self._heap[0][0]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


__all__ = ["PriorityQueue"]
