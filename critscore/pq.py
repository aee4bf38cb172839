"""A priority queue of CSV rows ordered by score, highest first."""

from __future__ import annotations

import heapq
import itertools
from typing import Sequence


class PriorityQueue:
    """Holds rows and returns them from the highest score to the lowest."""

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, Sequence[str]]] = []
        self._counter = itertools.count()

    def push_row(self, row: Sequence[str], score: float) -> None:
        """Add row with score as its priority."""
        heapq.heappush(self._heap, (-score, next(self._counter), row))

    def pop_row(self) -> Sequence[str]:
        """Remove and return the row with the highest score.

        Raises IndexError when the queue is empty.
        """
        if not self._heap:
            raise IndexError("pop from an empty priority queue")
        return heapq.heappop(self._heap)[2]

    def __len__(self) -> int:
        return len(self._heap)