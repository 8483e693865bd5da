"""
Due-date priority queue for scheduled obligations.

Obligations come out soonest first. Two obligations due on the same
day keep the order in which they were scheduled.
"""

import heapq
import itertools
from typing import Optional

from personal_ledger.models.records import ScheduledObligation


class ScheduleQueue:
    """
    Min-heap of obligations keyed by (due date, insertion sequence).

    Nothing is ever removed; obligations accumulate for the lifetime of
    the ledger that owns the queue.
    """

    def __init__(self):
        self._heap: list[tuple[tuple[int, int, int], int, ScheduledObligation]] = []
        self._sequence = itertools.count()

    def schedule(self, obligation: ScheduledObligation) -> None:
        """Add an obligation in O(log n)."""
        entry = (obligation.due_date.sort_key, next(self._sequence), obligation)
        heapq.heappush(self._heap, entry)

    def peek(self) -> Optional[ScheduledObligation]:
        """The next obligation due, or None when nothing is scheduled."""
        if not self._heap:
            return None
        return self._heap[0][2]

    def snapshot_in_order(self) -> list[ScheduledObligation]:
        """All pending obligations, soonest first, without consuming them."""
        return [entry[2] for entry in sorted(self._heap)]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
