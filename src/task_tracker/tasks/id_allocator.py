# src/task_tracker/tasks/id_allocator.py

from __future__ import annotations

"""
Task identifier allocator.

One sequence is shared by every user. Ids freed by deletions go to a sorted
free-list and are handed out again (smallest first) before the high-water mark
is extended. Not thread-safe on its own: the owning store's lock covers it.
"""

import bisect
from collections.abc import Iterable


class IdAllocator:
    def __init__(self) -> None:
        self._high_water_mark = 0
        self._free: list[int] = []

    @classmethod
    def from_live_ids(cls, live_ids: Iterable[int]) -> IdAllocator:
        """
        Rebuild allocator state from the ids of all live tasks.

        High-water mark = largest live id; every gap below it is free.
        """
        live = set(live_ids)
        alloc = cls()
        alloc._high_water_mark = max(live, default=0)
        alloc._free = [i for i in range(1, alloc._high_water_mark) if i not in live]
        return alloc

    @property
    def high_water_mark(self) -> int:
        return self._high_water_mark

    @property
    def free_ids(self) -> tuple[int, ...]:
        return tuple(self._free)

    def allocate(self) -> int:
        if self._free:
            return self._free.pop(0)
        self._high_water_mark += 1
        return self._high_water_mark

    def reclaim(self, task_id: int) -> None:
        if task_id <= 0 or task_id > self._high_water_mark:
            raise ValueError(f"id {task_id} was never issued by this allocator")

        pos = bisect.bisect_left(self._free, task_id)
        if pos < len(self._free) and self._free[pos] == task_id:
            raise ValueError(f"id {task_id} is already free")
        self._free.insert(pos, task_id)
