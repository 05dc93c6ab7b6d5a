# tests/test_id_allocator.py

from __future__ import annotations

import pytest

from task_tracker.tasks.id_allocator import IdAllocator


def test_fresh_allocator_counts_from_one() -> None:
    alloc = IdAllocator()
    assert [alloc.allocate() for _ in range(3)] == [1, 2, 3]
    assert alloc.high_water_mark == 3
    assert alloc.free_ids == ()


def test_reclaimed_ids_are_reused_smallest_first() -> None:
    alloc = IdAllocator()
    for _ in range(5):
        alloc.allocate()

    alloc.reclaim(4)
    alloc.reclaim(2)
    assert alloc.free_ids == (2, 4)

    assert alloc.allocate() == 2
    assert alloc.allocate() == 4
    # free-list drained -> extend the sequence again
    assert alloc.allocate() == 6


def test_reclaim_rejects_ids_never_issued_or_already_free() -> None:
    alloc = IdAllocator()
    alloc.allocate()
    alloc.allocate()

    with pytest.raises(ValueError):
        alloc.reclaim(0)
    with pytest.raises(ValueError):
        alloc.reclaim(3)

    alloc.reclaim(1)
    with pytest.raises(ValueError):
        alloc.reclaim(1)
    assert alloc.free_ids == (1,)


def test_rebuild_from_live_ids_fills_gaps_below_max() -> None:
    alloc = IdAllocator.from_live_ids([7, 2, 5])
    assert alloc.high_water_mark == 7
    assert alloc.free_ids == (1, 3, 4, 6)

    assert [alloc.allocate() for _ in range(5)] == [1, 3, 4, 6, 8]


def test_rebuild_from_no_live_ids_is_a_fresh_allocator() -> None:
    alloc = IdAllocator.from_live_ids([])
    assert alloc.high_water_mark == 0
    assert alloc.allocate() == 1


def test_same_history_gives_same_ids() -> None:
    def run() -> list[int]:
        alloc = IdAllocator()
        out = [alloc.allocate() for _ in range(4)]
        alloc.reclaim(3)
        alloc.reclaim(1)
        out += [alloc.allocate() for _ in range(3)]
        return out

    assert run() == run() == [1, 2, 3, 4, 1, 3, 5]
