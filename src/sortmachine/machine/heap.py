"""
Binary min-heap sorting machine.

Representation: a flat Python list. In insertion mode it is an unordered
append buffer. On the mode change it is turned into an implicit binary heap
in place, where the children of slot i live at 2*i + 1 and 2*i + 2 and every
parent precedes or ties its children under the machine's order.

Complexity (c = cost of one comparator call):
    add                        O(1) amortized
    change_to_extraction_mode  O(n * c), bottom-up construction
    remove_first               O(log n * c)
"""

from __future__ import annotations

from typing import Any, List, Sequence, TypeVar

from sortmachine.machine.base import SortingMachine
from sortmachine.order import Order

T = TypeVar("T")

__all__ = ["HeapSortingMachine", "is_heap_ordered"]


class HeapSortingMachine(SortingMachine[T]):
    """Sorting machine backed by a binary min-heap built in one pass."""

    def _build_extraction_structure(self) -> None:
        # Leaves are already heaps; fix every internal node from the last one up.
        n = len(self._entries)
        for i in range(n // 2 - 1, -1, -1):
            self._sift_down(i, n)

    def _extract_first(self) -> T:
        heap = self._entries
        last = heap.pop()
        if not heap:
            return last
        first = heap[0]
        heap[0] = last
        self._sift_down(0, len(heap))
        return first

    def _sift_down(self, i: int, n: int) -> None:
        """
        Move heap[i] down until it precedes or ties both children.

        Uses a hole instead of pairwise swaps: the displaced item is written
        exactly once, at its final slot.
        """
        heap = self._entries
        order = self._order
        item = heap[i]
        while True:
            child = 2 * i + 1
            if child >= n:
                break
            right = child + 1
            if right < n and order(heap[right], heap[child]) < 0:
                child = right
            if order(item, heap[child]) <= 0:
                break
            heap[i] = heap[child]
            i = child
        heap[i] = item


def is_heap_ordered(entries: Sequence[Any], order: Order) -> bool:
    """Return True iff no entry is strictly preceded by one of its children."""
    n = len(entries)
    for child in range(1, n):
        parent = (child - 1) // 2
        if order(entries[child], entries[parent]) < 0:
            return False
    return True
