"""
Sort-on-transition sorting machine.

The simplest conforming implementation: collect into a list, sort the whole
list once when switching modes, then pop from the tail. Kept as a readable
reference model for the heap version and as a benchmark baseline.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import TypeVar

from sortmachine.machine.base import SortingMachine

T = TypeVar("T")

__all__ = ["DeferredSortMachine"]


class DeferredSortMachine(SortingMachine[T]):
    def _build_extraction_structure(self) -> None:
        # Descending, so the minimum sits at the tail and pops in O(1).
        self._entries.sort(key=cmp_to_key(self._order), reverse=True)

    def _extract_first(self) -> T:
        return self._entries.pop()
