"""
The sorting-machine contract shared by every implementation.

A machine has two modes. It starts in INSERTION mode, where `add` collects
values with no ordering work. `change_to_extraction_mode` is the one-way edge
to EXTRACTION mode, where `remove_first` hands values back one at a time in
non-decreasing order under the comparator given at construction.

Subclasses only choose the extraction structure:
    _build_extraction_structure()  # reorganize self._entries in bulk
    _extract_first() -> T          # pop one minimal entry (size > 0 checked)

Mode checks, size accounting, equality and printing live here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from enum import Enum
from typing import Any, Generic, Iterator, List, Sequence, TypeVar

from sortmachine.errors import EmptyExtractionError, WrongModeError
from sortmachine.order import Order

T = TypeVar("T")

logger = logging.getLogger(__name__)

__all__ = ["Mode", "SortingMachine"]


class Mode(Enum):
    INSERTION = "insertion"
    EXTRACTION = "extraction"

    def __str__(self) -> str:
        return self.value


class SortingMachine(ABC, Generic[T]):
    """Abstract two-phase container: collect, then drain in order."""

    def __init__(self, order: Order) -> None:
        # `order` must be a total preorder; not checked.
        self._order = order
        self._mode = Mode.INSERTION
        self._entries: List[T] = []

    # ------------------------- kernel ------------------------- #

    def add(self, x: T) -> None:
        """Insert `x`. Requires insertion mode."""
        self._require_mode(Mode.INSERTION, "add")
        self._entries.append(x)

    def change_to_extraction_mode(self) -> None:
        """Reorganize every held entry at once and switch to extraction mode."""
        self._require_mode(Mode.INSERTION, "change_to_extraction_mode")
        self._build_extraction_structure()
        self._mode = Mode.EXTRACTION
        logger.debug(
            "%s switched to extraction mode with %d entries",
            type(self).__name__,
            len(self._entries),
        )

    def remove_first(self) -> T:
        """Remove and return a minimal entry. Requires extraction mode and size > 0."""
        self._require_mode(Mode.EXTRACTION, "remove_first")
        if not self._entries:
            raise EmptyExtractionError()
        return self._extract_first()

    def is_in_insertion_mode(self) -> bool:
        return self._mode is Mode.INSERTION

    def order(self) -> Order:
        return self._order

    def size(self) -> int:
        return len(self._entries)

    @abstractmethod
    def _build_extraction_structure(self) -> None:
        ...

    @abstractmethod
    def _extract_first(self) -> T:
        ...

    # ------------------------- conveniences ------------------------- #

    @property
    def mode(self) -> Mode:
        return self._mode

    def drain(self) -> Iterator[T]:
        """
        Return an iterator that removes entries in order until the machine is empty.

        The mode is checked when `drain()` is called, not on first `next()`.
        """
        self._require_mode(Mode.EXTRACTION, "drain")
        return self._drain()

    def new_instance(self) -> "SortingMachine[T]":
        """Return an empty machine of the same type sharing this machine's order."""
        return type(self)(self._order)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortingMachine):
            return NotImplemented
        return (
            self._mode is other._mode
            and self._order is other._order
            and _same_multiset(self._entries, other._entries)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        name = getattr(self._order, "__name__", repr(self._order))
        return (
            f"{type(self).__name__}(mode={self._mode}, order={name}, "
            f"entries={self._entries!r})"
        )

    # ------------------------- helpers ------------------------- #

    def _require_mode(self, mode: Mode, operation: str) -> None:
        if self._mode is not mode:
            raise WrongModeError(operation, self._mode)

    def _drain(self) -> Iterator[T]:
        while self._entries:
            yield self.remove_first()


def _same_multiset(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """Multiset equality by `==`; works for unhashable entries too."""
    if len(a) != len(b):
        return False
    try:
        return Counter(a) == Counter(b)
    except TypeError:
        # Unhashable entries: match pairwise.
        pass
    remaining = list(b)
    for x in a:
        for i, y in enumerate(remaining):
            if x == y:
                del remaining[i]
                break
        else:
            return False
    return True
