"""
Sorting machine implementations and the construction-time selector.

    from sortmachine.machine import make_machine, SUPPORTED_KINDS

    m = make_machine(natural_order, kind="heap")
"""

from __future__ import annotations

from typing import Dict, Type

from .base import Mode, SortingMachine
from .deferred import DeferredSortMachine
from .heap import HeapSortingMachine, is_heap_ordered
from sortmachine.order import Order

MACHINE_KINDS: Dict[str, Type[SortingMachine]] = {
    "heap": HeapSortingMachine,
    "deferred": DeferredSortMachine,
}
SUPPORTED_KINDS = set(MACHINE_KINDS)
DEFAULT_KIND = "heap"

__all__ = [
    "Mode",
    "SortingMachine",
    "HeapSortingMachine",
    "DeferredSortMachine",
    "is_heap_ordered",
    "MACHINE_KINDS",
    "SUPPORTED_KINDS",
    "DEFAULT_KIND",
    "make_machine",
]


def make_machine(order: Order, kind: str = DEFAULT_KIND) -> SortingMachine:
    """Construct an empty machine of the requested `kind` in insertion mode."""
    if kind not in MACHINE_KINDS:
        raise ValueError(
            f"Unsupported machine kind: {kind!r}. Supported: {sorted(SUPPORTED_KINDS)}"
        )
    return MACHINE_KINDS[kind](order)
