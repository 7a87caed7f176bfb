"""
Collect-then-drain sorting on top of a sorting machine.

Public API (stable):
    machine_sort(items, order=natural_order, *, kind="heap") -> list
"""

from __future__ import annotations

from typing import Iterable, List, TypeVar

from sortmachine.machine import DEFAULT_KIND, make_machine
from sortmachine.order import Order, natural_order

T = TypeVar("T")

__all__ = ["machine_sort"]


def machine_sort(
    items: Iterable[T], order: Order = natural_order, *, kind: str = DEFAULT_KIND
) -> List[T]:
    """
    Return a new list holding `items` in non-decreasing order under `order`.

    Parameters
    ----------
    items : iterable
        Values to sort. Not mutated; any iterable is accepted.
    order : comparator
        Total preorder `order(a, b) -> int`.
    kind : str
        Machine implementation, one of `sortmachine.machine.SUPPORTED_KINDS`.

    Returns
    -------
    list
        The drained values. Ties come out in unspecified order.
    """
    m = make_machine(order, kind=kind)
    for x in items:
        m.add(x)
    m.change_to_extraction_mode()
    return list(m.drain())
