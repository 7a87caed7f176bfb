"""
Oracle for drain-order correctness.

Ground truth is Python's built-in `sorted()` driven by the same comparator
through `functools.cmp_to_key`.

Public API (stable):
    oracle_sort(a: Sequence[T], order=natural_order) -> list[T]
    equals_oracle(a: Sequence[T], out: Sequence[T], order=natural_order) -> bool

Conventions:
- The oracle never mutates its input and always returns a **new** list.
- Machines do not promise any tie order, so `equals_oracle` compares rank by
  rank (out[i] ties with the oracle's i-th value) and then checks the
  multiset. Under a total order (no distinct ties) this is plain equality.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import List, Sequence, TypeVar

from sortmachine.order import Order, natural_order
from sortmachine.validate.properties import is_permutation

T = TypeVar("T")

ORACLE_NAME: str = "python_sorted_cmp_to_key"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle"]


def oracle_sort(a: Sequence[T], order: Order = natural_order) -> List[T]:
    """Return a new list with the values of `a` in non-decreasing order."""
    return sorted(a, key=cmp_to_key(order))


def equals_oracle(a: Sequence[T], out: Sequence[T], order: Order = natural_order) -> bool:
    """
    Check whether a drained sequence agrees with the oracle up to ties.

    Parameters
    ----------
    a : sequence
        The values that were loaded into the machine.
    out : sequence
        The values the machine handed back, in removal order.
    order : comparator
        The machine's order.

    Returns
    -------
    bool
        True iff every out[i] ties with oracle_sort(a)[i] and `out` is a
        permutation of `a`.
    """
    expected = oracle_sort(a, order)
    if len(out) != len(expected):
        return False
    if any(order(x, y) != 0 for x, y in zip(out, expected)):
        return False
    return is_permutation(a, out)
