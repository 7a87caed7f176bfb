"""
Property helpers for validating drained output.

Used by the tests and by the benchmark harness for a sanity check on every
timed drain.

Public API (stable):
    is_nondecreasing(xs, order=natural_order) -> bool
    first_nondecreasing_violation_index(xs, order=natural_order) -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict
    assert_no_mutation(before, after) -> None

Notes
-----
- "Non-decreasing" is judged by the comparator, so under a preorder the
  sequence ["a", "A", "b"] is non-decreasing for a case-insensitive order.
- Multiset checks use value equality (`==`), not the comparator: "a" and "A"
  tie but are still distinct values.
- Stability is not checked; machines make no tie-order promise.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Hashable, Optional, Sequence

from sortmachine.order import Order, natural_order

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
]


def is_nondecreasing(xs: Sequence[Any], order: Order = natural_order) -> bool:
    """Return True iff no xs[i+1] strictly precedes xs[i]."""
    return first_nondecreasing_violation_index(xs, order) is None


def first_nondecreasing_violation_index(
    xs: Sequence[Any], order: Order = natural_order
) -> Optional[int]:
    """
    Return the first index i where xs[i+1] strictly precedes xs[i], or None.

    Useful for precise error messages:
        i = first_nondecreasing_violation_index(out, order)
        assert i is None, f"out of order at i={i}: {out[i]!r} > {out[i+1]!r}"
    """
    for i in range(len(xs) - 1):
        if order(xs[i], xs[i + 1]) > 0:
            return i
    return None


def is_permutation(a: Sequence[Hashable], b: Sequence[Hashable]) -> bool:
    """Return True iff `a` and `b` hold the same multiset of values."""
    if len(a) != len(b):
        return False
    return Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[Hashable], b: Sequence[Hashable]) -> Dict[Any, int]:
    """
    Return value -> (count in a) - (count in b), omitting zero entries.

    An empty dict means identical multiplicities.
    """
    diff = Counter(a)
    diff.subtract(Counter(b))
    return {k: d for k, d in diff.items() if d != 0}


def assert_no_mutation(before: Sequence[Any], after: Sequence[Any]) -> None:
    """
    Assert that a caller's input survived a sort call untouched.

    Raises AssertionError naming the first differing index.
    """
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(f"Input mutated at index {i}: before={x!r}, after={y!r}")
