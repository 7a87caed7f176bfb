"""
Tests for the oracle, the property helpers, the named orders and machine_sort.

Note:
- This file inserts the project `src/` onto sys.path so tests run without installing the package.
"""

from __future__ import annotations

import pathlib
import sys
from typing import List

import pytest
from hypothesis import given, settings, strategies as st

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from sortmachine.machine import SUPPORTED_KINDS
from sortmachine.order import (
    ORDERS,
    case_insensitive_order,
    key_order,
    natural_order,
    precedes,
    resolve_order,
    reverse_order,
)
from sortmachine.sorting import machine_sort
from sortmachine.validate import (
    assert_no_mutation,
    equals_oracle,
    first_nondecreasing_violation_index,
    is_nondecreasing,
    is_permutation,
    oracle_sort,
    permutation_counter_diff,
)


# ------------------------- orders ------------------------- #

def test_natural_order_signs() -> None:
    assert natural_order(1, 2) < 0
    assert natural_order(2, 1) > 0
    assert natural_order(2, 2) == 0


def test_case_insensitive_order_ties() -> None:
    assert case_insensitive_order("a", "A") == 0
    assert case_insensitive_order("apple", "Banana") < 0


def test_reverse_and_key_orders() -> None:
    desc = reverse_order(natural_order)
    assert desc(1, 2) > 0
    by_len = key_order(len)
    assert by_len("zz", "aaa") < 0
    assert by_len("ab", "cd") == 0


def test_precedes_includes_ties() -> None:
    assert precedes(natural_order, 1, 1)
    assert precedes(natural_order, 1, 2)
    assert not precedes(natural_order, 2, 1)


def test_resolve_order() -> None:
    for name, order in ORDERS.items():
        assert resolve_order(name) is order
    assert resolve_order("casefold") is case_insensitive_order
    with pytest.raises(ValueError, match="Unsupported order"):
        resolve_order("nope")


# ------------------------- oracle ------------------------- #

def test_oracle_sort_returns_new_list() -> None:
    a = [3, 1, 2]
    out = oracle_sort(a)
    assert out == [1, 2, 3]
    assert a == [3, 1, 2]


def test_equals_oracle_allows_tie_reordering() -> None:
    a = ["b", "A", "a"]
    assert equals_oracle(a, ["a", "A", "b"], case_insensitive_order)
    assert equals_oracle(a, ["A", "a", "b"], case_insensitive_order)
    assert not equals_oracle(a, ["A", "b", "a"], case_insensitive_order)
    # Right ranks, wrong values.
    assert not equals_oracle(a, ["a", "a", "b"], case_insensitive_order)
    assert not equals_oracle(a, ["a", "A"], case_insensitive_order)


# ------------------------- properties ------------------------- #

def test_nondecreasing_helpers() -> None:
    assert is_nondecreasing([])
    assert is_nondecreasing([1, 1, 2])
    assert not is_nondecreasing([1, 3, 2])
    assert first_nondecreasing_violation_index([1, 3, 2]) == 1
    assert first_nondecreasing_violation_index([1, 2, 3]) is None
    assert is_nondecreasing(["a", "A", "b"], case_insensitive_order)


def test_permutation_helpers() -> None:
    assert is_permutation([1, 2, 2], [2, 1, 2])
    assert not is_permutation([1, 2], [1, 2, 2])
    assert permutation_counter_diff([1, 2, 2], [2, 3]) == {1: 1, 2: 1, 3: -1}
    assert permutation_counter_diff([1, 2], [2, 1]) == {}


def test_assert_no_mutation() -> None:
    assert_no_mutation([1, 2], [1, 2])
    with pytest.raises(AssertionError, match="index 1"):
        assert_no_mutation([1, 2], [1, 3])
    with pytest.raises(AssertionError, match="length changed"):
        assert_no_mutation([1, 2], [1])


# ------------------------- machine_sort ------------------------- #

@pytest.mark.parametrize("kind", sorted(SUPPORTED_KINDS))
@pytest.mark.parametrize(
    "a",
    [
        [],
        [5],
        [2, 1],
        [1, 2, 3, 4],
        [4, 3, 2, 1],
        [7, 7, 7, 7],
        [1, 3, 2, 3, 1, 2],
        list(range(20))[::-1],
        [0, -1, 5, -10, 3, 3, 2],
    ],
)
def test_machine_sort_unit_cases(kind: str, a: List[int]) -> None:
    before = list(a)
    out = machine_sort(a, kind=kind)
    assert_no_mutation(before, a)
    assert out == oracle_sort(a)


def test_machine_sort_accepts_iterators() -> None:
    assert machine_sort(iter([3, 1, 2])) == [1, 2, 3]
    assert machine_sort((x for x in "cab"), reverse_order(natural_order)) == ["c", "b", "a"]


@settings(deadline=None, max_examples=100)
@given(st.lists(st.integers(min_value=0, max_value=2**31 - 1), max_size=200))
def test_property_machine_sort_matches_oracle(a: List[int]) -> None:
    assert machine_sort(a) == oracle_sort(a)
