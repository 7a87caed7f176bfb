"""
Property-based tests for sorting machines against the oracle.

What we check, for every machine kind:
- Drained output agrees with the oracle up to ties (strongest guarantee)
- Non-decreasing under the machine's order (diagnostic)
- Permutation preservation (no lost/duplicated values)
- Size accounting across interleaved remove_first calls
- Mode monotonicity
- Heap and deferred kinds hold equal multisets at every step

Note:
- This file inserts the project `src/` onto sys.path so tests run without installing the package.
"""

from __future__ import annotations

import pathlib
import sys
from typing import Any, List

import pytest
from hypothesis import given, settings, strategies as st

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from sortmachine.machine import SUPPORTED_KINDS, is_heap_ordered, make_machine
from sortmachine.order import (
    Order,
    case_insensitive_order,
    key_order,
    natural_order,
    reverse_order,
)
from sortmachine.validate import equals_oracle, is_nondecreasing, is_permutation

KINDS = sorted(SUPPORTED_KINDS)

small_ints = st.integers(min_value=-10_000, max_value=10_000)
short_words = st.text(alphabet="aAbBcCzZ", min_size=0, max_size=3)


# ------------------------- helpers ------------------------- #

def _load(kind: str, order: Order, a: List[Any]):
    m = make_machine(order, kind=kind)
    for x in a:
        m.add(x)
    return m


def _check_drain(kind: str, order: Order, a: List[Any]) -> None:
    """Common assertion bundle for one input."""
    a_before = list(a)
    m = _load(kind, order, a)
    assert m.size() == len(a)
    m.change_to_extraction_mode()
    assert m.size() == len(a)

    out = []
    while m.size() > 0:
        out.append(m.remove_first())

    assert a == a_before, "Loading a machine must not mutate the caller's list"
    assert equals_oracle(a, out, order), "Drain must match the oracle up to ties"
    assert is_nondecreasing(out, order), "Drain is not non-decreasing"
    assert is_permutation(a, out), "Drain is not a permutation of the input"
    assert not m.is_in_insertion_mode()


# ------------------------- bulk-build correctness ------------------------- #

@pytest.mark.parametrize("kind", KINDS)
@settings(deadline=None, max_examples=100)
@given(st.lists(small_ints, min_size=0, max_size=300))
def test_property_natural_order(kind: str, a: List[int]) -> None:
    _check_drain(kind, natural_order, a)


@pytest.mark.parametrize("kind", KINDS)
@settings(deadline=None, max_examples=60)
@given(st.lists(st.integers(min_value=0, max_value=7), min_size=0, max_size=300))
def test_property_many_duplicates(kind: str, a: List[int]) -> None:
    _check_drain(kind, natural_order, a)


@pytest.mark.parametrize("kind", KINDS)
@settings(deadline=None, max_examples=60)
@given(st.lists(small_ints, min_size=0, max_size=200))
def test_property_reverse_order(kind: str, a: List[int]) -> None:
    _check_drain(kind, reverse_order(natural_order), a)


@pytest.mark.parametrize("kind", KINDS)
@settings(deadline=None, max_examples=60)
@given(st.lists(short_words, min_size=0, max_size=150))
def test_property_case_insensitive_ties(kind: str, a: List[str]) -> None:
    _check_drain(kind, case_insensitive_order, a)


@pytest.mark.parametrize("kind", KINDS)
@settings(deadline=None, max_examples=60)
@given(st.lists(st.tuples(st.integers(0, 5), st.integers(0, 1000)), max_size=150))
def test_property_key_order_ties(kind: str, a: List[tuple]) -> None:
    # Pairs rank by their first field only, so distinct pairs often tie.
    _check_drain(kind, key_order(lambda p: p[0]), a)


@settings(deadline=None, max_examples=100)
@given(st.lists(small_ints, min_size=0, max_size=300))
def test_property_heap_order_after_transition(a: List[int]) -> None:
    m = _load("heap", natural_order, a)
    m.change_to_extraction_mode()
    assert is_heap_ordered(m._entries, natural_order)


# ------------------------- size accounting & mode ------------------------- #

@pytest.mark.parametrize("kind", KINDS)
@settings(deadline=None, max_examples=60)
@given(st.lists(small_ints, max_size=100), st.integers(min_value=0, max_value=100))
def test_property_size_accounting(kind: str, a: List[int], j: int) -> None:
    m = _load(kind, natural_order, a)
    m.change_to_extraction_mode()
    j = min(j, len(a))
    for _ in range(j):
        m.remove_first()
    assert m.size() == len(a) - j
    assert len(m) == len(a) - j


@pytest.mark.parametrize("kind", KINDS)
@settings(deadline=None, max_examples=60)
@given(st.lists(st.sampled_from(["add", "switch", "remove"]), max_size=60))
def test_property_mode_monotonicity(kind: str, ops: List[str]) -> None:
    """Apply only legal operations; once extraction mode is entered it never leaves."""
    m = make_machine(natural_order, kind=kind)
    seen_extraction = False
    for i, op in enumerate(ops):
        if op == "add" and m.is_in_insertion_mode():
            m.add(i)
        elif op == "switch" and m.is_in_insertion_mode():
            m.change_to_extraction_mode()
        elif op == "remove" and not m.is_in_insertion_mode() and m.size() > 0:
            m.remove_first()
        seen_extraction = seen_extraction or not m.is_in_insertion_mode()
        assert m.is_in_insertion_mode() is not seen_extraction


# ------------------------- reference-model comparison ------------------------- #

@settings(deadline=None, max_examples=80)
@given(st.lists(st.integers(min_value=-50, max_value=50), max_size=200))
def test_property_heap_matches_deferred(a: List[int]) -> None:
    heap = _load("heap", natural_order, a)
    ref = _load("deferred", natural_order, a)
    assert heap == ref
    heap.change_to_extraction_mode()
    ref.change_to_extraction_mode()
    assert heap == ref
    while ref.size() > 0:
        # Natural order on ints is total, so the two kinds agree value by value.
        assert heap.remove_first() == ref.remove_first()
        assert heap == ref


# ------------------------- fixed examples ------------------------- #

@pytest.mark.parametrize("kind", KINDS)
def test_equivalent_values_drain_adjacent(kind: str) -> None:
    m = _load(kind, case_insensitive_order, ["b", "A", "c", "a", "B"])
    m.change_to_extraction_mode()
    out = list(m.drain())
    assert len(out) == 5
    assert set(out[:2]) == {"a", "A"}
    assert set(out[2:4]) == {"b", "B"}
    assert out[4] == "c"
