"""
Ordering relations (comparators) for sorting machines.

An order is any callable `order(a, b) -> int` implementing a total preorder:
    negative  -> a strictly precedes b
    zero      -> a and b tie (equal rank, not necessarily equal values)
    positive  -> b strictly precedes a

Public API (stable):
    Order
    natural_order(a, b) -> int
    case_insensitive_order(a: str, b: str) -> int
    reverse_order(order) -> Order
    key_order(key) -> Order
    precedes(order, a, b) -> bool
    ORDERS
    resolve_order(name: str) -> Order

Notes
-----
- Comparators are expected to be deterministic and side-effect free; the
  machines never check this.
- Named orders exist so YAML experiment configs can select a comparator by
  string ("natural", "reverse", "casefold").
"""

from __future__ import annotations

from typing import Any, Callable, Dict

Order = Callable[[Any, Any], int]

__all__ = [
    "Order",
    "natural_order",
    "case_insensitive_order",
    "reverse_order",
    "key_order",
    "precedes",
    "ORDERS",
    "resolve_order",
]


def natural_order(a: Any, b: Any) -> int:
    """Three-way compare using the values' own `<`."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def case_insensitive_order(a: str, b: str) -> int:
    """Compare strings ignoring case; "a" and "A" tie."""
    return natural_order(a.casefold(), b.casefold())


def reverse_order(order: Order) -> Order:
    """Return a comparator that ranks values in the opposite direction."""

    def _reversed(a: Any, b: Any) -> int:
        return order(b, a)

    _reversed.__name__ = f"reverse_{getattr(order, '__name__', 'order')}"
    return _reversed


def key_order(key: Callable[[Any], Any]) -> Order:
    """Return a comparator ranking values by `key(value)`."""

    def _by_key(a: Any, b: Any) -> int:
        return natural_order(key(a), key(b))

    _by_key.__name__ = f"key_order_{getattr(key, '__name__', 'key')}"
    return _by_key


def precedes(order: Order, a: Any, b: Any) -> bool:
    """Return True iff `a` precedes or ties with `b` under `order`."""
    return order(a, b) <= 0


# Reused objects so that configs resolving the same name share one comparator.
_REVERSE_NATURAL = reverse_order(natural_order)

ORDERS: Dict[str, Order] = {
    "natural": natural_order,
    "reverse": _REVERSE_NATURAL,
    "casefold": case_insensitive_order,
}


def resolve_order(name: str) -> Order:
    """Look up a named comparator; raise ValueError for unknown names."""
    if name not in ORDERS:
        raise ValueError(f"Unsupported order: {name!r}. Supported: {sorted(ORDERS)}")
    return ORDERS[name]
