"""
sortmachine: a two-phase ordered container.

Values are added in any order, then, after a one-way switch to extraction
mode, removed one at a time smallest-first under a caller-supplied
comparator.

    from sortmachine import make_machine, natural_order

    m = make_machine(natural_order)
    for x in (3, 1, 2):
        m.add(x)
    m.change_to_extraction_mode()
    m.remove_first()  # -> 1
"""

from .errors import ContractViolation, EmptyExtractionError, WrongModeError
from .order import (
    ORDERS,
    case_insensitive_order,
    key_order,
    natural_order,
    precedes,
    resolve_order,
    reverse_order,
)
from .machine import (
    SUPPORTED_KINDS,
    DeferredSortMachine,
    HeapSortingMachine,
    Mode,
    SortingMachine,
    make_machine,
)
from .sorting import machine_sort

__all__ = [
    "ContractViolation",
    "WrongModeError",
    "EmptyExtractionError",
    "ORDERS",
    "natural_order",
    "case_insensitive_order",
    "reverse_order",
    "key_order",
    "precedes",
    "resolve_order",
    "Mode",
    "SortingMachine",
    "HeapSortingMachine",
    "DeferredSortMachine",
    "SUPPORTED_KINDS",
    "make_machine",
    "machine_sort",
]
