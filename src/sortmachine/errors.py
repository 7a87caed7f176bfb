"""
Contract-violation errors raised by sorting machines.

Both error kinds signal a caller bug, never an operating condition. They
derive from AssertionError so they fail loudly, and nothing in this package
catches them. Every check runs before any state change, so a failed call
leaves the machine exactly as it was.
"""

from __future__ import annotations

__all__ = ["ContractViolation", "WrongModeError", "EmptyExtractionError"]


class ContractViolation(AssertionError):
    """Base class for precondition failures of the machine kernel."""


class WrongModeError(ContractViolation):
    """An operation was called in a mode that does not permit it."""

    def __init__(self, operation: str, mode: object) -> None:
        self.operation = operation
        self.mode = mode
        super().__init__(f"{operation}() is not allowed in {mode} mode")


class EmptyExtractionError(ContractViolation):
    """remove_first() was called on a machine that holds no entries."""

    def __init__(self) -> None:
        super().__init__("remove_first() called on an empty machine")
