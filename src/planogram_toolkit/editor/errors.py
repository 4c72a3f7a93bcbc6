"""
Module: editor.errors

Purpose:
    Exceptions raised when an edit action is rejected. A rejected action
    leaves the layout and the history untouched; the exception names the
    constraint that failed.

Key Classes:
    - EditError: Base class carrying the failed constraint
    - CapacityExceeded: Row width budget would grow past capacity
    - InvalidTarget: Dangling compartment/row/stack/item reference
    - TypeMismatch: Placement-type or stacking rule violation
    - HeightExceeded: Stack would grow past the row height (opt-in)

Used By:
    - editor.actions
    - editor.history.HistoryManager
"""

from __future__ import annotations


class EditError(Exception):
    """
    Error rejecting an edit action.

    Attributes:
        constraint: Short name of the failed constraint
    """

    constraint = "edit"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CapacityExceeded(EditError):
    """Insertion would overflow a row's width capacity."""
    constraint = "capacity"


class InvalidTarget(EditError):
    """Action references a compartment, row, stack or item that does not exist."""
    constraint = "target"


class TypeMismatch(EditError):
    """Placement-type rule or stacking compatibility violated."""
    constraint = "type"


class HeightExceeded(EditError):
    """Stack edit would exceed the row's max height."""
    constraint = "height"
