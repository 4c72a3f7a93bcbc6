"""
Module: editor

Purpose:
    Atomic edit actions over immutable layouts, edit policy, and the
    bounded undo/redo history.

Key Functions:
    - apply(): Pure action application
    - locate_item(): Full item location

Key Classes:
    - HistoryManager: Session owner with undo/redo
    - EditPolicy / StackOrder: Edit rules
    - EditError and subclasses: Rejected actions
"""

from .actions import (
    Action,
    DuplicateItem,
    InsertItem,
    MoveStack,
    RemoveItems,
    ReorderStack,
    ReplaceItem,
    ResizeCompartment,
    ResizeRow,
    StackItem,
    apply,
    locate_item,
)
from .errors import CapacityExceeded, EditError, HeightExceeded, InvalidTarget, TypeMismatch
from .history import EditSession, HistoryEntry, HistoryManager
from .policy import DEFAULT_MAX_HISTORY, EditPolicy, StackOrder

__all__ = [
    # Actions
    "Action",
    "DuplicateItem",
    "InsertItem",
    "MoveStack",
    "RemoveItems",
    "ReorderStack",
    "ReplaceItem",
    "ResizeCompartment",
    "ResizeRow",
    "StackItem",
    "apply",
    "locate_item",
    # Errors
    "CapacityExceeded",
    "EditError",
    "HeightExceeded",
    "InvalidTarget",
    "TypeMismatch",
    # History
    "EditSession",
    "HistoryEntry",
    "HistoryManager",
    # Policy
    "DEFAULT_MAX_HISTORY",
    "EditPolicy",
    "StackOrder",
]
