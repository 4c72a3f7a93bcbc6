"""
Module: editor.policy

Purpose:
    Configuration for how edit actions are checked and how the history
    behaves. Immutable configuration with validation on construction.

Key Classes:
    - StackOrder: How items are ordered inside a stack after stacking edits
    - EditPolicy: Edit rules and history size

Used By:
    - editor.actions: apply()
    - editor.history: HistoryManager
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

DEFAULT_MAX_HISTORY = 50


class StackOrder(Enum):
    """
    Ordering rule applied to a stack after an item is stacked onto it.

    Attributes:
        AUTHORED: Items stay in the order they were placed
        PYRAMID: Stable re-sort so widths are non-increasing base-to-top
    """

    AUTHORED = auto()  # Keep placement order
    PYRAMID = auto()   # Widest item at the base


@dataclass(frozen=True)
class EditPolicy:
    """
    Rules for accepting edit actions (immutable).

    Attributes:
        max_history: Number of snapshots kept; oldest evicted first
        enforce_placement_types: Reject items whose classification the
            target row does not allow (otherwise flagged by validation)
        allow_mixed_stacks: Allow stacking onto a base of another
            classification
        enforce_stack_height: Reject stack edits that grow a stack past the
            row's max height (otherwise flagged by validation)
        stack_order: Ordering applied after stacking edits
        unit_gap: Gap between adjacent stacks in a row

    Invariants:
        - max_history >= 1
        - unit_gap >= 0

    Example:
        >>> policy = EditPolicy(stack_order=StackOrder.PYRAMID)
        >>> policy.max_history
        50
    """

    max_history: int = DEFAULT_MAX_HISTORY
    enforce_placement_types: bool = True
    allow_mixed_stacks: bool = True
    enforce_stack_height: bool = False
    stack_order: StackOrder = StackOrder.AUTHORED
    unit_gap: float = 1

    def __post_init__(self) -> None:
        """Validate policy on construction."""
        if self.max_history < 1:
            raise ValueError(f"max_history must be >= 1: {self.max_history}")
        if self.unit_gap < 0:
            raise ValueError(f"unit_gap must be non-negative: {self.unit_gap}")
