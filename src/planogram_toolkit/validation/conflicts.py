"""
Module: validation.conflicts

Purpose:
    Detect items that violate row rules in a layout snapshot. Conflicts
    are reported, never corrected: overflowing or mis-placed items stay
    where they are and are flagged for the renderer.

Key Functions:
    - find_conflicts(): Set of flagged item ids
    - find_conflict_details(): Structured conflict records
    - overflow_stacks(): Indices of stacks consumed by a width overflow

Rules (per row, per compartment):
    1. Height: stack height > row.max_height flags every item in the stack
    2. Type: classification not allowed by the row flags the item
       (placeholders exempt)
    3. Width: footprint > capacity walks stacks right-to-left, flagging
       whole stacks until the remaining footprint fits

Dependencies:
    - core.models: Layout, Compartment, Row, stack_footprint

Used By:
    - Rendering collaborators (conflict marking)
    - editor.history.HistoryManager.conflicts()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Tuple

from planogram_toolkit.core.models import Compartment, Layout, Row, stack_footprint

logger = logging.getLogger(__name__)


class ConflictKind(str, Enum):
    """Which row rule an item violates."""
    HEIGHT = "height"  # Stack taller than the row
    TYPE = "type"      # Classification not allowed in the row
    WIDTH = "width"    # Stack pushed past row capacity

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Conflict:
    """
    One rule violation in one row (immutable).

    Attributes:
        kind: Violated rule
        compartment_id: Compartment of the row
        row_id: Row where the violation occurs
        item_ids: Flagged items
        message: Human-readable description
    """

    kind: ConflictKind
    compartment_id: str
    row_id: str
    item_ids: Tuple[str, ...]
    message: str


def overflow_stacks(row: Row, unit_gap: float = 1) -> Tuple[int, ...]:
    """
    Find the stacks responsible for a width overflow.

    Walks stacks right-to-left, removing whole stacks until the remaining
    footprint fits the capacity. Never marks part of a stack.

    Args:
        row: Row to check
        unit_gap: Gap between adjacent stacks

    Returns:
        Indices of overflowing stacks (rightmost first); empty if the
        row fits

    Example:
        >>> # capacity 100, stacks of width 60 and 45: 60 + 1 + 45 = 106
        >>> overflow_stacks(row)
        (1,)
    """
    stacks = row.stacks
    consumed: List[int] = []
    remaining = len(stacks)
    while remaining > 0 and stack_footprint(stacks[:remaining], unit_gap) > row.capacity:
        remaining -= 1
        consumed.append(remaining)
    return tuple(consumed)


def _row_conflicts(compartment_id: str, row: Row, unit_gap: float) -> List[Conflict]:
    conflicts: List[Conflict] = []

    for stack in row.stacks:
        if stack.height > row.max_height:
            conflicts.append(Conflict(
                kind=ConflictKind.HEIGHT,
                compartment_id=compartment_id,
                row_id=row.id,
                item_ids=tuple(item.id for item in stack.items),
                message=(
                    f"Stack {stack.id} is {stack.height} tall; "
                    f"row {row.id} allows {row.max_height}"
                ),
            ))

        for item in stack.items:
            if not row.accepts(item):
                conflicts.append(Conflict(
                    kind=ConflictKind.TYPE,
                    compartment_id=compartment_id,
                    row_id=row.id,
                    item_ids=(item.id,),
                    message=f"Row {row.id} does not accept {item.classification!r} products",
                ))

    overflowing = overflow_stacks(row, unit_gap)
    if overflowing:
        conflicts.append(Conflict(
            kind=ConflictKind.WIDTH,
            compartment_id=compartment_id,
            row_id=row.id,
            item_ids=tuple(
                item.id
                for index in sorted(overflowing)
                for item in row.stacks[index].items
            ),
            message=(
                f"Row {row.id} uses {row.footprint(unit_gap)} of {row.capacity}; "
                f"{len(overflowing)} stack(s) overflow"
            ),
        ))

    return conflicts


def _compartment_conflicts(compartment: Compartment, unit_gap: float) -> List[Conflict]:
    conflicts: List[Conflict] = []
    for row in compartment.rows:
        conflicts.extend(_row_conflicts(compartment.id, row, unit_gap))
    return conflicts


def find_conflict_details(layout: Layout, unit_gap: float = 1) -> Tuple[Conflict, ...]:
    """
    Find every rule violation in a layout.

    Each compartment is checked independently; results are concatenated
    in compartment, row order.

    Args:
        layout: Snapshot to check
        unit_gap: Gap between adjacent stacks

    Returns:
        Tuple of Conflict records
    """
    conflicts: List[Conflict] = []
    for compartment in layout.compartments:
        conflicts.extend(_compartment_conflicts(compartment, unit_gap))
    if conflicts:
        logger.debug(f"Found {len(conflicts)} conflicts across {len(layout.compartments)} compartments")
    return tuple(conflicts)


def find_conflicts(layout: Layout, unit_gap: float = 1) -> FrozenSet[str]:
    """
    Find the ids of every item that violates a row rule.

    Args:
        layout: Snapshot to check
        unit_gap: Gap between adjacent stacks

    Returns:
        Frozen set of flagged item ids (union over compartments)

    Example:
        >>> find_conflicts(layout_with_tall_stack)
        frozenset({'can-1', 'can-2'})
    """
    return frozenset(
        item_id
        for conflict in find_conflict_details(layout, unit_gap)
        for item_id in conflict.item_ids
    )
