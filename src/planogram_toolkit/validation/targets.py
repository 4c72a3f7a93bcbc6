"""
Module: validation.targets

Purpose:
    Decide where a dragged entity may be dropped. Runs the same row rules
    as the conflict validator, but prospectively: for a stack (or a new
    catalog item) it returns the rows that can take it as a new stack and
    the stacks that can take it on top.

Key Functions:
    - find_drop_targets(): Valid rows and stack targets for an entity

Dependencies:
    - core.models: Layout, Item, stack_footprint

Used By:
    - Pointer/drag collaborators (highlighting valid targets)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Sequence, Tuple

from planogram_toolkit.core.models import Item, Layout, stack_footprint


@dataclass(frozen=True)
class DropTargets:
    """
    Valid drop targets for one drag (immutable).

    Attributes:
        rows: (compartment_id, row_id) pairs accepting a new stack
        stacks: Base item ids of stacks that accept the entity on top
    """

    rows: FrozenSet[Tuple[str, str]] = frozenset()
    stacks: FrozenSet[str] = frozenset()

    def accepts_row(self, compartment_id: str, row_id: str) -> bool:
        return (compartment_id, row_id) in self.rows


def find_drop_targets(
    layout: Layout,
    items: Sequence[Item],
    origin_item_id: Optional[str] = None,
    *,
    unit_gap: float = 1,
    allow_mixed_stacks: bool = True,
) -> DropTargets:
    """
    Find rows and stacks that can receive a dragged entity.

    Row rules:
    1. Every non-placeholder item's classification is allowed by the row
    2. The entity's total height fits the row's max height
    3. The row footprint with the entity added fits the capacity; when the
       entity is dragged out of that row, its own stack is discounted

    Stack rules (only for a single stackable item):
    1. The row accepts the item's classification
    2. The target stack plus the item fits the row height
    3. The stack is not the entity's own stack
    4. With allow_mixed_stacks=False, the base has the same classification

    Args:
        layout: Current snapshot
        items: Dragged items, base first (one item for a catalog drag)
        origin_item_id: Id of the dragged stack's base when it already sits
            in the layout; None for new items
        unit_gap: Gap between adjacent stacks
        allow_mixed_stacks: Whether differing classifications may stack

    Returns:
        DropTargets with valid rows and stacks

    Raises:
        ValueError: If items is empty
    """
    if not items:
        raise ValueError("Cannot compute drop targets for an empty entity")

    base = items[0]
    entity_height = sum(item.height for item in items)
    origin = layout.locate(origin_item_id) if origin_item_id else None

    valid_rows = set()
    valid_stacks = set()

    for compartment in layout.compartments:
        for row in compartment.rows:
            if not all(row.accepts(item) for item in items):
                continue

            if entity_height <= row.max_height:
                others = row.stacks
                if (
                    origin is not None
                    and origin.compartment_id == compartment.id
                    and origin.row_id == row.id
                ):
                    others = tuple(
                        stack for index, stack in enumerate(row.stacks)
                        if index != origin.stack_index
                    )
                footprint = stack_footprint(others, unit_gap)
                if others:
                    footprint += unit_gap
                if footprint + base.width <= row.capacity:
                    valid_rows.add((compartment.id, row.id))

            if len(items) != 1 or not base.stackable:
                continue
            for stack in row.stacks:
                if origin_item_id is not None and stack.contains(origin_item_id):
                    continue
                if not allow_mixed_stacks and stack.base.classification != base.classification:
                    continue
                if stack.height + base.height <= row.max_height:
                    valid_stacks.add(stack.id)

    return DropTargets(rows=frozenset(valid_rows), stacks=frozenset(valid_stacks))
