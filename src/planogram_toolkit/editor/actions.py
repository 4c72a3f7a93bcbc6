"""
Module: editor.actions

Purpose:
    Whole, atomic edit actions over a layout snapshot. apply() is a pure
    function: it either returns a new Layout with the action fully
    applied or raises an EditError, leaving the input untouched.

Key Classes:
    - InsertItem, MoveStack, StackItem, RemoveItems, ReplaceItem
    - ResizeRow, ResizeCompartment, ReorderStack, DuplicateItem

Key Functions:
    - apply(): Apply one action to a layout
    - locate_item(): Full location of an item or InvalidTarget

Checks:
    1. Every reference must resolve (InvalidTarget)
    2. Placement types when the policy enforces them (TypeMismatch)
    3. Capacity: a row may end above capacity only if its footprint did
       not grow (CapacityExceeded); resize actions are exempt
    4. Stack height when the policy enforces it (HeightExceeded)

Dependencies:
    - core.models: Layout, Row, Stack, Item
    - editor.policy: EditPolicy, StackOrder
    - editor.errors: EditError hierarchy

Used By:
    - editor.history.HistoryManager
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

from planogram_toolkit.core.models import (
    Item,
    ItemLocation,
    Layout,
    Row,
    Stack,
    new_item_id,
    normalize_allowed,
)

from .errors import CapacityExceeded, EditError, HeightExceeded, InvalidTarget, TypeMismatch
from .policy import EditPolicy, StackOrder


# ─────────────────────────────────────────────────────────────────────────────
# Actions
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InsertItem:
    """Place a new item as its own stack (appended when stack_index is None)."""
    item: Item
    compartment_id: str
    row_id: str
    stack_index: Optional[int] = None


@dataclass(frozen=True)
class MoveStack:
    """Move the whole stack containing item_id, within or across rows and compartments."""
    item_id: str
    compartment_id: str
    row_id: str
    stack_index: Optional[int] = None


@dataclass(frozen=True)
class StackItem:
    """Move one item onto the top of the stack containing target_item_id."""
    item_id: str
    target_item_id: str


@dataclass(frozen=True)
class RemoveItems:
    """Remove items; stacks left empty disappear."""
    item_ids: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "item_ids", tuple(self.item_ids))


@dataclass(frozen=True)
class ReplaceItem:
    """Swap an item in place for another (e.g. a different SKU)."""
    item_id: str
    new_item: Item


@dataclass(frozen=True)
class ResizeRow:
    """Change row dimensions or rules. Never rejected for overflow."""
    compartment_id: str
    row_id: str
    capacity: Optional[float] = None
    max_height: Optional[float] = None
    allowed_classifications: Any = None


@dataclass(frozen=True)
class ResizeCompartment:
    """Change compartment dimensions. Never rejected for overflow."""
    compartment_id: str
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass(frozen=True)
class ReorderStack:
    """Move a stack to another position within its row."""
    compartment_id: str
    row_id: str
    old_index: int
    new_index: int


@dataclass(frozen=True)
class DuplicateItem:
    """
    Copy an item.

    With as_stack=False the copy becomes a new stack at the end of the
    item's row; with as_stack=True it goes on top of the item's own stack.
    new_id fixes the copy's id; a fresh one is generated when omitted.
    """
    item_id: str
    as_stack: bool = False
    new_id: Optional[str] = None


Action = Union[
    InsertItem,
    MoveStack,
    StackItem,
    RemoveItems,
    ReplaceItem,
    ResizeRow,
    ResizeCompartment,
    ReorderStack,
    DuplicateItem,
]


# ─────────────────────────────────────────────────────────────────────────────
# Lookup and checks
# ─────────────────────────────────────────────────────────────────────────────

def locate_item(layout: Layout, item_id: str) -> ItemLocation:
    """
    Find the full location of an item.

    Raises:
        InvalidTarget: If no item has this id

    Example:
        >>> locate_item(layout, "can-1")
        ItemLocation(compartment_id='door-1', row_id='row-1', stack_index=0, level=0)
    """
    location = layout.locate(item_id)
    if location is None:
        raise InvalidTarget(f"Item not found: {item_id}")
    return location


def _require_row(layout: Layout, compartment_id: str, row_id: str) -> Row:
    if layout.compartment(compartment_id) is None:
        raise InvalidTarget(f"Compartment not found: {compartment_id}")
    row = layout.row(compartment_id, row_id)
    if row is None:
        raise InvalidTarget(f"Row not found: {row_id} (compartment {compartment_id})")
    return row


def _require_new_id(layout: Layout, item_id: str) -> None:
    if layout.item(item_id) is not None:
        raise InvalidTarget(f"Item id already in layout: {item_id}")


def _insert_position(index: Optional[int], length: int) -> int:
    if index is None:
        return length
    if not 0 <= index <= length:
        raise InvalidTarget(f"Stack index {index} out of range (0..{length})")
    return index


def _check_types(row: Row, items: Iterable[Item], policy: EditPolicy) -> None:
    if not policy.enforce_placement_types:
        return
    for item in items:
        if not row.accepts(item):
            raise TypeMismatch(
                f"Row {row.id} does not accept {item.classification!r} "
                f"(item {item.id})"
            )


def _check_capacity(old_row: Row, new_row: Row, policy: EditPolicy) -> None:
    old_footprint = old_row.footprint(policy.unit_gap)
    new_footprint = new_row.footprint(policy.unit_gap)
    if new_footprint > new_row.capacity and new_footprint > old_footprint:
        raise CapacityExceeded(
            f"Row {new_row.id} would use {new_footprint} of {new_row.capacity}"
        )


def _check_height(row: Row, stack: Stack, old_height: float, policy: EditPolicy) -> None:
    if not policy.enforce_stack_height:
        return
    if stack.height > row.max_height and stack.height > old_height:
        raise HeightExceeded(
            f"Stack {stack.id} would be {stack.height} tall; "
            f"row {row.id} allows {row.max_height}"
        )


def _ordered(items: Tuple[Item, ...], policy: EditPolicy) -> Tuple[Item, ...]:
    if policy.stack_order is StackOrder.PYRAMID:
        return tuple(sorted(items, key=lambda item: -item.width))
    return items


def _without_item(row: Row, item_id: str) -> Row:
    """Row with one item removed; an emptied stack is dropped."""
    stacks = []
    for stack in row.stacks:
        remaining = tuple(item for item in stack.items if item.id != item_id)
        if remaining:
            stacks.append(Stack(remaining))
    return row.with_stacks(tuple(stacks))


# ─────────────────────────────────────────────────────────────────────────────
# Handlers
# ─────────────────────────────────────────────────────────────────────────────

def _apply_insert(action: InsertItem, layout: Layout, policy: EditPolicy) -> Layout:
    row = _require_row(layout, action.compartment_id, action.row_id)
    _require_new_id(layout, action.item.id)
    _check_types(row, (action.item,), policy)
    _check_height(row, Stack((action.item,)), 0, policy)

    position = _insert_position(action.stack_index, len(row.stacks))
    stacks = row.stacks[:position] + (Stack((action.item,)),) + row.stacks[position:]
    new_row = row.with_stacks(stacks)
    _check_capacity(row, new_row, policy)
    return layout.with_row(action.compartment_id, new_row)


def _apply_move(action: MoveStack, layout: Layout, policy: EditPolicy) -> Layout:
    source = locate_item(layout, action.item_id)
    target_row = _require_row(layout, action.compartment_id, action.row_id)
    source_row = layout.row(source.compartment_id, source.row_id)
    stack = source_row.stacks[source.stack_index]

    same_row = (source.compartment_id, source.row_id) == (action.compartment_id, action.row_id)
    if not same_row:
        _check_types(target_row, stack.items, policy)
        _check_height(target_row, stack, 0, policy)

    remaining = source_row.stacks[:source.stack_index] + source_row.stacks[source.stack_index + 1:]
    layout = layout.with_row(source.compartment_id, source_row.with_stacks(remaining))

    destination = layout.row(action.compartment_id, action.row_id)
    position = _insert_position(action.stack_index, len(destination.stacks))
    stacks = destination.stacks[:position] + (stack,) + destination.stacks[position:]
    new_row = destination.with_stacks(stacks)
    _check_capacity(target_row, new_row, policy)
    return layout.with_row(action.compartment_id, new_row)


def _apply_stack(action: StackItem, layout: Layout, policy: EditPolicy) -> Layout:
    source = locate_item(layout, action.item_id)
    target = locate_item(layout, action.target_item_id)
    item = layout.item(action.item_id)

    target_row = layout.row(target.compartment_id, target.row_id)
    target_stack = target_row.stacks[target.stack_index]
    if target_stack.contains(action.item_id):
        raise InvalidTarget(f"Item {action.item_id} is already in stack {target_stack.id}")
    if not item.stackable:
        raise TypeMismatch(f"Item {item.id} is not stackable")
    if not policy.allow_mixed_stacks and target_stack.base.classification != item.classification:
        raise TypeMismatch(
            f"Cannot stack {item.classification!r} onto "
            f"{target_stack.base.classification!r} (mixed stacks disabled)"
        )
    _check_types(target_row, (item,), policy)

    same_row = (source.compartment_id, source.row_id) == (target.compartment_id, target.row_id)
    source_row = layout.row(source.compartment_id, source.row_id)
    shrunk = _without_item(source_row, item.id)
    if not same_row:
        _check_capacity(source_row, shrunk, policy)
    layout = layout.with_row(source.compartment_id, shrunk)

    # Indices may have shifted if the source stack emptied in the same row
    target = locate_item(layout, action.target_item_id)
    row_before = layout.row(target.compartment_id, target.row_id)
    stack_before = row_before.stacks[target.stack_index]
    new_stack = Stack(_ordered(stack_before.items + (item,), policy))
    _check_height(row_before, new_stack, stack_before.height, policy)

    stacks = list(row_before.stacks)
    stacks[target.stack_index] = new_stack
    new_row = row_before.with_stacks(tuple(stacks))
    _check_capacity(source_row if same_row else target_row, new_row, policy)
    return layout.with_row(target.compartment_id, new_row)


def _apply_remove(action: RemoveItems, layout: Layout, policy: EditPolicy) -> Layout:
    doomed = set(action.item_ids)
    for item_id in action.item_ids:
        locate_item(layout, item_id)

    for compartment in layout.compartments:
        for row in compartment.rows:
            stacks = []
            for stack in row.stacks:
                remaining = tuple(item for item in stack.items if item.id not in doomed)
                if remaining:
                    stacks.append(Stack(remaining))
            if not any(item.id in doomed for stack in row.stacks for item in stack.items):
                continue
            new_row = row.with_stacks(tuple(stacks))
            _check_capacity(row, new_row, policy)
            layout = layout.with_row(compartment.id, new_row)
    return layout


def _apply_replace(action: ReplaceItem, layout: Layout, policy: EditPolicy) -> Layout:
    location = locate_item(layout, action.item_id)
    if action.new_item.id != action.item_id:
        _require_new_id(layout, action.new_item.id)

    row = layout.row(location.compartment_id, location.row_id)
    _check_types(row, (action.new_item,), policy)

    stack = row.stacks[location.stack_index]
    items = list(stack.items)
    items[location.level] = action.new_item
    new_stack = Stack(_ordered(tuple(items), policy))
    _check_height(row, new_stack, stack.height, policy)

    stacks = list(row.stacks)
    stacks[location.stack_index] = new_stack
    new_row = row.with_stacks(tuple(stacks))
    _check_capacity(row, new_row, policy)
    return layout.with_row(location.compartment_id, new_row)


def _apply_resize_row(action: ResizeRow, layout: Layout, policy: EditPolicy) -> Layout:
    row = _require_row(layout, action.compartment_id, action.row_id)
    changes: Dict[str, Any] = {}
    if action.capacity is not None:
        changes["capacity"] = action.capacity
    if action.max_height is not None:
        changes["max_height"] = action.max_height
    if action.allowed_classifications is not None:
        changes["allowed_classifications"] = normalize_allowed(action.allowed_classifications)
    try:
        new_row = replace(row, **changes)
    except ValueError as e:
        raise EditError(f"Invalid row settings: {e}") from e
    return layout.with_row(action.compartment_id, new_row)


def _apply_resize_compartment(action: ResizeCompartment, layout: Layout, policy: EditPolicy) -> Layout:
    compartment = layout.compartment(action.compartment_id)
    if compartment is None:
        raise InvalidTarget(f"Compartment not found: {action.compartment_id}")
    changes: Dict[str, Any] = {}
    if action.width is not None:
        changes["width"] = action.width
    if action.height is not None:
        changes["height"] = action.height
    try:
        new_compartment = replace(compartment, **changes)
    except ValueError as e:
        raise EditError(f"Invalid compartment dimensions: {e}") from e
    return layout.with_compartment(new_compartment)


def _apply_reorder(action: ReorderStack, layout: Layout, policy: EditPolicy) -> Layout:
    row = _require_row(layout, action.compartment_id, action.row_id)
    count = len(row.stacks)
    for index in (action.old_index, action.new_index):
        if not 0 <= index < count:
            raise InvalidTarget(f"Stack index {index} out of range in row {row.id} ({count} stacks)")
    stacks = list(row.stacks)
    stacks.insert(action.new_index, stacks.pop(action.old_index))
    return layout.with_row(action.compartment_id, row.with_stacks(tuple(stacks)))


def _apply_duplicate(action: DuplicateItem, layout: Layout, policy: EditPolicy) -> Layout:
    location = locate_item(layout, action.item_id)
    original = layout.item(action.item_id)
    copy_id = action.new_id or new_item_id(original.sku)
    _require_new_id(layout, copy_id)
    copy = original.with_id(copy_id)

    row = layout.row(location.compartment_id, location.row_id)
    if not action.as_stack:
        new_row = row.with_stacks(row.stacks + (Stack((copy,)),))
        _check_capacity(row, new_row, policy)
        return layout.with_row(location.compartment_id, new_row)

    if not original.stackable:
        raise TypeMismatch(f"Item {original.id} is not stackable")
    stack = row.stacks[location.stack_index]
    new_stack = Stack(_ordered(stack.items + (copy,), policy))
    _check_height(row, new_stack, stack.height, policy)

    stacks = list(row.stacks)
    stacks[location.stack_index] = new_stack
    new_row = row.with_stacks(tuple(stacks))
    _check_capacity(row, new_row, policy)
    return layout.with_row(location.compartment_id, new_row)


_HANDLERS: Dict[type, Callable[[Any, Layout, EditPolicy], Layout]] = {
    InsertItem: _apply_insert,
    MoveStack: _apply_move,
    StackItem: _apply_stack,
    RemoveItems: _apply_remove,
    ReplaceItem: _apply_replace,
    ResizeRow: _apply_resize_row,
    ResizeCompartment: _apply_resize_compartment,
    ReorderStack: _apply_reorder,
    DuplicateItem: _apply_duplicate,
}


def apply(action: Action, layout: Layout, policy: Optional[EditPolicy] = None) -> Layout:
    """
    Apply one edit action to a layout.

    Args:
        action: Action to apply
        layout: Current snapshot (never modified)
        policy: Edit rules (defaults to EditPolicy())

    Returns:
        New Layout with the action applied

    Raises:
        EditError: Subclass naming the failed constraint; the input layout
            is unchanged
        TypeError: If action is not a known action type

    Example:
        >>> new_layout = apply(InsertItem(can, "door-1", "row-1"), layout)
        >>> new_layout.item(can.id) == can
        True
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action type: {type(action).__name__}")
    return handler(action, layout, policy or EditPolicy())
