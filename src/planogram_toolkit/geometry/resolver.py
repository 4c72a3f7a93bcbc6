"""
Module: geometry.resolver

Purpose:
    Compute compartment-local geometry: the vertical band of each row,
    the horizontal start of each stack, and the box of every item.

Key Functions:
    - resolve_row_bounds(): Row bands for every compartment in a layout
    - resolve_compartment_row_bounds(): Row bands for one compartment
    - resolve_stack_offsets(): Left edge of each stack in a row
    - resolve_item_box(): Bottom-aligned box of one item
    - resolve_stack_boxes(): Boxes of every item in a stack

Algorithm:
    Rows stack top-to-bottom with no gap, each exactly max_height tall
    (content height is irrelevant). Stacks sit left-to-right separated by
    one unit gap. Items are bottom-aligned in their row and pile upward.

Dependencies:
    - core.models: Item, Stack, Row, Compartment, Layout, Box

Used By:
    - export.transformer: Absolute coordinates
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from planogram_toolkit.core.models import Box, Compartment, Item, Layout, Row, Stack

from .config import DEFAULT_UNIT_GAP


@dataclass(frozen=True)
class RowBounds:
    """
    Vertical band [start, end) occupied by a row (compartment-local).

    Example:
        >>> bounds = RowBounds("row-1", start=0, end=30)
        >>> bounds.height
        30
    """

    row_id: str
    start: float
    end: float

    @property
    def height(self) -> float:
        return self.end - self.start


def resolve_compartment_row_bounds(compartment: Compartment) -> Tuple[RowBounds, ...]:
    """
    Resolve row bands for one compartment.

    Args:
        compartment: Compartment whose rows are ordered top-to-bottom

    Returns:
        RowBounds per row, in row order

    Example:
        >>> # rows with max_height 30 and 20
        >>> # -> RowBounds(row-1, 0, 30), RowBounds(row-2, 30, 50)
    """
    bounds = []
    y = 0.0
    for row in compartment.rows:
        bounds.append(RowBounds(row.id, y, y + row.max_height))
        y += row.max_height
    return tuple(bounds)


def resolve_row_bounds(layout: Layout) -> Dict[str, Tuple[RowBounds, ...]]:
    """
    Resolve row bands for every compartment.

    Returns:
        Mapping of compartment id to its RowBounds tuple
    """
    return {
        compartment.id: resolve_compartment_row_bounds(compartment)
        for compartment in layout.compartments
    }


def resolve_stack_offsets(row: Row, unit_gap: float = DEFAULT_UNIT_GAP) -> Tuple[float, ...]:
    """
    Resolve the left edge of each stack in a row.

    Cumulative sum of base widths with one unit gap after every stack
    except the last.

    Example:
        >>> # stacks of base width 60, 45, 70 with unit_gap=1
        >>> # -> (0, 61, 107)
    """
    offsets = []
    x = 0.0
    for stack in row.stacks:
        offsets.append(x)
        x += stack.width + unit_gap
    return tuple(offsets)


def resolve_item_box(
    item: Item,
    stack_x: float,
    row_bounds: RowBounds,
    height_below: float,
) -> Box:
    """
    Resolve the compartment-local box of one item.

    Args:
        item: Item to place
        stack_x: Left edge of the item's stack
        row_bounds: Band of the item's row
        height_below: Summed height of items beneath it in the stack

    Returns:
        Unrounded Box, bottom-aligned in the row

    Example:
        >>> box = resolve_item_box(can, 61, RowBounds("row-1", 0, 30), 10)
        >>> box.bottom, box.top  # can height 10
        (20, 10)
    """
    bottom = row_bounds.end - height_below
    top = bottom - item.height
    return Box(left=stack_x, top=top, right=stack_x + item.width, bottom=bottom)


def resolve_stack_boxes(
    stack: Stack,
    stack_x: float,
    row_bounds: RowBounds,
) -> Tuple[Box, ...]:
    """Resolve boxes for every item of a stack, base first."""
    boxes = []
    height_below = 0.0
    for item in stack.items:
        boxes.append(resolve_item_box(item, stack_x, row_bounds, height_below))
        height_below += item.height
    return tuple(boxes)
