"""
Module: geometry

Purpose:
    Geometry for fixture layouts: compartment-local boxes for rows,
    stacks and items, and the absolute offsets of compartments inside
    the frame.

Key Functions:
    - resolve_row_bounds(), resolve_stack_offsets(), resolve_item_box()
    - offset_for(), total_width(), total_height()

Key Classes:
    - FrameConfig: Frame border, header/footer bands, gaps
    - RowBounds: Vertical band of a row

Used By:
    - export.transformer
"""

from .config import (
    DEFAULT_FRAME_BORDER,
    DEFAULT_HEADER_HEIGHT,
    DEFAULT_FOOTER_HEIGHT,
    DEFAULT_COMPARTMENT_GAP,
    DEFAULT_SHELF_EDGE_OFFSET,
    DEFAULT_UNIT_GAP,
    DEFAULT_PIXEL_RATIO,
    FrameConfig,
)
from .resolver import (
    RowBounds,
    resolve_compartment_row_bounds,
    resolve_item_box,
    resolve_row_bounds,
    resolve_stack_boxes,
    resolve_stack_offsets,
)
from .offsets import compartment_offsets, offset_for, total_height, total_width

__all__ = [
    # Config
    "DEFAULT_FRAME_BORDER",
    "DEFAULT_HEADER_HEIGHT",
    "DEFAULT_FOOTER_HEIGHT",
    "DEFAULT_COMPARTMENT_GAP",
    "DEFAULT_SHELF_EDGE_OFFSET",
    "DEFAULT_UNIT_GAP",
    "DEFAULT_PIXEL_RATIO",
    "FrameConfig",
    # Resolver
    "RowBounds",
    "resolve_compartment_row_bounds",
    "resolve_item_box",
    "resolve_row_bounds",
    "resolve_stack_boxes",
    "resolve_stack_offsets",
    # Offsets
    "compartment_offsets",
    "offset_for",
    "total_height",
    "total_width",
]
