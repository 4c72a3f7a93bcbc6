"""
Module: export.transformer

Purpose:
    Convert a layout snapshot into the absolute-coordinate export
    document consumed by downstream vision tooling. Pure and stateless:
    every call is a function of its inputs.

Key Functions:
    - to_export_format(): Build the ExportDocument
    - compartment_specs(): Compartment configuration taken from a layout

Key Classes:
    - CompartmentSpec: Id and content size of one compartment
    - InvalidCompartmentConfig: Layout/config desynchronization

Algorithm:
    For every compartment, row, stack and item:
    1. Compartment-local box from geometry.resolver
    2. Add the compartment's X offset (once) and the vertical content
       offset (border + header + shelf edge)
    3. Multiply by scale
    4. Round each corner independently, half-up

Dependencies:
    - geometry: FrameConfig, resolver, offsets
    - export.models: Document dataclasses

Used By:
    - export.detection, export.overlay
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from planogram_toolkit.core.models import Compartment, Layout, Row, Stack
from planogram_toolkit.geometry import (
    FrameConfig,
    RowBounds,
    compartment_offsets,
    resolve_compartment_row_bounds,
    resolve_stack_boxes,
    resolve_stack_offsets,
    total_height,
    total_width,
)

from .models import (
    ExportCompartment,
    ExportDimensions,
    ExportDocument,
    ExportProduct,
    ExportSection,
)

logger = logging.getLogger(__name__)


class InvalidCompartmentConfig(Exception):
    """Layout references a compartment missing from the export configuration."""
    pass


@dataclass(frozen=True)
class CompartmentSpec:
    """
    Content size of one compartment as known to the renderer (immutable).

    Attributes:
        id: Compartment id
        width: Content width in layout units
        height: Content height in layout units
    """

    id: str
    width: float
    height: float

    def __post_init__(self) -> None:
        """Validate spec on construction."""
        if self.width <= 0:
            raise ValueError(f"width must be > 0: {self.width} (compartment {self.id})")
        if self.height <= 0:
            raise ValueError(f"height must be > 0: {self.height} (compartment {self.id})")


def compartment_specs(layout: Layout) -> Tuple[CompartmentSpec, ...]:
    """Compartment configuration matching a layout, in layout order."""
    return tuple(
        CompartmentSpec(compartment.id, compartment.width, compartment.height)
        for compartment in layout.compartments
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _stack_products(
    stack: Stack,
    position: int,
    stack_x: float,
    bounds: RowBounds,
    offset_x: float,
    offset_y: float,
    scale: float,
) -> Optional[ExportProduct]:
    """Export one stack; None when it holds only placeholders."""
    exported: List[ExportProduct] = []
    boxes = resolve_stack_boxes(stack, stack_x, bounds)
    for item, local_box in zip(stack.items, boxes):
        if item.is_placeholder:
            continue
        box = local_box.translate(offset_x, offset_y).scale(scale).rounded()
        exported.append(ExportProduct(
            sku=item.sku,
            item_id=item.id,
            name=item.name,
            position=str(position),
            box=box,
            width=_round_half_up(item.width * scale),
            height=_round_half_up(item.height * scale),
        ))

    if not exported:
        return None
    base, stacked = exported[0], tuple(exported[1:])
    return ExportProduct(
        sku=base.sku,
        item_id=base.item_id,
        name=base.name,
        position=base.position,
        box=base.box,
        width=base.width,
        height=base.height,
        stacked=stacked,
        stack_size=len(exported),
    )


def _row_section(
    row: Row,
    index: int,
    bounds: RowBounds,
    offset_x: float,
    offset_y: float,
    scale: float,
    unit_gap: float,
) -> ExportSection:
    products = []
    for stack_index, (stack, stack_x) in enumerate(zip(row.stacks, resolve_stack_offsets(row, unit_gap))):
        product = _stack_products(stack, stack_index + 1, stack_x, bounds, offset_x, offset_y, scale)
        if product is not None:
            products.append(product)
    return ExportSection(position=index + 1, products=tuple(products), row_id=row.id)


def _export_compartment(
    compartment: Compartment,
    offset_x: float,
    frame: FrameConfig,
    scale: float,
) -> ExportCompartment:
    sections = tuple(
        _row_section(row, index, bounds, offset_x, frame.content_top, scale, frame.unit_gap)
        for index, (row, bounds) in enumerate(
            zip(compartment.rows, resolve_compartment_row_bounds(compartment))
        )
    )
    return ExportCompartment(id=compartment.id, sections=sections, offset_x=offset_x * scale)


def to_export_format(
    layout: Layout,
    compartments: Sequence[CompartmentSpec],
    frame: Optional[FrameConfig] = None,
    scale: float = 1,
) -> ExportDocument:
    """
    Build the absolute-coordinate export document.

    Args:
        layout: Snapshot to export
        compartments: Compartment configuration used by the renderer
        frame: Frame constants (defaults to FrameConfig())
        scale: Factor applied to every coordinate, width and height
            (e.g. the capture pixel ratio)

    Returns:
        ExportDocument; empty rows and compartments produce empty sections

    Raises:
        InvalidCompartmentConfig: If the layout references a compartment
            absent from compartments
        ValueError: If scale is not positive

    Example:
        >>> document = to_export_format(layout, compartment_specs(layout), scale=3)
        >>> document.dimensions.scale
        3
    """
    if scale <= 0:
        raise ValueError(f"scale must be > 0: {scale}")
    frame = frame or FrameConfig()

    specs = {spec.id: spec for spec in compartments}
    missing = [c.id for c in layout.compartments if c.id not in specs]
    if missing:
        raise InvalidCompartmentConfig(
            f"Compartments missing from export configuration: {', '.join(missing)}"
        )

    ordered = [specs[compartment.id] for compartment in layout.compartments]
    offsets = compartment_offsets(ordered, frame.frame_border, frame.compartment_gap)

    exported = tuple(
        _export_compartment(compartment, offset_x, frame, scale)
        for compartment, offset_x in zip(layout.compartments, offsets)
    )

    dimensions = ExportDimensions(
        width=total_width(ordered, frame.frame_border, frame.compartment_gap) * scale,
        height=total_height(ordered, frame.frame_border, frame.header_height, frame.footer_height) * scale,
        scale=scale,
        header_height=frame.header_height * scale,
        footer_height=frame.footer_height * scale,
        frame_border=frame.frame_border * scale,
    )
    document = ExportDocument(compartments=exported, dimensions=dimensions)
    logger.info(
        f"Exported {document.product_count} products in "
        f"{len(exported)} compartments at scale {scale}"
    )
    return document
