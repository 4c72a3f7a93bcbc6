"""
Module: export.models

Purpose:
    Immutable data model of the absolute-coordinate export document:
    compartments -> sections (one per row) -> products (one per stack)
    -> stacked products. Boxes are already scaled and rounded.

Key Classes:
    - ExportProduct: One exported item with its box and stacked items
    - ExportSection: One row
    - ExportCompartment: One compartment and its horizontal offset
    - ExportDimensions: Scaled fixture size and frame constants
    - ExportDocument: Complete export

Dependencies:
    - core.models.Box

Used By:
    - export.transformer: Builds documents
    - export.detection: Converts to the detection format
    - export.overlay: Draws boxes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from planogram_toolkit.core.models import Box


@dataclass(frozen=True)
class ExportProduct:
    """
    One exported item (immutable).

    Attributes:
        sku: SKU reference
        item_id: Instance id in the layout
        name: Display name
        position: 1-based stack position within the row, as a string
        box: Scaled, rounded absolute box
        width: Scaled item width
        height: Scaled item height
        stacked: Items stacked above this one (base products only)
        stack_size: Non-placeholder items in the stack; stacked products
            carry the default 1 (the cooler format writes them as 0)

    Placeholders are never exported. When a stack's base is a
    placeholder, the first real item above it becomes the product and
    the remaining real items are its stacked products; a stack holding
    only placeholders exports nothing.
    """

    sku: str
    item_id: str
    name: str
    position: str
    box: Box
    width: float
    height: float
    stacked: Tuple[ExportProduct, ...] = ()
    stack_size: int = 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "sku": self.sku,
            "item_id": self.item_id,
            "name": self.name,
            "position": self.position,
            "stack_size": self.stack_size,
            "box": self.box.corners(),
            "width": self.width,
            "height": self.height,
            "stacked": [product.to_dict() for product in self.stacked],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExportProduct:
        return cls(
            sku=data["sku"],
            item_id=data.get("item_id", ""),
            name=data.get("name", ""),
            position=str(data.get("position", "")),
            box=Box.from_corners(data["box"]),
            width=data["width"],
            height=data["height"],
            stacked=tuple(cls.from_dict(p) for p in data.get("stacked") or ()),
            stack_size=data.get("stack_size", 1),
        )

    def iter_boxes(self):
        """Yield (sku, box) for this product and everything stacked on it."""
        yield self.sku, self.box
        for product in self.stacked:
            yield from product.iter_boxes()


@dataclass(frozen=True)
class ExportSection:
    """One row of a compartment; position is 1-based, top-to-bottom."""

    position: int
    products: Tuple[ExportProduct, ...] = ()
    row_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "position": self.position,
            "products": [product.to_dict() for product in self.products],
        }
        if self.row_id is not None:
            data["row_id"] = self.row_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExportSection:
        return cls(
            position=data["position"],
            products=tuple(ExportProduct.from_dict(p) for p in data.get("products") or ()),
            row_id=data.get("row_id"),
        )


@dataclass(frozen=True)
class ExportCompartment:
    """Sections of one compartment plus its scaled content offset."""

    id: str
    sections: Tuple[ExportSection, ...] = ()
    offset_x: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offset_x": self.offset_x,
            "sections": [section.to_dict() for section in self.sections],
        }

    @property
    def product_count(self) -> int:
        return sum(len(section.products) for section in self.sections)


@dataclass(frozen=True)
class ExportDimensions:
    """
    Scaled fixture size (immutable).

    Attributes:
        width: Total fixture width including borders and gaps
        height: Total fixture height including header and footer
        scale: Factor applied to every coordinate
        header_height, footer_height, frame_border: Scaled frame constants
    """

    width: float
    height: float
    scale: float = 1
    header_height: float = 0
    footer_height: float = 0
    frame_border: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "scale": self.scale,
            "header_height": self.header_height,
            "footer_height": self.footer_height,
            "frame_border": self.frame_border,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExportDimensions:
        return cls(
            width=data["width"],
            height=data["height"],
            scale=data.get("scale", 1),
            header_height=data.get("header_height", 0),
            footer_height=data.get("footer_height", 0),
            frame_border=data.get("frame_border", 0),
        )


@dataclass(frozen=True)
class ExportDocument:
    """
    Complete export (immutable).

    Compartments keep layout order (left-to-right).

    Example:
        >>> document = to_export_format(layout, compartment_specs(layout))
        >>> document.to_dict()["dimensions"]["scale"]
        1
    """

    compartments: Tuple[ExportCompartment, ...]
    dimensions: ExportDimensions

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON export shape keyed by compartment id."""
        return {
            "compartments": {
                compartment.id: compartment.to_dict()
                for compartment in self.compartments
            },
            "dimensions": self.dimensions.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExportDocument:
        """Rebuild a document from its JSON shape."""
        compartments = tuple(
            ExportCompartment(
                id=compartment_id,
                sections=tuple(ExportSection.from_dict(s) for s in body.get("sections") or ()),
                offset_x=body.get("offset_x", 0),
            )
            for compartment_id, body in data["compartments"].items()
        )
        return cls(compartments=compartments, dimensions=ExportDimensions.from_dict(data["dimensions"]))

    def compartment(self, compartment_id: str) -> Optional[ExportCompartment]:
        for compartment in self.compartments:
            if compartment.id == compartment_id:
                return compartment
        return None

    def iter_products(self):
        """Yield every base product in compartment, section, position order."""
        for compartment in self.compartments:
            for section in compartment.sections:
                yield from section.products

    @property
    def product_count(self) -> int:
        return sum(compartment.product_count for compartment in self.compartments)
