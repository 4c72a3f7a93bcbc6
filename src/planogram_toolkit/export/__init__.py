"""
Module: export

Purpose:
    Absolute-coordinate export of layouts, the detection backend format,
    and a Pillow debug overlay.

Key Functions:
    - to_export_format(): Layout -> ExportDocument
    - to_cooler_format() / from_cooler_format(): Detection format bridge
    - draw_export_boxes(): Debug overlay
"""

from .detection import EMPTY_PRODUCT, EMPTY_SKU, from_cooler_format, to_cooler_format
from .models import (
    ExportCompartment,
    ExportDimensions,
    ExportDocument,
    ExportProduct,
    ExportSection,
)
from .overlay import draw_export_boxes, save_export_overlay
from .transformer import (
    CompartmentSpec,
    InvalidCompartmentConfig,
    compartment_specs,
    to_export_format,
)

__all__ = [
    # Models
    "ExportCompartment",
    "ExportDimensions",
    "ExportDocument",
    "ExportProduct",
    "ExportSection",
    # Transformer
    "CompartmentSpec",
    "InvalidCompartmentConfig",
    "compartment_specs",
    "to_export_format",
    # Detection format
    "EMPTY_PRODUCT",
    "EMPTY_SKU",
    "from_cooler_format",
    "to_cooler_format",
    # Overlay
    "draw_export_boxes",
    "save_export_overlay",
]
