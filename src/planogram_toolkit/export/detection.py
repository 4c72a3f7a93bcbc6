"""
Module: export.detection

Purpose:
    Bridge to the shelf-detection backend's cooler format. Export
    documents are rendered as {"Cooler": {"Door-N": {"Sections": ...}}},
    and detection results in the same shape are imported back into a
    template layout.

Key Functions:
    - to_cooler_format(): ExportDocument -> detection-format dict
    - from_cooler_format(): Detection-format dict -> Layout

Import Rules:
    - Doors map to compartments by index (Door-1 -> first compartment)
    - Sections map to rows by index; surplus sections are ignored
    - Empty markers (SKU "shelfscan_0000" or product "Empty") are skipped
    - Unknown SKUs are skipped; a stack whose base is unknown keeps its
      known stacked items
    - Every template row is cleared before import

Dependencies:
    - export.models: ExportDocument
    - templates.catalog: Catalog
    - core.schemas: ValidationError

Used By:
    - Detection upload and hand-off collaborators
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any, Dict, List, Mapping

from planogram_toolkit.core.models import Item, Layout, Stack
from planogram_toolkit.core.schemas import ValidationError
from planogram_toolkit.templates.catalog import Catalog

from .models import ExportDocument, ExportProduct

logger = logging.getLogger(__name__)

EMPTY_SKU = "shelfscan_0000"
EMPTY_PRODUCT = "Empty"
DEFAULT_CONFIDENCE = "1.0"

_DOOR_KEY = re.compile(r"^Door-(\d+)$")


# ─────────────────────────────────────────────────────────────────────────────
# Export -> detection format
# ─────────────────────────────────────────────────────────────────────────────

def _cooler_product(product: ExportProduct, stacked: bool = False) -> Dict[str, Any]:
    return {
        "product": product.name,
        "SKU-Code": product.sku,
        "Position": product.position,
        "stackSize": 0 if stacked else product.stack_size,
        "Confidence": DEFAULT_CONFIDENCE,
        "Bounding-Box": product.box.corners(),
        "stacked": None if stacked else [_cooler_product(p, stacked=True) for p in product.stacked],
    }


def to_cooler_format(document: ExportDocument) -> Dict[str, Any]:
    """
    Render an export document in the detection backend's shape.

    Compartments become "Door-1", "Door-2", ... in layout order.

    Example:
        >>> cooler = to_cooler_format(document)
        >>> list(cooler["Cooler"])
        ['Door-1', 'Door-2']
    """
    cooler: Dict[str, Any] = {}
    for index, compartment in enumerate(document.compartments):
        cooler[f"Door-{index + 1}"] = {
            "data": [],
            "Sections": [
                {
                    "data": [],
                    "position": section.position,
                    "products": [_cooler_product(p) for p in section.products],
                }
                for section in compartment.sections
            ],
            "Door-Visible": True,
        }
    return {
        "Cooler": cooler,
        "dimensions": {
            "width": document.dimensions.width,
            "height": document.dimensions.height,
            "BoundingBoxScale": document.dimensions.scale,
        },
    }


# ─────────────────────────────────────────────────────────────────────────────
# Detection format -> layout
# ─────────────────────────────────────────────────────────────────────────────

def _is_empty(product: Mapping[str, Any]) -> bool:
    return product.get("SKU-Code") == EMPTY_SKU or product.get("product") == EMPTY_PRODUCT


def _instantiate(sku: str, catalog: Catalog, door_key: str) -> List[Item]:
    if sku not in catalog:
        logger.warning(f"{door_key}: skipped unknown SKU {sku!r}")
        return []
    return [catalog.instantiate(sku)]


def _detected_stack(product: Mapping[str, Any], catalog: Catalog, door_key: str) -> List[Item]:
    items = _instantiate(product.get("SKU-Code", ""), catalog, door_key)
    for stacked in product.get("stacked") or ():
        if _is_empty(stacked):
            continue
        items.extend(_instantiate(stacked.get("SKU-Code", ""), catalog, door_key))
    return items


def _door_keys(cooler: Mapping[str, Any]) -> List[str]:
    keys = [key for key in cooler if _DOOR_KEY.match(key)]
    return sorted(keys, key=lambda key: int(_DOOR_KEY.match(key).group(1)))


def from_cooler_format(data: Mapping[str, Any], catalog: Catalog, layout: Layout) -> Layout:
    """
    Import a detection result into a template layout.

    Args:
        data: Detection-format dict with a "Cooler" mapping
        catalog: SKU source for detected products
        layout: Template layout; its rows are cleared and refilled

    Returns:
        New Layout holding the detected stacks

    Raises:
        ValidationError: If data has no "Cooler" mapping

    Example:
        >>> imported = from_cooler_format(detected, sample_catalog(), create_layout("two-door"))
        >>> imported.compartment_ids
        ('door-1', 'door-2')
    """
    cooler = data.get("Cooler") if isinstance(data, Mapping) else None
    if not isinstance(cooler, Mapping):
        raise ValidationError("Detection result has no 'Cooler' mapping", path="Cooler")

    compartments = [
        replace(c, rows=tuple(row.with_stacks(()) for row in c.rows))
        for c in layout.compartments
    ]

    imported = 0
    for index, door_key in enumerate(_door_keys(cooler)):
        if index >= len(compartments):
            logger.warning(
                f"{door_key}: layout has only {len(compartments)} compartments; door ignored"
            )
            continue
        compartment = compartments[index]
        sections = sorted(
            cooler[door_key].get("Sections") or (),
            key=lambda section: section.get("position", 0),
        )

        rows = list(compartment.rows)
        for section_index, section in enumerate(sections):
            if section_index >= len(rows):
                logger.warning(
                    f"{door_key}: section {section_index + 1} has no matching row "
                    f"({len(rows)} rows); ignored"
                )
                continue
            stacks = []
            for product in section.get("products") or ():
                if _is_empty(product):
                    continue
                items = _detected_stack(product, catalog, door_key)
                if items:
                    stacks.append(Stack(tuple(items)))
            imported += sum(len(stack.items) for stack in stacks)
            rows[section_index] = rows[section_index].with_stacks(tuple(stacks))
        compartments[index] = replace(compartment, rows=tuple(rows))

    result = Layout(tuple(compartments))
    logger.info(f"Imported {imported} detected items into {len(compartments)} compartments")
    return result
