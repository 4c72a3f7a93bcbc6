"""
Serialization Utilities

Provides to/from JSON utilities for layouts, and the single normalization
point for persisted drafts.

**DRAFT SHAPES ACCEPTED BY normalize_draft():**

1. Canonical (written by layout_to_dict):
   `{"schema_version": 1, "compartments": [{id, width, height, rows}]}`
2. Multi-door editor drafts:
   `{"doorCount": 2, "doors": [{id, width, height, layout: {rowId: row}}]}`
3. Legacy single-door wrapper:
   `{"width": 673, "height": 1350, "layout": {rowId: row}}`
4. Bare legacy row mapping:
   `{"row-1": {id, capacity, maxHeight, stacks, allowedProductTypes}}`

Shapes 2-4 are converted once here; nothing downstream branches on
single- vs multi-compartment layouts.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, List, Mapping, Tuple

from ..models.items import Item
from ..models.layout import (
    ALL_CLASSIFICATIONS,
    Compartment,
    Layout,
    Row,
    Stack,
    normalize_allowed,
)
from ..schemas.validator import LAYOUT_SCHEMA_VERSION, ValidationError, validate_layout_document

logger = logging.getLogger(__name__)

# Compartment id given to drafts that predate multi-door support
LEGACY_COMPARTMENT_ID = "door-1"


# ─────────────────────────────────────────────────────────────────────────────
# Canonical Layout Serialization
# ─────────────────────────────────────────────────────────────────────────────

def layout_to_dict(layout: Layout) -> dict[str, Any]:
    """
    Serialize a Layout to the canonical dictionary.

    The output can be written to JSON and will pass schema validation.

    Args:
        layout: Layout to serialize

    Returns:
        Dictionary suitable for JSON serialization
    """
    return {
        "schema_version": LAYOUT_SCHEMA_VERSION,
        "compartments": [_compartment_to_dict(c) for c in layout.compartments],
    }


def _compartment_to_dict(compartment: Compartment) -> dict[str, Any]:
    return {
        "id": compartment.id,
        "width": compartment.width,
        "height": compartment.height,
        "rows": [_row_to_dict(row) for row in compartment.rows],
    }


def _row_to_dict(row: Row) -> dict[str, Any]:
    allowed = (
        ALL_CLASSIFICATIONS if row.accepts_all
        else sorted(row.allowed_classifications)
    )
    return {
        "id": row.id,
        "capacity": row.capacity,
        "max_height": row.max_height,
        "allowed_classifications": allowed,
        "stacks": [[item.to_dict() for item in stack.items] for stack in row.stacks],
    }


def layout_from_dict(data: dict[str, Any], *, validate: bool = True) -> Layout:
    """
    Deserialize a Layout from the canonical dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate structure first

    Returns:
        Layout instance

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If model invariants are violated (e.g. duplicate ids)
    """
    if validate:
        validate_layout_document(data, strict=False)

    compartments = tuple(
        Compartment(
            id=c["id"],
            width=c["width"],
            height=c["height"],
            rows=tuple(
                _row_from_fields(
                    row_id=r["id"],
                    capacity=r["capacity"],
                    max_height=r["max_height"],
                    allowed=r.get("allowed_classifications", ALL_CLASSIFICATIONS),
                    stacks=r.get("stacks", []),
                )
                for r in c["rows"]
            ),
        )
        for c in data["compartments"]
    )
    return Layout(compartments)


def _row_from_fields(
    row_id: str,
    capacity: float,
    max_height: float,
    allowed: Any,
    stacks: List[List[dict[str, Any]]],
) -> Row:
    return Row(
        id=row_id,
        capacity=capacity,
        max_height=max_height,
        allowed_classifications=normalize_allowed(allowed),
        stacks=tuple(
            Stack(tuple(Item.from_dict(item) for item in stack))
            for stack in stacks
            if stack
        ),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Draft Normalization
# ─────────────────────────────────────────────────────────────────────────────

def _natural_key(value: str) -> Tuple[Any, ...]:
    """Sort key treating digit runs as numbers ("row-2" < "row-10")."""
    return tuple(
        int(part) if part.isdigit() else part
        for part in re.split(r"(\d+)", value)
    )


def _legacy_rows(mapping: Mapping[str, Any]) -> Tuple[Row, ...]:
    """Convert a legacy {rowId: row} mapping, ordered by natural row id."""
    rows = []
    for row_id in sorted(mapping, key=_natural_key):
        row = mapping[row_id]
        rows.append(
            _row_from_fields(
                row_id=row.get("id", row_id),
                capacity=row["capacity"],
                max_height=row.get("maxHeight", row.get("max_height")),
                allowed=row.get("allowedProductTypes", row.get("allowed_classifications")),
                stacks=row.get("stacks", []),
            )
        )
    return tuple(rows)


def _is_row_mapping(data: Mapping[str, Any]) -> bool:
    return bool(data) and all(
        isinstance(value, dict) and "capacity" in value and "stacks" in value
        for value in data.values()
    )


def normalize_draft(data: Any) -> Layout:
    """
    Normalize any supported draft shape into a canonical Layout.

    Args:
        data: Parsed JSON draft (see module docstring for shapes)

    Returns:
        Layout instance

    Raises:
        ValidationError: If the shape is not recognised or is malformed
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Draft must be a dict, got {type(data).__name__}")

    try:
        if "compartments" in data:
            return layout_from_dict(data, validate=True)

        if data.get("doors"):
            logger.debug(f"Normalizing multi-door draft with {len(data['doors'])} doors")
            return Layout(tuple(
                Compartment(
                    id=door["id"],
                    width=door["width"],
                    height=door["height"],
                    rows=_legacy_rows(door["layout"]),
                )
                for door in data["doors"]
            ))

        if isinstance(data.get("layout"), dict):
            logger.debug("Normalizing legacy single-door draft")
            rows = _legacy_rows(data["layout"])
            return Layout((
                Compartment(
                    id=LEGACY_COMPARTMENT_ID,
                    width=data.get("width") or _default_width(rows),
                    height=data.get("height") or _default_height(rows),
                    rows=rows,
                ),
            ))

        if _is_row_mapping(data):
            logger.debug("Normalizing bare legacy row mapping")
            rows = _legacy_rows(data)
            return Layout((
                Compartment(
                    id=LEGACY_COMPARTMENT_ID,
                    width=_default_width(rows),
                    height=_default_height(rows),
                    rows=rows,
                ),
            ))
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Malformed draft: {e!r}") from e

    raise ValidationError(
        "Unrecognised draft shape (expected compartments, doors, layout or a row mapping)"
    )


def _default_width(rows: Tuple[Row, ...]) -> float:
    """Legacy drafts without dimensions: widest row capacity."""
    return max((row.capacity for row in rows), default=1)


def _default_height(rows: Tuple[Row, ...]) -> float:
    """Legacy drafts without dimensions: rows stacked at max height."""
    return sum(row.max_height for row in rows) or 1


# ─────────────────────────────────────────────────────────────────────────────
# File Operations
# ─────────────────────────────────────────────────────────────────────────────

def save_layout_json(path: Path, layout: Layout) -> None:
    """
    Save a layout to a JSON file in canonical form.

    Args:
        path: Path to output file
        layout: Layout to save
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(layout_to_dict(layout), f, indent=2)
    logger.debug(f"Saved layout with {len(layout.compartments)} compartments to {path}")


def load_layout_json(path: Path) -> Layout:
    """
    Load a layout from a JSON file in any supported draft shape.

    Args:
        path: Path to JSON file

    Returns:
        Layout instance

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If data is invalid
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}") from e
    return normalize_draft(data)

