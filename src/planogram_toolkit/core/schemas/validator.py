"""
Schema Validation Utilities

Validates JSON-shaped layout drafts and export documents.

Two levels:
- Basic checks (always): required fields, id/number sanity, with a
  dotted `path` to the offending value
- Strict checks (`strict=True`): full JSON Schema validation against the
  bundled `*.schema.json` files via `jsonschema`
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
LAYOUT_SCHEMA_VERSION = 1


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _validate_against_schema(data: dict[str, Any], schema_name: str) -> None:
    """Run full JSON Schema validation, converting errors."""
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        ) from e


def _require(data: dict[str, Any], fields: list[str], path: str) -> None:
    missing = [f for f in fields if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )


def _require_positive(data: dict[str, Any], field: str, path: str) -> None:
    value = data.get(field)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValidationError(
            f"Invalid {field}: {value!r} (must be a positive number)",
            path=f"{path}.{field}" if path else field,
        )


def validate_layout_document(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a canonical layout dictionary.

    Args:
        data: Layout dictionary (see layout_to_dict)
        strict: If True, also run full JSON Schema validation

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Layout must be a dict, got {type(data).__name__}")

    _require(data, ["schema_version", "compartments"], "")

    version = data.get("schema_version")
    if version != LAYOUT_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported layout schema version: {version} (expected {LAYOUT_SCHEMA_VERSION})",
            path="schema_version",
        )

    compartments = data["compartments"]
    if not isinstance(compartments, list):
        raise ValidationError("compartments must be a list", path="compartments")

    seen_ids: set[str] = set()
    for i, compartment in enumerate(compartments):
        path = f"compartments[{i}]"
        _require(compartment, ["id", "width", "height", "rows"], path)
        if compartment["id"] in seen_ids:
            raise ValidationError(
                f"Duplicate compartment id: {compartment['id']!r}",
                path=f"{path}.id",
            )
        seen_ids.add(compartment["id"])
        _require_positive(compartment, "width", path)
        _require_positive(compartment, "height", path)
        for j, row in enumerate(compartment["rows"]):
            _validate_row(row, f"{path}.rows[{j}]")

    if strict:
        _validate_against_schema(data, "layout")


def _validate_row(data: dict[str, Any], path: str) -> None:
    """Validate a row node."""
    _require(data, ["id", "capacity", "max_height", "stacks"], path)
    _require_positive(data, "capacity", path)
    _require_positive(data, "max_height", path)

    stacks = data["stacks"]
    if not isinstance(stacks, list):
        raise ValidationError("stacks must be a list", path=f"{path}.stacks")
    for k, stack in enumerate(stacks):
        if not isinstance(stack, list) or not stack:
            raise ValidationError(
                "stack must be a non-empty list of items",
                path=f"{path}.stacks[{k}]",
            )
        for level, item in enumerate(stack):
            item_path = f"{path}.stacks[{k}][{level}]"
            _require(item, ["id", "width", "height"], item_path)
            _require_positive(item, "width", item_path)
            _require_positive(item, "height", item_path)


def validate_export_document(data: dict[str, Any], *, strict: bool = True) -> None:
    """
    Validate an export document dictionary.

    Args:
        data: Export document (see ExportDocument.to_dict)
        strict: If True (default), run full JSON Schema validation

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["compartments", "dimensions"], "")

    dimensions = data["dimensions"]
    _require(dimensions, ["width", "height", "scale"], "dimensions")
    _require_positive(dimensions, "scale", "dimensions")

    if strict:
        _validate_against_schema(data, "export")
