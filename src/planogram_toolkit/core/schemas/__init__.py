"""
Schemas Package

JSON Schema definitions and validation for canonical layout drafts and
export documents.
"""

from .validator import (
    LAYOUT_SCHEMA_VERSION,
    ValidationError,
    validate_export_document,
    validate_layout_document,
)

__all__ = [
    "LAYOUT_SCHEMA_VERSION",
    "ValidationError",
    "validate_export_document",
    "validate_layout_document",
]
