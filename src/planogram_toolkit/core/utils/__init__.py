"""
Core Utilities Package

Serialization and draft normalization helpers.
"""

from .serialization import (
    LEGACY_COMPARTMENT_ID,
    layout_from_dict,
    layout_to_dict,
    load_layout_json,
    normalize_draft,
    save_layout_json,
)

__all__ = [
    "LEGACY_COMPARTMENT_ID",
    "layout_from_dict",
    "layout_to_dict",
    "load_layout_json",
    "normalize_draft",
    "save_layout_json",
]
