"""
Core Models Package

Immutable, validated data models that serve as the single source of truth
for a fixture layout.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses built from tuples. This
ensures:
1. No accidental mutation of a published snapshot
2. Structural equality, so undo can be checked with ==
3. Snapshots can be shared by the validator, exporter and renderer
"""

from .items import Item, BLANK_SKU, BLANK_CLASSIFICATION, new_item_id
from .layout import (
    ALL_CLASSIFICATIONS,
    AllowedClassifications,
    Compartment,
    ItemLocation,
    Layout,
    Row,
    Stack,
    normalize_allowed,
    stack_footprint,
)
from .boxes import Box

__all__ = [
    "Item",
    "BLANK_SKU",
    "BLANK_CLASSIFICATION",
    "new_item_id",
    "ALL_CLASSIFICATIONS",
    "AllowedClassifications",
    "Stack",
    "Row",
    "Compartment",
    "Layout",
    "ItemLocation",
    "normalize_allowed",
    "stack_footprint",
    "Box",
]
