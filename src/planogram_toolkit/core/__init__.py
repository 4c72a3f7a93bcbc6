"""
Planogram Toolkit Core Package

Shared data models, schema validation and serialization used by every
other subpackage.

**DESIGN NOTES:**

1. **Immutable Layout Snapshots**
   - Every edit builds a new Layout; nothing mutates a published one.

2. **One Canonical Shape**
   - Legacy single-door drafts and multi-door drafts are normalized once,
     at ingestion, into `Layout` (compartments ordered left-to-right).

3. **Explicit Locations**
   - Every location names its compartment; there is no default door.
"""

from .models import Item, Stack, Row, Compartment, Layout, ItemLocation, Box

__all__ = [
    "Item",
    "Stack",
    "Row",
    "Compartment",
    "Layout",
    "ItemLocation",
    "Box",
]
