"""
Module: items

Purpose:
    Provides the Item dataclass - one placeable product instance (or a
    blank placeholder) with physical dimensions and a product
    classification. Items are the leaves of the layout tree.

Key Functions:
    - Item.is_placeholder: True for blank-space fillers
    - Item.with_id(): Copy of the item under a new instance id
    - Item.to_dict() / Item.from_dict(): Serialization
    - new_item_id(): Unique instance id for a SKU

Dependencies:
    - dataclasses (std)
    - uuid (std)

Used By:
    - core.models.layout (Stack)
    - templates.catalog (instantiation from catalog entries)
    - editor.actions
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from typing import Any

# SKU used for blank spacers; never subject to placement-type rules
BLANK_SKU = "sku-blank-space"
BLANK_CLASSIFICATION = "BLANK"


def new_item_id(sku: str) -> str:
    """
    Create a unique instance id for an item of the given SKU.

    Example:
        >>> new_item_id("sku-pepsi-can")  # doctest: +SKIP
        'sku-pepsi-can-3f2a9c1b0'
    """
    return f"{sku}-{uuid.uuid4().hex[:9]}"


@dataclass(frozen=True, slots=True)
class Item:
    """
    A single physical product instance (immutable).

    Attributes:
        id: Unique instance id, e.g. "sku-pepsi-can-3f2a9c1b0"
        sku: SKU reference in the catalog
        width: Horizontal footprint in layout units
        height: Vertical extent in layout units
        classification: Product type, e.g. "CAN", "PET_SMALL"
        stackable: Whether other items may be stacked with this one
        name: Display name (optional)

    Invariants:
        - width > 0, height > 0
        - id and sku are non-empty

    Example:
        >>> can = Item("can-1", "sku-pepsi-can", 60, 10, "CAN", stackable=True)
        >>> can.is_placeholder
        False
    """

    id: str
    sku: str
    width: float
    height: float
    classification: str
    stackable: bool = False
    name: str = ""

    def __post_init__(self) -> None:
        """Validate item on construction."""
        if not self.id:
            raise ValueError("Item id must be non-empty")
        if not self.sku:
            raise ValueError(f"Item {self.id} has an empty sku")
        if self.width <= 0:
            raise ValueError(f"width must be > 0: {self.width} (item {self.id})")
        if self.height <= 0:
            raise ValueError(f"height must be > 0: {self.height} (item {self.id})")

    @property
    def is_placeholder(self) -> bool:
        """Blank spacer items are exempt from placement-type rules."""
        return self.sku == BLANK_SKU or self.classification == BLANK_CLASSIFICATION

    def with_id(self, item_id: str) -> Item:
        """Return a copy of this item under a different instance id."""
        return replace(self, id=item_id)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "classification": self.classification,
            "stackable": self.stackable,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Item:
        """
        Deserialize from dictionary.

        Accepts the canonical keys as well as the legacy editor spelling
        (skuId, productType, constraints.stackable).
        """
        constraints = data.get("constraints") or {}
        return cls(
            id=data["id"],
            sku=data.get("sku") or data["skuId"],
            width=data["width"],
            height=data["height"],
            classification=data.get("classification") or data.get("productType", "GENERAL"),
            stackable=bool(data.get("stackable", constraints.get("stackable", False))),
            name=data.get("name", ""),
        )

    def __repr__(self) -> str:
        return f"Item({self.id!r}, {self.width}x{self.height}, {self.classification})"
