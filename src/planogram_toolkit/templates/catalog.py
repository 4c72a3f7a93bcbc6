"""
Module: templates.catalog

Purpose:
    Product catalog: the SKUs available for placement and the factory
    that turns a catalog entry into a layout Item with a fresh id.

Key Classes:
    - CatalogEntry: One SKU with dimensions and classification
    - Catalog: SKU-keyed collection
    - CatalogError: Unknown SKU or malformed record

Key Functions:
    - sample_catalog(): Built-in demo catalog

Used By:
    - templates.library: Initial stacks of templates
    - export.detection: Importing detected SKUs
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional

from planogram_toolkit.core.models import BLANK_CLASSIFICATION, BLANK_SKU, Item, new_item_id


class CatalogError(Exception):
    """Unknown SKU or invalid catalog record."""
    pass


@dataclass(frozen=True)
class CatalogEntry:
    """
    One SKU available for placement (immutable).

    Attributes:
        sku: SKU identifier, e.g. "sku-pepsi-can"
        name: Display name
        classification: Product type used by row rules
        width: Footprint width in layout units
        height: Height in layout units
        stackable: Whether the item may be stacked
    """

    sku: str
    name: str
    classification: str
    width: float
    height: float
    stackable: bool = False

    def __post_init__(self) -> None:
        """Validate entry on construction."""
        if not self.sku:
            raise ValueError("sku must be non-empty")
        if self.width <= 0:
            raise ValueError(f"width must be > 0: {self.width} (sku {self.sku})")
        if self.height <= 0:
            raise ValueError(f"height must be > 0: {self.height} (sku {self.sku})")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CatalogEntry:
        """
        Parse a catalog record.

        Accepts {sku, name, classification, width, height, stackable} and
        the editor spelling {skuId, productType, constraints.stackable}.
        """
        constraints = data.get("constraints") or {}
        return cls(
            sku=data.get("sku") or data["skuId"],
            name=data.get("name", ""),
            classification=data.get("classification") or data["productType"],
            width=data["width"],
            height=data["height"],
            stackable=bool(data.get("stackable", constraints.get("stackable", False))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sku": self.sku,
            "name": self.name,
            "classification": self.classification,
            "width": self.width,
            "height": self.height,
            "stackable": self.stackable,
        }


class Catalog:
    """
    SKU-keyed product catalog.

    Example:
        >>> catalog = sample_catalog()
        >>> can = catalog.instantiate("sku-pepsi-can")
        >>> can.classification
        'CAN'
    """

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: Dict[str, CatalogEntry] = {}
        for entry in entries:
            if entry.sku in self._entries:
                raise CatalogError(f"Duplicate SKU in catalog: {entry.sku}")
            self._entries[entry.sku] = entry

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> Catalog:
        """Build a catalog from dict records (either spelling)."""
        entries = []
        for index, record in enumerate(records):
            try:
                entries.append(CatalogEntry.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                raise CatalogError(f"Invalid catalog record at index {index}: {e}") from e
        return cls(entries)

    def get(self, sku: str) -> Optional[CatalogEntry]:
        return self._entries.get(sku)

    def instantiate(self, sku: str, item_id: Optional[str] = None) -> Item:
        """
        Create a layout Item for a SKU.

        Args:
            sku: SKU to instantiate
            item_id: Instance id; a fresh one is generated when omitted

        Raises:
            CatalogError: If the SKU is not in the catalog
        """
        entry = self._entries.get(sku)
        if entry is None:
            raise CatalogError(f"Unknown SKU: {sku}")
        return Item(
            id=item_id or new_item_id(sku),
            sku=entry.sku,
            width=entry.width,
            height=entry.height,
            classification=entry.classification,
            stackable=entry.stackable,
            name=entry.name,
        )

    def __contains__(self, sku: object) -> bool:
        return sku in self._entries

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


SAMPLE_ENTRIES = (
    CatalogEntry("sku-pepsi-can", "Pepsi Can", "CAN", 60, 10, stackable=True),
    CatalogEntry("sku-pepsi-bottle-500ml", "Pepsi 500ml", "PET_SMALL", 70, 18),
    CatalogEntry("sku-dew-2l", "Mtn Dew 2L", "PET_LARGE", 100, 28),
    CatalogEntry("sku-tropicana-sm", "Tropicana Small", "TETRA", 65, 15),
    CatalogEntry("sku-lays-chips", "Lays Chips", "CHIPS", 120, 10, stackable=True),
    CatalogEntry(BLANK_SKU, "Blank Space", BLANK_CLASSIFICATION, 20, 10, stackable=True),
)


def sample_catalog() -> Catalog:
    """Built-in demo catalog (five beverages/snacks plus the blank spacer)."""
    return Catalog(SAMPLE_ENTRIES)
