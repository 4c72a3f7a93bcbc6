"""
Module: templates.library

Purpose:
    Named fixture templates and the factory that instantiates a fresh
    Layout from one. A template fixes compartment count, dimensions and
    row rules, and may pre-fill stacks by SKU.

Key Classes:
    - TemplateRow / TemplateCompartment / TemplateDefinition
    - TemplateError: Unknown template or invalid definition

Key Functions:
    - create_layout(): Fresh Layout from a template id
    - available_templates(): (id, name) of every built-in template
    - get_template(): Template definition by id

Dependencies:
    - core.models: Layout tree
    - templates.catalog: SKU instantiation

Used By:
    - Session start and template switch (editor.history.HistoryManager.reset)
    - export.detection: Target layout for imports
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from planogram_toolkit.core.models import (
    ALL_CLASSIFICATIONS,
    AllowedClassifications,
    Compartment,
    Layout,
    Row,
    Stack,
    normalize_allowed,
)

from .catalog import Catalog, CatalogError, sample_catalog

logger = logging.getLogger(__name__)


class TemplateError(Exception):
    """Unknown template id or invalid template definition."""
    pass


@dataclass(frozen=True)
class TemplateRow:
    """Row rules plus optional initial stacks (as SKU tuples, base first)."""
    id: str
    capacity: float
    max_height: float
    allowed_classifications: AllowedClassifications = ALL_CLASSIFICATIONS
    stacks: Tuple[Tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class TemplateCompartment:
    id: str
    width: float
    height: float
    rows: Tuple[TemplateRow, ...] = ()


@dataclass(frozen=True)
class TemplateDefinition:
    """
    A named fixture template (immutable).

    Example:
        >>> template = TemplateDefinition.from_dict({
        ...     "id": "mini", "name": "Mini",
        ...     "compartments": [{"id": "door-1", "width": 300, "height": 40,
        ...                       "rows": [{"id": "row-1", "capacity": 300, "max_height": 40}]}],
        ... })
        >>> template.compartments[0].rows[0].allowed_classifications
        'all'
    """

    id: str
    name: str
    compartments: Tuple[TemplateCompartment, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TemplateDefinition:
        """
        Parse a template from a dict.

        Raises:
            TemplateError: If required fields are missing or malformed
        """
        try:
            compartments = tuple(
                TemplateCompartment(
                    id=compartment["id"],
                    width=compartment["width"],
                    height=compartment["height"],
                    rows=tuple(
                        TemplateRow(
                            id=row["id"],
                            capacity=row["capacity"],
                            max_height=row["max_height"],
                            allowed_classifications=normalize_allowed(
                                row.get("allowed_classifications", ALL_CLASSIFICATIONS)
                            ),
                            stacks=tuple(tuple(stack) for stack in row.get("stacks", ())),
                        )
                        for row in compartment.get("rows", ())
                    ),
                )
                for compartment in data["compartments"]
            )
            return cls(id=data["id"], name=data.get("name", data["id"]), compartments=compartments)
        except (KeyError, TypeError) as e:
            raise TemplateError(f"Invalid template definition: {e}") from e


# ─────────────────────────────────────────────────────────────────────────────
# Built-in templates
# ─────────────────────────────────────────────────────────────────────────────

_BUILTIN_RECORDS: List[Dict[str, Any]] = [
    {
        "id": "default",
        "name": "Default 5-Shelf Cooler",
        "compartments": [{
            "id": "door-1", "width": 600, "height": 130,
            "rows": [
                {"id": "row-1", "capacity": 600, "max_height": 30,
                 "allowed_classifications": ["CAN", "TETRA", "CHIPS"], "stacks": [["sku-pepsi-can"]]},
                {"id": "row-2", "capacity": 600, "max_height": 20,
                 "allowed_classifications": ["PET_SMALL", "CAN", "TETRA"], "stacks": [["sku-pepsi-bottle-500ml"]]},
                {"id": "row-3", "capacity": 600, "max_height": 20, "allowed_classifications": "all"},
                {"id": "row-4", "capacity": 600, "max_height": 30,
                 "allowed_classifications": ["PET_LARGE", "PET_SMALL"], "stacks": [["sku-dew-2l"]]},
                {"id": "row-5", "capacity": 600, "max_height": 30, "allowed_classifications": ["PET_LARGE"]},
            ],
        }],
    },
    {
        "id": "single-door",
        "name": "Single Door Cooler (PC8L)",
        "compartments": [{
            "id": "door-1", "width": 450, "height": 100,
            "rows": [
                {"id": "row-1", "capacity": 450, "max_height": 20, "allowed_classifications": ["CAN", "TETRA"]},
                {"id": "row-2", "capacity": 450, "max_height": 20, "allowed_classifications": ["PET_SMALL"]},
                {"id": "row-3", "capacity": 450, "max_height": 30, "allowed_classifications": ["PET_LARGE"]},
                {"id": "row-4", "capacity": 450, "max_height": 30, "allowed_classifications": ["all"]},
            ],
        }],
    },
    {
        "id": "vending-machine",
        "name": "Snack Vending Machine",
        "compartments": [{
            "id": "door-1", "width": 800, "height": 24,
            "rows": [
                {"id": "row-1", "capacity": 800, "max_height": 12, "allowed_classifications": ["CHIPS"]},
                {"id": "row-2", "capacity": 800, "max_height": 12, "allowed_classifications": ["CHIPS"]},
            ],
        }],
    },
    {
        # Deliberate conflicts: a PET_LARGE in a CAN/TETRA row, and two
        # stacked cans (20) in a row that allows 15
        "id": "faulty-setup",
        "name": "Conflict Test Cooler",
        "compartments": [{
            "id": "door-1", "width": 500, "height": 35,
            "rows": [
                {"id": "row-1", "capacity": 500, "max_height": 20,
                 "allowed_classifications": ["CAN", "TETRA"],
                 "stacks": [["sku-dew-2l"], ["sku-pepsi-can"]]},
                {"id": "row-2", "capacity": 500, "max_height": 15, "allowed_classifications": "all",
                 "stacks": [["sku-pepsi-can", "sku-pepsi-can"]]},
            ],
        }],
    },
    {
        "id": "two-door",
        "name": "Two Door Cooler",
        "compartments": [
            {
                "id": door_id, "width": 673, "height": 100,
                "rows": [
                    {"id": "row-1", "capacity": 673, "max_height": 20, "allowed_classifications": ["CAN", "TETRA"]},
                    {"id": "row-2", "capacity": 673, "max_height": 20, "allowed_classifications": ["PET_SMALL", "CAN"]},
                    {"id": "row-3", "capacity": 673, "max_height": 30, "allowed_classifications": ["PET_LARGE"]},
                    {"id": "row-4", "capacity": 673, "max_height": 30, "allowed_classifications": "all"},
                ],
            }
            for door_id in ("door-1", "door-2")
        ],
    },
]

BUILTIN_TEMPLATES: Dict[str, TemplateDefinition] = {
    record["id"]: TemplateDefinition.from_dict(record) for record in _BUILTIN_RECORDS
}

DEFAULT_TEMPLATE_ID = "default"


def available_templates(
    templates: Optional[Mapping[str, TemplateDefinition]] = None,
) -> List[Tuple[str, str]]:
    """List (id, name) of every template, in definition order."""
    templates = BUILTIN_TEMPLATES if templates is None else templates
    return [(template.id, template.name) for template in templates.values()]


def get_template(
    template_id: str,
    templates: Optional[Mapping[str, TemplateDefinition]] = None,
) -> TemplateDefinition:
    """
    Look up a template by id.

    Raises:
        TemplateError: If no template has this id
    """
    templates = BUILTIN_TEMPLATES if templates is None else templates
    try:
        return templates[template_id]
    except KeyError:
        raise TemplateError(
            f"Unknown template: {template_id} (available: {', '.join(templates)})"
        ) from None


def create_layout(
    template_id: str = DEFAULT_TEMPLATE_ID,
    catalog: Optional[Catalog] = None,
    *,
    templates: Optional[Mapping[str, TemplateDefinition]] = None,
) -> Layout:
    """
    Instantiate a fresh Layout from a template.

    Every pre-filled SKU becomes a new Item with a unique id.

    Args:
        template_id: Template to instantiate
        catalog: SKU source (defaults to sample_catalog())
        templates: Template collection (defaults to BUILTIN_TEMPLATES)

    Returns:
        New Layout

    Raises:
        TemplateError: If the template is unknown, references an unknown
            SKU, or has invalid dimensions

    Example:
        >>> layout = create_layout("two-door")
        >>> layout.compartment_ids
        ('door-1', 'door-2')
    """
    template = get_template(template_id, templates)
    catalog = catalog or sample_catalog()

    try:
        compartments = tuple(
            Compartment(
                id=compartment.id,
                width=compartment.width,
                height=compartment.height,
                rows=tuple(
                    Row(
                        id=row.id,
                        capacity=row.capacity,
                        max_height=row.max_height,
                        allowed_classifications=row.allowed_classifications,
                        stacks=tuple(
                            Stack(tuple(catalog.instantiate(sku) for sku in skus))
                            for skus in row.stacks
                        ),
                    )
                    for row in compartment.rows
                ),
            )
            for compartment in template.compartments
        )
        layout = Layout(compartments)
    except (CatalogError, ValueError) as e:
        raise TemplateError(f"Cannot instantiate template {template_id}: {e}") from e

    logger.info(
        f"Created layout from template '{template_id}': "
        f"{len(layout.compartments)} compartments, {layout.item_count} items"
    )
    return layout
