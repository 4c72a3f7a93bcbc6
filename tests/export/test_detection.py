"""
Unit Tests for Detection Format Bridge

Tests for rendering export documents as the cooler shape and importing
detection results back into template layouts.
"""

import logging

import pytest

from planogram_toolkit.core.schemas import ValidationError
from planogram_toolkit.export import (
    EMPTY_PRODUCT,
    EMPTY_SKU,
    compartment_specs,
    from_cooler_format,
    to_cooler_format,
    to_export_format,
)
from planogram_toolkit.templates import create_layout

LOGGER = "planogram_toolkit.export.detection"


def _product(sku, stacked=()):
    return {"product": sku, "SKU-Code": sku, "stacked": list(stacked)}


def _door(*sections):
    return {
        "Sections": [
            {"position": index + 1, "products": products}
            for index, products in enumerate(sections)
        ]
    }


def _row_skus(layout, compartment_id, row_id):
    row = layout.row(compartment_id, row_id)
    return [[item.sku for item in stack.items] for stack in row.stacks]


class TestToCoolerFormat:
    """Tests for export -> detection shape."""

    def test_to_cooler_when_two_doors_then_door_keys_in_order(self, two_door_layout):
        """Compartments become Door-1, Door-2."""
        cooler = to_cooler_format(to_export_format(two_door_layout, compartment_specs(two_door_layout)))
        assert list(cooler["Cooler"]) == ["Door-1", "Door-2"]
        assert cooler["dimensions"]["BoundingBoxScale"] == 1

    def test_to_cooler_when_product_then_fields_present(self, simple_layout):
        """Products carry SKU, position, stack size and corner box."""
        cooler = to_cooler_format(to_export_format(simple_layout, compartment_specs(simple_layout)))
        sections = cooler["Cooler"]["Door-1"]["Sections"]
        product = sections[0]["products"][0]

        assert product["SKU-Code"] == "sku-can"
        assert product["Position"] == "1"
        assert product["stackSize"] == 1
        assert product["Bounding-Box"] == [[16, 146], [16, 156], [76, 156], [76, 146]]
        assert product["stacked"] == []
        assert sections[1]["products"] == []

    def test_to_cooler_when_stacked_then_nested_entries_have_no_stack(self):
        """Stacked entries report stackSize 0 and no nested stack."""
        layout = create_layout("faulty-setup")
        cooler = to_cooler_format(to_export_format(layout, compartment_specs(layout)))
        product = cooler["Cooler"]["Door-1"]["Sections"][1]["products"][0]

        assert product["stackSize"] == 2
        assert len(product["stacked"]) == 1
        assert product["stacked"][0]["stackSize"] == 0
        assert product["stacked"][0]["stacked"] is None


class TestFromCoolerFormat:
    """Tests for detection -> layout import."""

    def test_from_cooler_when_detected_then_rows_refilled(self, catalog):
        """Sections map to rows by index; template stacks are cleared."""
        template = create_layout("default", catalog)
        data = {"Cooler": {"Door-1": _door(
            [_product("sku-pepsi-can", [_product("sku-pepsi-can")]), _product("sku-tropicana-sm")],
            [],
        )}}

        layout = from_cooler_format(data, catalog, template)

        assert _row_skus(layout, "door-1", "row-1") == [
            ["sku-pepsi-can", "sku-pepsi-can"],
            ["sku-tropicana-sm"],
        ]
        assert _row_skus(layout, "door-1", "row-2") == []
        assert _row_skus(layout, "door-1", "row-4") == []

    def test_from_cooler_when_empty_markers_then_skipped(self, catalog):
        """Empty slots are not imported, including inside stacks."""
        template = create_layout("two-door", catalog)
        data = {"Cooler": {"Door-1": _door([
            _product(EMPTY_SKU),
            {"product": EMPTY_PRODUCT, "SKU-Code": "sku-pepsi-can"},
            _product("sku-pepsi-can", [_product(EMPTY_SKU)]),
        ])}}

        layout = from_cooler_format(data, catalog, template)
        assert _row_skus(layout, "door-1", "row-1") == [["sku-pepsi-can"]]

    def test_from_cooler_when_unknown_sku_then_warned_and_skipped(self, catalog, caplog):
        """Unknown SKUs are reported, not fatal."""
        template = create_layout("two-door", catalog)
        data = {"Cooler": {"Door-2": _door([_product("sku-mystery"), _product("sku-pepsi-can")])}}

        with caplog.at_level(logging.WARNING, logger=LOGGER):
            layout = from_cooler_format(data, catalog, template)

        assert "sku-mystery" in caplog.text
        # Door-2 is the only door key, so it maps to the first compartment
        assert _row_skus(layout, "door-1", "row-1") == [["sku-pepsi-can"]]
        assert _row_skus(layout, "door-2", "row-1") == []

    def test_from_cooler_when_surplus_sections_and_doors_then_ignored(self, catalog, caplog):
        """Sections and doors without a counterpart are dropped with a warning."""
        template = create_layout("single-door", catalog)
        five_sections = _door(*([[_product("sku-pepsi-can")]] * 5))
        data = {"Cooler": {"Door-1": five_sections, "Door-2": _door([_product("sku-pepsi-can")])}}

        with caplog.at_level(logging.WARNING, logger=LOGGER):
            layout = from_cooler_format(data, catalog, template)

        assert layout.item_count == 4
        assert "section 5" in caplog.text
        assert "Door-2" in caplog.text

    def test_from_cooler_when_doors_unordered_then_sorted_numerically(self, catalog):
        """Door keys are matched to compartments in numeric order."""
        template = create_layout("two-door", catalog)
        data = {"Cooler": {
            "Door-2": _door([_product("sku-tropicana-sm")]),
            "Door-1": _door([_product("sku-pepsi-can")]),
        }}

        layout = from_cooler_format(data, catalog, template)
        assert _row_skus(layout, "door-1", "row-1") == [["sku-pepsi-can"]]
        assert _row_skus(layout, "door-2", "row-1") == [["sku-tropicana-sm"]]

    def test_from_cooler_when_no_cooler_then_raises_validation_error(self, catalog):
        """Input without a Cooler mapping is rejected."""
        with pytest.raises(ValidationError, match="Cooler") as exc_info:
            from_cooler_format({"doors": []}, catalog, create_layout("default", catalog))
        assert exc_info.value.path == "Cooler"

    def test_from_cooler_when_round_tripped_then_skus_preserved(self, catalog):
        """Exporting then importing keeps every SKU in place."""
        original = create_layout("faulty-setup", catalog)
        cooler = to_cooler_format(to_export_format(original, compartment_specs(original)))

        imported = from_cooler_format(cooler, catalog, create_layout("faulty-setup", catalog))

        for row_id in ("row-1", "row-2"):
            assert _row_skus(imported, "door-1", row_id) == _row_skus(original, "door-1", row_id)
