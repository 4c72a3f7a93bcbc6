"""
Unit Tests for Export Transformer

Tests for absolute coordinates, scaling, rounding and configuration errors.
"""

import pytest

from planogram_toolkit.core.models import Box, Compartment, Layout, Row, Stack
from planogram_toolkit.core.schemas import validate_export_document
from planogram_toolkit.export import (
    CompartmentSpec,
    ExportDocument,
    InvalidCompartmentConfig,
    compartment_specs,
    to_export_format,
)
from planogram_toolkit.geometry import FrameConfig


def _export(layout, **kwargs):
    return to_export_format(layout, compartment_specs(layout), **kwargs)


class TestAbsoluteCoordinates:
    """Tests for coordinates at scale 1."""

    def test_export_when_simple_layout_then_boxes_offset_by_frame(self, simple_layout):
        """Boxes are shifted by the border horizontally and 126 vertically."""
        document = _export(simple_layout)
        products = document.compartment("door-1").sections[0].products

        assert products[0].box == Box(16, 146, 76, 156)
        assert products[1].box == Box(77, 141, 142, 156)
        assert products[0].box.corners() == [[16, 146], [16, 156], [76, 156], [76, 146]]

    def test_export_when_two_doors_then_second_door_offset_once(self, two_door_layout):
        """Door 2 content starts at 721, applied exactly once."""
        document = _export(two_door_layout)
        product = document.compartment("door-2").sections[0].products[0]
        assert product.box.left == 721
        assert product.box.right == 781
        assert document.compartment("door-2").offset_x == 721

    def test_export_when_empty_row_then_empty_section_kept(self, simple_layout):
        """Empty rows produce empty sections, positioned top to bottom."""
        sections = _export(simple_layout).compartment("door-1").sections
        assert [(s.position, s.row_id, len(s.products)) for s in sections] == [
            (1, "row-1", 2),
            (2, "row-2", 0),
        ]

    def test_export_when_empty_compartment_then_no_sections(self):
        """A compartment without rows exports with no sections."""
        layout = Layout((Compartment("door-1", 100, 100),))
        document = _export(layout)
        assert document.compartment("door-1").sections == ()

    def test_export_when_dimensions_then_include_frame(self, simple_layout):
        """Total size adds borders, header and footer."""
        dimensions = _export(simple_layout).dimensions
        assert (dimensions.width, dimensions.height) == (232, 272)

    def test_export_when_stacked_then_nested_with_own_boxes(self, make_item):
        """Stacked items are nested under the base with their own boxes."""
        row = Row("row-1", 300, 30, stacks=(
            Stack((make_item("chips", 120, 10, "CHIPS"), make_item("can", 60, 10))),
        ))
        layout = Layout((Compartment("door-1", 300, 30, (row,)),))
        product = _export(layout).compartment("door-1").sections[0].products[0]

        assert product.item_id == "chips"
        assert product.stack_size == 2
        assert [p.item_id for p in product.stacked] == ["can"]
        assert product.stacked[0].stack_size == 1
        assert product.stacked[0].box == Box(16, 136, 76, 146)


class TestPlaceholders:
    """Tests for blank placeholders in exports."""

    def test_export_when_placeholder_base_then_next_item_becomes_product(self, make_item):
        """Placeholders are skipped; the first real item is the product."""
        row = Row("row-1", 300, 30, stacks=(
            Stack((make_item("blank", 20, 10, "BLANK"), make_item("can"))),
            Stack((make_item("blank-2", 20, 10, "BLANK"),)),
        ))
        layout = Layout((Compartment("door-1", 300, 30, (row,)),))
        products = _export(layout).compartment("door-1").sections[0].products

        assert len(products) == 1
        assert products[0].item_id == "can"
        assert products[0].stack_size == 1
        assert products[0].stacked == ()
        assert products[0].position == "1"


class TestScaling:
    """Tests for scale handling and rounding."""

    def test_export_when_scale_three_then_every_value_tripled(self, simple_layout, two_door_layout):
        """Integral geometry at an integral scale round-trips exactly."""
        for layout in (simple_layout, two_door_layout):
            base = _export(layout, scale=1)
            scaled = _export(layout, scale=3)
            for one, three in zip(base.iter_products(), scaled.iter_products()):
                assert three.box == one.box.scale(3)
                assert (three.width, three.height) == (one.width * 3, one.height * 3)
            assert scaled.dimensions.width == base.dimensions.width * 3
            assert scaled.dimensions.height == base.dimensions.height * 3

    def test_export_when_fractional_then_rounded_per_corner(self, simple_layout):
        """Corners are rounded half-up from the unrounded scaled value."""
        product = _export(simple_layout, scale=0.5).compartment("door-1").sections[0].products[1]
        # Unrounded: left 38.5, top 70.5, right 71, bottom 78
        assert product.box == Box(39, 71, 71, 78)
        assert product.width == 33  # 32.5 rounds half up

    def test_export_when_fractional_scale_then_box_width_matches_product_width(self, make_item):
        """Corner rounding agrees with the rounded product width."""
        row = Row("row-1", 300, 30, stacks=(
            Stack((make_item("can-1"),)),
            Stack((make_item("can-2"),)),
        ))
        layout = Layout((Compartment("door-1", 300, 30, (row,)),))

        product = _export(layout, scale=1.5).compartment("door-1").sections[0].products[1]

        # Unrounded: left 115.5, right 205.5
        assert (product.box.left, product.box.right) == (116, 206)
        assert product.box.width == product.width == 90

    def test_export_when_scale_not_positive_then_raises_error(self, simple_layout):
        """scale must be > 0."""
        with pytest.raises(ValueError, match="scale must be > 0"):
            _export(simple_layout, scale=0)

    def test_export_when_custom_frame_then_used(self, simple_layout):
        """Frame constants come from FrameConfig."""
        frame = FrameConfig(frame_border=0, header_height=0, shelf_edge_offset=0, compartment_gap=4)
        product = _export(simple_layout, frame=frame).compartment("door-1").sections[0].products[0]
        assert product.box == Box(0, 20, 60, 30)


class TestConfiguration:
    """Tests for compartment configuration and document output."""

    def test_export_when_compartment_missing_from_config_then_raises(self, two_door_layout):
        """Layout/config desynchronization is fatal for the call."""
        with pytest.raises(InvalidCompartmentConfig, match="door-2"):
            to_export_format(two_door_layout, [CompartmentSpec("door-1", 673, 30)])

    def test_export_when_config_widths_differ_then_offsets_follow_config(self, two_door_layout):
        """Offsets are computed from the supplied configuration."""
        specs = [CompartmentSpec("door-1", 700, 30), CompartmentSpec("door-2", 673, 30)]
        document = to_export_format(two_door_layout, specs)
        assert document.compartment("door-2").offset_x == 16 + 700 + 32

    def test_to_dict_when_exported_then_passes_schema(self, simple_layout):
        """The JSON form satisfies the export schema."""
        data = _export(simple_layout, scale=3).to_dict()
        validate_export_document(data, strict=True)
        assert list(data["compartments"]) == ["door-1"]
        assert data["dimensions"]["scale"] == 3

    def test_from_dict_when_round_tripped_then_equal(self, two_door_layout):
        """ExportDocument.from_dict rebuilds the document."""
        document = _export(two_door_layout)
        assert ExportDocument.from_dict(document.to_dict()) == document
