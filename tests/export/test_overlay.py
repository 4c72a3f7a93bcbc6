"""
Unit Tests for Export Overlay

Tests for drawing export boxes onto captured images.
"""

from planogram_toolkit.export import (
    compartment_specs,
    draw_export_boxes,
    save_export_overlay,
    to_export_format,
)


def _document(layout, scale=1):
    return to_export_format(layout, compartment_specs(layout), scale=scale)


class TestDrawExportBoxes:
    """Tests for draw_export_boxes()."""

    def test_draw_when_image_given_then_new_image_same_size(self, two_door_layout, sample_image):
        """Overlay is drawn on a copy; the input is untouched."""
        before = sample_image.tobytes()

        result = draw_export_boxes(_document(two_door_layout), sample_image)

        assert result is not sample_image
        assert result.size == sample_image.size
        assert result.mode == "RGB"
        assert sample_image.tobytes() == before

    def test_draw_when_no_image_then_canvas_sized_from_dimensions(self, simple_layout):
        """A blank canvas matches the exported fixture size."""
        result = draw_export_boxes(_document(simple_layout, scale=3))
        assert result.size == (232 * 3, 272 * 3)

    def test_draw_when_box_then_outline_on_left_edge(self, simple_layout):
        """The base box outline is drawn in red."""
        result = draw_export_boxes(_document(simple_layout), labels=False)

        red, green, blue = result.getpixel((16, 150))
        assert red > 200
        assert green < 100 and blue < 100
        # Outside every box
        assert result.getpixel((5, 5)) == (255, 255, 255)


class TestSaveExportOverlay:
    """Tests for save_export_overlay()."""

    def test_save_when_called_then_file_written(self, simple_layout, tmp_path):
        """The overlay is written, creating parent directories."""
        output = tmp_path / "debug" / "boxes.png"
        path = save_export_overlay(_document(simple_layout), output)
        assert path == output
        assert output.exists()
