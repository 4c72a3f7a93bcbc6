"""
Unit Tests for Compartment Offsets

Tests for horizontal composition of compartments inside the frame.
"""

import pytest

from planogram_toolkit.core.models import Compartment
from planogram_toolkit.geometry import compartment_offsets, offset_for, total_height, total_width


@pytest.fixture
def doors():
    """Two 673-wide compartments."""
    return [Compartment("door-1", 673, 1350), Compartment("door-2", 673, 1350)]


class TestOffsetFor:
    """Tests for offset_for()."""

    def test_offset_when_first_compartment_then_equals_border(self, doors):
        """The first compartment starts after one border."""
        assert offset_for(0, doors, frame_border=16) == 16

    def test_offset_when_second_door_then_721(self, doors):
        """Two 673-wide doors with a 16 border put door 2 at 721."""
        assert offset_for(1, doors, frame_border=16, compartment_gap=0) == 721

    def test_offset_when_gap_given_then_added_per_preceding_compartment(self, doors):
        """Each preceding compartment adds one gap."""
        assert offset_for(1, doors, frame_border=16, compartment_gap=8) == 729

    def test_offset_when_index_out_of_range_then_raises_index_error(self, doors):
        """Indices outside the sequence raise IndexError."""
        with pytest.raises(IndexError, match="out of range"):
            offset_for(2, doors, frame_border=16)

    @pytest.mark.parametrize("border,gap", [(16, 0), (0, 5), (3, 2)])
    def test_offset_when_border_or_gap_positive_then_strictly_monotonic(self, border, gap):
        """Each compartment starts after the previous one's content ends.

        With neither a border nor a gap adjacent compartments touch, so
        FrameConfig rejects that combination.
        """
        compartments = [Compartment(f"c{i}", width, 10) for i, width in enumerate((100, 50, 300, 1))]
        offsets = compartment_offsets(compartments, border, gap)
        for i in range(len(compartments) - 1):
            assert offsets[i + 1] > offsets[i] + compartments[i].width


class TestTotals:
    """Tests for total_width() / total_height()."""

    def test_total_width_when_two_doors_then_includes_all_borders(self, doors):
        """Both borders of every compartment are counted."""
        assert total_width(doors, frame_border=16) == 2 * 673 + 4 * 16

    def test_total_height_when_two_doors_then_adds_bands(self, doors):
        """Tallest compartment plus header, footer and two borders."""
        assert total_height(doors, 16, 100, 90) == 1350 + 100 + 90 + 32

    def test_totals_when_no_compartments_then_zero(self):
        """Empty layouts have zero size."""
        assert total_width([], 16) == 0
        assert total_height([], 16, 100, 90) == 0
