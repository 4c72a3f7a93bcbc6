"""
Module: geometry.config

Purpose:
    Configuration for the fixture frame that surrounds compartment
    content. Defines the border, header/footer bands, gaps and the
    shelf-edge correction used when placing boxes in absolute
    coordinates.

Key Classes:
    - FrameConfig: Immutable frame configuration

Dependencies:
    - dataclasses (std)

Used By:
    - geometry.offsets: Compartment offsets and total size
    - geometry.resolver: Unit gap between stacks
    - export.transformer: Absolute coordinates
"""

from __future__ import annotations

from dataclasses import dataclass


# Rendered cooler frame, in layout units (1 unit = 1 CSS pixel at ratio 1)
DEFAULT_FRAME_BORDER = 16
DEFAULT_HEADER_HEIGHT = 100
DEFAULT_FOOTER_HEIGHT = 90
DEFAULT_COMPARTMENT_GAP = 0
DEFAULT_UNIT_GAP = 1

# Shelf edges are drawn 2 units thick above every row; measured correction
# that lines boxes up with the captured image
DEFAULT_SHELF_EDGE_OFFSET = 10

# Capture pixel ratio used by the screenshot collaborator
DEFAULT_PIXEL_RATIO = 3


@dataclass(frozen=True)
class FrameConfig:
    """
    Configuration for the frame around compartments (immutable).

    Attributes:
        frame_border: Border width on every side of each compartment
        header_height: Height of the top header band
        footer_height: Height of the bottom grille band
        compartment_gap: Extra horizontal gap between adjacent compartments
        shelf_edge_offset: Fixed vertical correction for drawn shelf edges
        unit_gap: Horizontal gap between adjacent stacks in a row

    Example:
        >>> config = FrameConfig()
        >>> config.content_top
        126  # frame_border + header_height + shelf_edge_offset
    """

    frame_border: float = DEFAULT_FRAME_BORDER
    header_height: float = DEFAULT_HEADER_HEIGHT
    footer_height: float = DEFAULT_FOOTER_HEIGHT
    compartment_gap: float = DEFAULT_COMPARTMENT_GAP
    shelf_edge_offset: float = DEFAULT_SHELF_EDGE_OFFSET
    unit_gap: float = DEFAULT_UNIT_GAP

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.frame_border < 0:
            raise ValueError(f"frame_border must be non-negative: {self.frame_border}")
        if self.header_height < 0:
            raise ValueError(f"header_height must be non-negative: {self.header_height}")
        if self.footer_height < 0:
            raise ValueError(f"footer_height must be non-negative: {self.footer_height}")
        if self.compartment_gap < 0:
            raise ValueError(f"compartment_gap must be non-negative: {self.compartment_gap}")
        if self.unit_gap < 0:
            raise ValueError(f"unit_gap must be non-negative: {self.unit_gap}")
        if self.frame_border + self.compartment_gap <= 0:
            raise ValueError(
                f"frame_border or compartment_gap must be > 0 to separate compartments: "
                f"{self.frame_border} + {self.compartment_gap}"
            )

    @property
    def content_top(self) -> float:
        """Y offset of row content inside the frame."""
        return self.frame_border + self.header_height + self.shelf_edge_offset
