"""
Module: boxes

Purpose:
    Provides the Box dataclass - an axis-aligned rectangle in layout or
    pixel coordinates. Boxes stay unrounded through translation and
    scaling; rounding happens once, per corner, at the export boundary.

Key Functions:
    - Box.translate(dx, dy): Shift by an offset
    - Box.scale(k): Multiply every coordinate
    - Box.rounded(): Round each corner half-up
    - Box.corners(): Four-corner polygon [[l,t],[l,b],[r,b],[r,t]]

Dependencies:
    - dataclasses (std)
    - math (std)

Used By:
    - geometry.resolver: Compartment-local item boxes
    - export.transformer: Absolute, scaled boxes
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True, slots=True)
class Box:
    """
    Axis-aligned rectangle (immutable).

    The region is [left, right) x [top, bottom) with y growing downward.

    Invariants:
        - right >= left
        - bottom >= top

    Example:
        >>> box = Box(left=10, top=20, right=70, bottom=30)
        >>> box.width, box.height
        (60, 10)
        >>> box.translate(16, 126)
        Box(left=26, top=146, right=86, bottom=156)
    """

    left: float
    top: float
    right: float
    bottom: float

    def __post_init__(self) -> None:
        """Validate box on construction."""
        if self.right < self.left:
            raise ValueError(f"right must be >= left: {self.right} < {self.left}")
        if self.bottom < self.top:
            raise ValueError(f"bottom must be >= top: {self.bottom} < {self.top}")

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def translate(self, dx: float, dy: float) -> Box:
        """Shift the box by (dx, dy)."""
        return Box(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def scale(self, factor: float) -> Box:
        """Multiply every coordinate by factor."""
        return Box(
            self.left * factor,
            self.top * factor,
            self.right * factor,
            self.bottom * factor,
        )

    def rounded(self) -> Box:
        """
        Snap to whole pixels, each corner independently.

        Every corner is rounded half-up from its unrounded value, matching
        how product widths and heights are rounded; rounded deltas are
        never propagated between corners.
        """
        return Box(
            _round_half_up(self.left),
            _round_half_up(self.top),
            _round_half_up(self.right),
            _round_half_up(self.bottom),
        )

    def corners(self) -> List[List[float]]:
        """Four corners: top-left, bottom-left, bottom-right, top-right."""
        return [
            [self.left, self.top],
            [self.left, self.bottom],
            [self.right, self.bottom],
            [self.right, self.top],
        ]

    @classmethod
    def from_corners(cls, corners: List[List[float]]) -> Box:
        """Rebuild a box from a corner polygon (any corner order)."""
        xs = [point[0] for point in corners]
        ys = [point[1] for point in corners]
        return cls(min(xs), min(ys), max(xs), max(ys))

    def overlaps(self, other: Box) -> bool:
        """Check if two boxes share interior area (touching edges do not)."""
        return not (
            self.right <= other.left
            or other.right <= self.left
            or self.bottom <= other.top
            or other.bottom <= self.top
        )
