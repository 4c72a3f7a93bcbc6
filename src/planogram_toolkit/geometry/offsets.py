"""
Module: geometry.offsets

Purpose:
    Compose compartments left-to-right inside the fixture frame. Each
    compartment carries a border on both sides; the absolute X offset
    of a compartment's content is where its row content starts.

Key Functions:
    - offset_for(): Absolute X offset of compartment content
    - compartment_offsets(): Offsets of every compartment
    - total_width(): Full fixture width including borders and gaps
    - total_height(): Full fixture height including header/footer bands

Dependencies:
    None (pure functions)

Used By:
    - export.transformer: Horizontal offset per compartment
    - export.overlay: Canvas size

Design Notes:
    Compartment i starts after the left border of the frame, then for
    every compartment before it its content width plus both of its
    borders, plus one inter-compartment gap per preceding compartment:

        offset(0) = border
        offset(i) = border + sum(width_j + 2 * border for j < i) + i * gap

    Two 673-wide doors with a 16 border and no gap put door 2 at
    16 + 673 + 32 = 721.
"""

from __future__ import annotations

from typing import Protocol, Sequence, Tuple


class Dimensioned(Protocol):
    """Anything with a content width and height (Compartment, CompartmentSpec)."""

    width: float
    height: float


def offset_for(
    index: int,
    compartments: Sequence[Dimensioned],
    frame_border: float,
    compartment_gap: float = 0,
) -> float:
    """
    Calculate the absolute X offset of a compartment's content.

    Args:
        index: Position of the compartment, left-to-right (0-based)
        compartments: Compartments in physical order
        frame_border: Border on each side of each compartment
        compartment_gap: Gap between adjacent compartments

    Returns:
        X coordinate where the compartment's content starts

    Raises:
        IndexError: If index is outside the compartment sequence

    Example:
        >>> offset_for(1, [door(673), door(673)], frame_border=16)
        721
    """
    if not 0 <= index < len(compartments):
        raise IndexError(f"Compartment index {index} out of range (0..{len(compartments) - 1})")
    offset = frame_border
    for preceding in compartments[:index]:
        offset += preceding.width + 2 * frame_border
    return offset + index * compartment_gap


def compartment_offsets(
    compartments: Sequence[Dimensioned],
    frame_border: float,
    compartment_gap: float = 0,
) -> Tuple[float, ...]:
    """Offsets of every compartment, in order."""
    return tuple(
        offset_for(index, compartments, frame_border, compartment_gap)
        for index in range(len(compartments))
    )


def total_width(
    compartments: Sequence[Dimensioned],
    frame_border: float,
    compartment_gap: float = 0,
) -> float:
    """
    Full fixture width: content widths, both borders per compartment,
    and the gaps between compartments.

    Example:
        >>> total_width([door(673), door(673)], frame_border=16)
        1410  # 2 * 673 + 4 * 16
    """
    if not compartments:
        return 0
    content = sum(compartment.width for compartment in compartments)
    return content + 2 * frame_border * len(compartments) + compartment_gap * (len(compartments) - 1)


def total_height(
    compartments: Sequence[Dimensioned],
    frame_border: float,
    header_height: float,
    footer_height: float,
) -> float:
    """
    Full fixture height: tallest compartment, top and bottom borders,
    header and footer bands.
    """
    if not compartments:
        return 0
    content = max(compartment.height for compartment in compartments)
    return content + header_height + footer_height + 2 * frame_border
