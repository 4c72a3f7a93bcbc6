"""
Module: layout

Purpose:
    Provides the immutable layout tree: Stack -> Row -> Compartment ->
    Layout. Every edit produces a new Layout; published layouts are never
    mutated, so validators, exporters and renderers may share one.

Key Classes:
    - Stack: Items base-to-top; the base determines the footprint
    - Row: Shelf with capacity, max stack height, allowed classifications
    - Compartment: One door/section with its own rows and dimensions
    - Layout: Compartments ordered left-to-right
    - ItemLocation: Fully qualified position of an item

Dependencies:
    - dataclasses (std)
    - .items.Item

Used By:
    - editor.actions: Builds new layouts
    - validation.conflicts: Reads rows and stacks
    - geometry.resolver / export.transformer: Computes boxes
    - core.utils.serialization: Canonical dict form

Design Notes:
    Rows and compartments are stored as tuples (ordered, hashable) and
    looked up by id. Order is physical: rows top-to-bottom, compartments
    left-to-right.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, FrozenSet, Iterator, Optional, Tuple, Union

from .items import Item

# Sentinel for rows that accept every classification
ALL_CLASSIFICATIONS = "all"

AllowedClassifications = Union[str, FrozenSet[str]]


def normalize_allowed(value: Any) -> AllowedClassifications:
    """
    Normalize an allowed-classifications value.

    Accepts "all", a list/set of names, or a list containing "all"
    (legacy templates wrote ['all']).

    Example:
        >>> normalize_allowed(["all"])
        'all'
        >>> sorted(normalize_allowed(["CAN", "TETRA"]))
        ['CAN', 'TETRA']
    """
    if value is None or value == ALL_CLASSIFICATIONS:
        return ALL_CLASSIFICATIONS
    if isinstance(value, str):
        return frozenset({value})
    names = frozenset(value)
    if ALL_CLASSIFICATIONS in names:
        return ALL_CLASSIFICATIONS
    return names


def stack_footprint(stacks: Tuple["Stack", ...], unit_gap: float = 1) -> float:
    """
    Total row width used by stacks: base widths plus one gap between each.

    Example:
        >>> # stacks of base width 60 and 45 with a 1-unit gap
        >>> # stack_footprint((s60, s45)) == 106
    """
    if not stacks:
        return 0
    return sum(stack.width for stack in stacks) + unit_gap * (len(stacks) - 1)


@dataclass(frozen=True, slots=True)
class Stack:
    """
    Vertical group of items in one horizontal slot (immutable).

    items[0] is the base; it determines the horizontal footprint.

    Example:
        >>> stack = Stack((base, top))
        >>> stack.height == base.height + top.height
        True
    """

    items: Tuple[Item, ...]

    def __post_init__(self) -> None:
        """Validate stack on construction."""
        if not self.items:
            raise ValueError("Stack must contain at least one item")

    @property
    def base(self) -> Item:
        """Bottom item of the stack."""
        return self.items[0]

    @property
    def id(self) -> str:
        """Stacks are addressed by their base item's id."""
        return self.items[0].id

    @property
    def width(self) -> float:
        """Horizontal footprint (base item width)."""
        return self.items[0].width

    @property
    def height(self) -> float:
        """Sum of item heights."""
        return sum(item.height for item in self.items)

    def contains(self, item_id: str) -> bool:
        return any(item.id == item_id for item in self.items)

    def is_pyramid(self) -> bool:
        """Check widths are non-increasing from base to top."""
        return all(
            lower.width >= upper.width
            for lower, upper in zip(self.items, self.items[1:])
        )


@dataclass(frozen=True, slots=True)
class Row:
    """
    A shelf holding side-by-side stacks (immutable).

    Attributes:
        id: Row identifier, unique within its compartment
        capacity: Width budget for stack footprints plus gaps
        max_height: Height available to any single stack
        allowed_classifications: "all" or a frozenset of classifications
        stacks: Stacks left-to-right

    Invariants:
        - capacity > 0, max_height > 0
    """

    id: str
    capacity: float
    max_height: float
    allowed_classifications: AllowedClassifications = ALL_CLASSIFICATIONS
    stacks: Tuple[Stack, ...] = ()

    def __post_init__(self) -> None:
        """Validate row on construction."""
        if self.capacity <= 0:
            raise ValueError(f"capacity must be > 0: {self.capacity} (row {self.id})")
        if self.max_height <= 0:
            raise ValueError(f"max_height must be > 0: {self.max_height} (row {self.id})")
        if (
            self.allowed_classifications != ALL_CLASSIFICATIONS
            and not isinstance(self.allowed_classifications, frozenset)
        ):
            raise ValueError(
                f"allowed_classifications must be 'all' or a frozenset: "
                f"{self.allowed_classifications!r} (row {self.id})"
            )

    @property
    def accepts_all(self) -> bool:
        return self.allowed_classifications == ALL_CLASSIFICATIONS

    def accepts(self, item: Item) -> bool:
        """
        Check the placement-type rule for an item.

        Placeholders are accepted everywhere.
        """
        if self.accepts_all or item.is_placeholder:
            return True
        return item.classification in self.allowed_classifications

    def footprint(self, unit_gap: float = 1) -> float:
        """Width used by all stacks including gaps."""
        return stack_footprint(self.stacks, unit_gap)

    def stack_index(self, item_id: str) -> Optional[int]:
        """Index of the stack containing item_id, or None."""
        for index, stack in enumerate(self.stacks):
            if stack.contains(item_id):
                return index
        return None

    def with_stacks(self, stacks: Tuple[Stack, ...]) -> Row:
        return replace(self, stacks=tuple(stacks))


@dataclass(frozen=True, slots=True)
class Compartment:
    """
    One independently dimensioned section, e.g. a cooler door (immutable).

    Attributes:
        id: Compartment identifier
        width: Content width in layout units
        height: Content height in layout units
        rows: Rows top-to-bottom
    """

    id: str
    width: float
    height: float
    rows: Tuple[Row, ...] = ()

    def __post_init__(self) -> None:
        """Validate compartment on construction."""
        if self.width <= 0:
            raise ValueError(f"width must be > 0: {self.width} (compartment {self.id})")
        if self.height <= 0:
            raise ValueError(f"height must be > 0: {self.height} (compartment {self.id})")
        row_ids = [row.id for row in self.rows]
        if len(set(row_ids)) != len(row_ids):
            raise ValueError(f"Duplicate row ids in compartment {self.id}: {row_ids}")

    @property
    def row_ids(self) -> Tuple[str, ...]:
        return tuple(row.id for row in self.rows)

    def row(self, row_id: str) -> Optional[Row]:
        """Find a row by id."""
        for row in self.rows:
            if row.id == row_id:
                return row
        return None

    def with_row(self, new_row: Row) -> Compartment:
        """Return a copy with the row of the same id replaced."""
        return replace(
            self,
            rows=tuple(new_row if row.id == new_row.id else row for row in self.rows),
        )


@dataclass(frozen=True, slots=True)
class ItemLocation:
    """
    Fully qualified position of an item in a layout.

    Attributes:
        compartment_id: Compartment holding the item
        row_id: Row holding the item
        stack_index: Index of the stack within the row
        level: Index within the stack (0 = base)
    """

    compartment_id: str
    row_id: str
    stack_index: int
    level: int


@dataclass(frozen=True, slots=True)
class Layout:
    """
    Complete fixture layout (immutable snapshot).

    Compartments are ordered left-to-right. Item ids are unique across
    the whole layout.

    Example:
        >>> layout = Layout((door1, door2))
        >>> layout.compartment_ids
        ('door-1', 'door-2')
    """

    compartments: Tuple[Compartment, ...] = ()

    def __post_init__(self) -> None:
        """Validate id uniqueness on construction."""
        ids = [compartment.id for compartment in self.compartments]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate compartment ids: {ids}")
        seen: set[str] = set()
        for item in self.iter_items():
            if item.id in seen:
                raise ValueError(f"Duplicate item id in layout: {item.id}")
            seen.add(item.id)

    # ─────────────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def compartment_ids(self) -> Tuple[str, ...]:
        return tuple(compartment.id for compartment in self.compartments)

    def compartment(self, compartment_id: str) -> Optional[Compartment]:
        """Find a compartment by id."""
        for compartment in self.compartments:
            if compartment.id == compartment_id:
                return compartment
        return None

    def row(self, compartment_id: str, row_id: str) -> Optional[Row]:
        """Find a row by its fully qualified location."""
        compartment = self.compartment(compartment_id)
        if compartment is None:
            return None
        return compartment.row(row_id)

    def iter_items(self) -> Iterator[Item]:
        """Iterate over every item (compartment, row, stack, level order)."""
        for compartment in self.compartments:
            for row in compartment.rows:
                for stack in row.stacks:
                    yield from stack.items

    def locate(self, item_id: str) -> Optional[ItemLocation]:
        """
        Find where an item lives.

        Returns:
            ItemLocation, or None if no item has this id
        """
        for compartment in self.compartments:
            for row in compartment.rows:
                for stack_index, stack in enumerate(row.stacks):
                    for level, item in enumerate(stack.items):
                        if item.id == item_id:
                            return ItemLocation(compartment.id, row.id, stack_index, level)
        return None

    def item(self, item_id: str) -> Optional[Item]:
        for item in self.iter_items():
            if item.id == item_id:
                return item
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Copy-on-write helpers
    # ─────────────────────────────────────────────────────────────────────────

    def with_compartment(self, new_compartment: Compartment) -> Layout:
        """Return a copy with the compartment of the same id replaced."""
        return Layout(
            tuple(
                new_compartment if compartment.id == new_compartment.id else compartment
                for compartment in self.compartments
            )
        )

    def with_row(self, compartment_id: str, new_row: Row) -> Layout:
        """Return a copy with one row replaced."""
        compartment = self.compartment(compartment_id)
        if compartment is None:
            raise KeyError(compartment_id)
        return self.with_compartment(compartment.with_row(new_row))

    @property
    def item_count(self) -> int:
        return sum(1 for _ in self.iter_items())
