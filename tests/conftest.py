import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import planogram_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from planogram_toolkit.core.models import Compartment, Item, Layout, Row, Stack  # noqa: E402
from planogram_toolkit.geometry import FrameConfig  # noqa: E402
from planogram_toolkit.templates import sample_catalog  # noqa: E402


def build_item(
    item_id: str,
    width: float = 60,
    height: float = 10,
    classification: str = "CAN",
    stackable: bool = True,
    sku: str = "",
) -> Item:
    """Item with a SKU derived from its classification."""
    return Item(
        id=item_id,
        sku=sku or f"sku-{classification.lower()}",
        width=width,
        height=height,
        classification=classification,
        stackable=stackable,
        name=item_id,
    )


# Common test fixtures
@pytest.fixture
def make_item():
    """Return the item factory."""
    return build_item


@pytest.fixture
def catalog():
    """Return the built-in sample catalog."""
    return sample_catalog()


@pytest.fixture
def frame():
    """Return the default frame configuration."""
    return FrameConfig()


@pytest.fixture
def simple_layout() -> Layout:
    """
    One compartment, two rows.

    row-1: capacity 200, max height 30, all types; stacks [can-1], [tetra-1]
    row-2: capacity 100, max height 20, PET_SMALL only; empty
    """
    row1 = Row(
        "row-1",
        capacity=200,
        max_height=30,
        stacks=(
            Stack((build_item("can-1"),)),
            Stack((build_item("tetra-1", 65, 15, "TETRA", stackable=False),)),
        ),
    )
    row2 = Row("row-2", capacity=100, max_height=20, allowed_classifications=frozenset({"PET_SMALL"}))
    return Layout((Compartment("door-1", 200, 50, (row1, row2)),))


@pytest.fixture
def two_door_layout() -> Layout:
    """Two 673-wide compartments, one row each, one can per row."""
    return Layout(tuple(
        Compartment(
            door_id,
            width=673,
            height=30,
            rows=(Row("row-1", capacity=673, max_height=30, stacks=(Stack((build_item(can_id),)),)),),
        )
        for door_id, can_id in (("door-1", "can-1"), ("door-2", "can-2"))
    ))


@pytest.fixture
def sample_image():
    """Create a simple in-memory test image."""
    return Image.new("RGB", (1500, 400), color="white")
