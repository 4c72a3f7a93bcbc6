"""
Unit Tests for Item Model

Tests for the Item dataclass and instance id generation.
"""

import pytest

from planogram_toolkit.core.models import BLANK_SKU, Item, new_item_id


class TestItem:
    """Tests for Item dataclass."""

    def test_init_when_valid_then_creates_item(self):
        """Valid fields should create an item."""
        item = Item("can-1", "sku-pepsi-can", 60, 10, "CAN", stackable=True)
        assert item.width == 60
        assert item.stackable is True
        assert item.name == ""

    def test_init_when_zero_width_then_raises_error(self):
        """width <= 0 should raise ValueError."""
        with pytest.raises(ValueError, match="width must be > 0"):
            Item("can-1", "sku-pepsi-can", 0, 10, "CAN")

    def test_init_when_negative_height_then_raises_error(self):
        """height <= 0 should raise ValueError."""
        with pytest.raises(ValueError, match="height must be > 0"):
            Item("can-1", "sku-pepsi-can", 60, -1, "CAN")

    def test_init_when_empty_id_then_raises_error(self):
        """Empty id should raise ValueError."""
        with pytest.raises(ValueError, match="id must be non-empty"):
            Item("", "sku-pepsi-can", 60, 10, "CAN")

    def test_is_placeholder_when_blank_sku_then_true(self):
        """The blank SKU marks a placeholder."""
        assert Item("b-1", BLANK_SKU, 20, 10, "CAN").is_placeholder is True

    def test_is_placeholder_when_blank_classification_then_true(self):
        """The BLANK classification marks a placeholder."""
        assert Item("b-1", "sku-x", 20, 10, "BLANK").is_placeholder is True

    def test_is_placeholder_when_regular_product_then_false(self, make_item):
        """Regular products are not placeholders."""
        assert make_item("can-1").is_placeholder is False

    def test_with_id_when_called_then_only_id_changes(self, make_item):
        """with_id() should copy every other field."""
        original = make_item("can-1")
        copy = original.with_id("can-2")
        assert copy.id == "can-2"
        assert copy.sku == original.sku
        assert copy.width == original.width
        assert original.id == "can-1"


class TestItemSerialization:
    """Tests for Item.to_dict / Item.from_dict."""

    def test_from_dict_when_editor_spelling_then_parses(self):
        """skuId/productType/constraints.stackable should be accepted."""
        item = Item.from_dict({
            "id": "can-1",
            "skuId": "sku-pepsi-can",
            "name": "Pepsi Can",
            "productType": "CAN",
            "width": 60,
            "height": 10,
            "constraints": {"stackable": True, "deletable": True},
        })
        assert item.sku == "sku-pepsi-can"
        assert item.classification == "CAN"
        assert item.stackable is True

    def test_to_dict_when_parsed_back_then_equal(self, make_item):
        """to_dict output should parse back to an equal item."""
        item = make_item("can-1")
        assert Item.from_dict(item.to_dict()) == item


class TestNewItemId:
    """Tests for new_item_id()."""

    def test_new_item_id_when_called_twice_then_unique(self):
        """Generated ids should be unique and prefixed with the SKU."""
        first = new_item_id("sku-pepsi-can")
        second = new_item_id("sku-pepsi-can")
        assert first != second
        assert first.startswith("sku-pepsi-can-")
