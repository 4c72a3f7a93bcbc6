"""
Unit Tests for Edit History

Tests for HistoryManager undo/redo, truncation and eviction.
"""

import pytest

from planogram_toolkit.core.models import Item
from planogram_toolkit.editor import (
    CapacityExceeded,
    DuplicateItem,
    EditPolicy,
    EditSession,
    HistoryEntry,
    HistoryManager,
    InsertItem,
    MoveStack,
    RemoveItems,
    ReorderStack,
    ReplaceItem,
    ResizeCompartment,
    ResizeRow,
    StackItem,
)


def _can(item_id, width=60):
    return Item(item_id, "sku-can", width, 10, "CAN", stackable=True)


ALL_ACTIONS = [
    InsertItem(_can("can-9"), "door-1", "row-1"),
    MoveStack("tetra-1", "door-1", "row-1", stack_index=0),
    StackItem("can-1", "tetra-1"),
    RemoveItems(("can-1", "tetra-1")),
    ReplaceItem("tetra-1", _can("can-x", width=50)),
    ResizeRow("door-1", "row-2", max_height=40, allowed_classifications="all"),
    ResizeCompartment("door-1", height=80),
    ReorderStack("door-1", "row-1", 1, 0),
    DuplicateItem("tetra-1", new_id="tetra-2"),
    DuplicateItem("can-1", as_stack=True, new_id="can-top"),
]


class TestUndoRedo:
    """Tests for undo/redo behaviour."""

    @pytest.mark.parametrize("action", ALL_ACTIONS, ids=lambda a: type(a).__name__)
    def test_undo_when_after_apply_then_prior_snapshot_restored(self, simple_layout, action):
        """apply then undo reproduces the exact prior snapshot."""
        history = HistoryManager(simple_layout)
        applied = history.apply(action)
        assert applied != simple_layout

        assert history.undo() == simple_layout
        assert history.redo() == applied

    def test_undo_when_at_oldest_entry_then_no_op(self, simple_layout):
        """Undo at cursor 0 returns the same layout and keeps the cursor."""
        history = HistoryManager(simple_layout)
        assert history.undo() == simple_layout
        assert history.session.cursor == 0
        assert history.can_undo is False

    def test_redo_when_at_newest_entry_then_no_op(self, simple_layout):
        """Redo at the newest entry changes nothing."""
        history = HistoryManager(simple_layout)
        latest = history.apply(ALL_ACTIONS[0])
        assert history.redo() == latest
        assert history.session.cursor == 1
        assert history.can_redo is False

    def test_apply_when_after_undo_then_redo_branch_truncated(self, simple_layout):
        """A new edit discards entries beyond the cursor."""
        history = HistoryManager(simple_layout)
        history.apply(InsertItem(_can("a", 10), "door-1", "row-1"))
        history.apply(InsertItem(_can("b", 10), "door-1", "row-1"))
        history.undo()
        history.apply(InsertItem(_can("c", 10), "door-1", "row-1"))

        assert len(history.session.entries) == 3
        assert history.can_redo is False
        assert history.current().item("b") is None
        assert history.current().item("c") is not None


class TestHistoryBounds:
    """Tests for bounded history and rejected actions."""

    def test_apply_when_over_max_history_then_oldest_evicted(self, simple_layout):
        """Only max_history snapshots are kept."""
        history = HistoryManager(simple_layout, EditPolicy(max_history=3))
        for i in range(5):
            history.apply(ResizeRow("door-1", "row-1", capacity=200 + i))

        session = history.session
        assert len(session.entries) == 3
        assert session.cursor == 2
        assert session.entries[0].layout.row("door-1", "row-1").capacity == 202

        for _ in range(5):
            history.undo()
        assert history.current().row("door-1", "row-1").capacity == 202

    def test_apply_when_rejected_then_history_unchanged(self, simple_layout):
        """A failed action leaves entries and cursor untouched."""
        history = HistoryManager(simple_layout)
        before = history.session
        with pytest.raises(CapacityExceeded):
            history.apply(InsertItem(_can("wide", 500), "door-1", "row-1"))
        assert history.session is before
        assert history.current() == simple_layout

    def test_apply_when_recorded_then_entry_labelled_with_action(self, simple_layout):
        """Entries remember which action produced them."""
        history = HistoryManager(simple_layout)
        history.apply(RemoveItems(("can-1",)))
        assert [e.label for e in history.session.entries] == ["initial", "RemoveItems"]

    def test_reset_when_called_then_single_entry(self, simple_layout, two_door_layout):
        """reset() discards history for a new template."""
        history = HistoryManager(simple_layout)
        history.apply(RemoveItems(("can-1",)))
        history.reset(two_door_layout)
        assert history.session == EditSession((HistoryEntry(two_door_layout),), 0)
        assert history.can_undo is False

    def test_conflicts_when_current_overflows_then_reported(self, simple_layout):
        """conflicts() validates the current snapshot."""
        history = HistoryManager(simple_layout)
        history.apply(ResizeRow("door-1", "row-1", capacity=100))
        assert history.conflicts() == {"tetra-1"}


class TestEditSession:
    """Tests for EditSession and EditPolicy validation."""

    def test_init_when_no_entries_then_raises_error(self):
        """A session always holds at least one snapshot."""
        with pytest.raises(ValueError, match="at least one entry"):
            EditSession(())

    def test_init_when_cursor_out_of_range_then_raises_error(self, simple_layout):
        """The cursor must point at an entry."""
        with pytest.raises(ValueError, match="cursor out of range"):
            EditSession((HistoryEntry(simple_layout),), cursor=1)

    def test_policy_when_max_history_zero_then_raises_error(self):
        """max_history must be at least 1."""
        with pytest.raises(ValueError, match="max_history must be >= 1"):
            EditPolicy(max_history=0)
