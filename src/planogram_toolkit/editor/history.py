"""
Module: editor.history

Purpose:
    Linear, bounded undo/redo over layout snapshots. The history manager
    owns one immutable EditSession value (entries plus cursor) and
    replaces it wholesale under a lock, so readers never see an entry
    list paired with a stale cursor.

Key Classes:
    - HistoryEntry: One recorded snapshot and the action that produced it
    - EditSession: Immutable (entries, cursor) pair
    - HistoryManager: Applies actions, undo/redo, reset

Dependencies:
    - editor.actions: apply()
    - editor.policy: EditPolicy
    - validation: find_conflicts()

Design Notes:
    - A new edit truncates everything after the cursor
    - The oldest entries are evicted past policy.max_history
    - Undo at the oldest entry and redo at the newest are no-ops
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from planogram_toolkit.core.models import Layout
from planogram_toolkit.validation import find_conflicts

from .actions import Action, apply as apply_action
from .policy import EditPolicy

logger = logging.getLogger(__name__)

INITIAL_LABEL = "initial"


@dataclass(frozen=True)
class HistoryEntry:
    """
    One snapshot in the history (immutable).

    Attributes:
        layout: Layout after the action
        label: Name of the action that produced it ("initial" for the first)
    """
    layout: Layout
    label: str = INITIAL_LABEL


@dataclass(frozen=True)
class EditSession:
    """
    Entries plus cursor (immutable).

    Invariants:
        - entries is non-empty
        - 0 <= cursor < len(entries)
    """
    entries: Tuple[HistoryEntry, ...]
    cursor: int = 0

    def __post_init__(self) -> None:
        """Validate session on construction."""
        if not self.entries:
            raise ValueError("EditSession requires at least one entry")
        if not 0 <= self.cursor < len(self.entries):
            raise ValueError(f"cursor out of range: {self.cursor} (entries: {len(self.entries)})")

    @property
    def current(self) -> Layout:
        return self.entries[self.cursor].layout

    @property
    def can_undo(self) -> bool:
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self.entries) - 1

    @classmethod
    def start(cls, layout: Layout) -> EditSession:
        """Session holding a single initial snapshot."""
        return cls(entries=(HistoryEntry(layout),), cursor=0)


class HistoryManager:
    """
    Applies edit actions and tracks undo/redo.

    Example:
        >>> history = HistoryManager(create_layout("default"))
        >>> history.apply(InsertItem(can, "door-1", "row-1"))
        >>> history.undo() == history.session.entries[0].layout
        True
    """

    def __init__(self, initial: Layout, policy: Optional[EditPolicy] = None):
        self._policy = policy or EditPolicy()
        self._lock = threading.Lock()
        self._session = EditSession.start(initial)

    @property
    def policy(self) -> EditPolicy:
        return self._policy

    @property
    def session(self) -> EditSession:
        """Current session value; safe to hold, never mutated."""
        return self._session

    def current(self) -> Layout:
        return self._session.current

    @property
    def can_undo(self) -> bool:
        return self._session.can_undo

    @property
    def can_redo(self) -> bool:
        return self._session.can_redo

    def apply(self, action: Action) -> Layout:
        """
        Apply an action and record the resulting snapshot.

        Args:
            action: Edit action

        Returns:
            The new current Layout

        Raises:
            EditError: If the action is rejected; history is unchanged
        """
        with self._lock:
            session = self._session
            layout = apply_action(action, session.current, self._policy)

            label = type(action).__name__
            entries = session.entries[:session.cursor + 1] + (HistoryEntry(layout, label),)
            evicted = max(0, len(entries) - self._policy.max_history)
            if evicted:
                entries = entries[evicted:]
            self._session = EditSession(entries=entries, cursor=len(entries) - 1)

        logger.debug(
            f"Applied {label}: {len(entries)} entries, cursor {len(entries) - 1}"
            + (f", evicted {evicted}" if evicted else "")
        )
        return layout

    def undo(self) -> Layout:
        """Step back one snapshot (no-op at the oldest entry)."""
        with self._lock:
            session = self._session
            if session.can_undo:
                session = EditSession(session.entries, session.cursor - 1)
                self._session = session
                logger.debug(f"Undo to entry {session.cursor}")
            return session.current

    def redo(self) -> Layout:
        """Step forward one snapshot (no-op at the newest entry)."""
        with self._lock:
            session = self._session
            if session.can_redo:
                session = EditSession(session.entries, session.cursor + 1)
                self._session = session
                logger.debug(f"Redo to entry {session.cursor}")
            return session.current

    def reset(self, layout: Layout) -> None:
        """Discard all history and start over from layout (template switch)."""
        with self._lock:
            self._session = EditSession.start(layout)
        logger.info(f"History reset: {layout.item_count} items in {len(layout.compartments)} compartments")

    def conflicts(self) -> FrozenSet[str]:
        """Item ids in conflict in the current snapshot."""
        return find_conflicts(self._session.current, unit_gap=self._policy.unit_gap)
