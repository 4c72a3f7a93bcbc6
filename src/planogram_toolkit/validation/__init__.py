"""
Module: validation

Purpose:
    Row-rule checks over layout snapshots: post-hoc conflict detection
    and prospective drop-target validation.

Key Functions:
    - find_conflicts(): Flagged item ids
    - find_conflict_details(): Structured conflict records
    - find_drop_targets(): Valid rows/stacks for a drag
"""

from .conflicts import (
    Conflict,
    ConflictKind,
    find_conflict_details,
    find_conflicts,
    overflow_stacks,
)
from .targets import DropTargets, find_drop_targets

__all__ = [
    "Conflict",
    "ConflictKind",
    "find_conflict_details",
    "find_conflicts",
    "overflow_stacks",
    "DropTargets",
    "find_drop_targets",
]
