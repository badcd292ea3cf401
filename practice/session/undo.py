"""
Bounded undo history for a practice session.
"""

from __future__ import annotations

from typing import Iterable, Optional

from practice.session.types import UndoSnapshot
from practice.srs.constants import UNDO_DEPTH


class SnapshotStack:
    """
    Fixed-depth stack of undo snapshots; the oldest falls off when full.
    """

    def __init__(self, depth: int = UNDO_DEPTH, items: Optional[Iterable[UndoSnapshot]] = None):
        if depth < 1:
            raise ValueError("Undo depth must be at least 1")
        self.depth = depth
        self._items: list[UndoSnapshot] = []
        for item in items or []:
            self.push(item)

    def push(self, snapshot: UndoSnapshot) -> None:
        self._items.append(snapshot)
        if len(self._items) > self.depth:
            del self._items[0]

    def pop(self) -> Optional[UndoSnapshot]:
        if not self._items:
            return None
        return self._items.pop()

    def clear(self) -> None:
        self._items.clear()

    def to_list(self) -> list[UndoSnapshot]:
        return list(self._items)

    @property
    def can_undo(self) -> bool:
        return bool(self._items)

    def __len__(self) -> int:
        return len(self._items)
