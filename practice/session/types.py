"""
Session models: practice cards, undo snapshots and the persisted
session record.

Pydantic models so the snapshot can be written to and validated from
client-local JSON storage.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from practice.srs.constants import DEFAULT_EASE, SNAPSHOT_VERSION, ReviewStatus
from practice.srs.review_state import as_utc


SessionMode = Literal["due", "all"]   # due: real schedule, all: free practice
StudyMethod = Literal["classic", "writing"]

SESSION_MODES: tuple[str, ...] = ("due", "all")
STUDY_METHODS: tuple[str, ...] = ("classic", "writing")


class PracticeCard(BaseModel):
    """
    Card content plus a snapshot of its review state for one session.
    """
    id: str
    group_id: str
    front: str
    back: str
    order_index: int = 0

    due_at: datetime
    state: ReviewStatus = ReviewStatus.NEW
    interval_days: int = 0
    ease: float = DEFAULT_EASE

    def with_schedule(
        self,
        due_at: datetime,
        state: ReviewStatus,
        interval_days: int,
        ease: float
    ) -> "PracticeCard":
        """Copy with the scheduling fields replaced."""
        return self.model_copy(update={
            "due_at": as_utc(due_at),
            "state": ReviewStatus(state),
            "interval_days": interval_days,
            "ease": ease,
        })


class UndoSnapshot(BaseModel):
    """
    Session fields captured right before a rating is applied.
    """
    queue: list[PracticeCard]
    position: int
    flipped: bool
    reviewed_count: int


class SessionSnapshot(BaseModel):
    """
    Everything needed to resume a session after a reload.
    """
    version: int = SNAPSHOT_VERSION
    saved_at: datetime
    project_id: str
    group_id: str

    mode: SessionMode = "due"
    method: StudyMethod = "classic"
    write_through: bool = True

    queue: list[PracticeCard] = Field(default_factory=list)
    position: int = 0
    flipped: bool = False

    initial_count: int = 0
    reviewed_count: int = 0
    due_count: int = 0
    new_count: int = 0

    undo: list[UndoSnapshot] = Field(default_factory=list)
