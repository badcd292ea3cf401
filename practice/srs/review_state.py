"""
Review State - per (user, card) scheduling record

Defines the scheduling state variables and small derived predicates.

Key concepts:
- status: new / learning / relearning / review
- due_at: instant the card should next be shown
- interval_days: scheduled gap once in review
- ease: multiplier governing interval growth, kept in [EASE_MIN, EASE_MAX]
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from practice.srs.constants import (
    DEFAULT_EASE,
    EASE_MAX,
    EASE_MIN,
    LEARNING_STATUSES,
    Rating,
    ReviewStatus,
)


@dataclass(frozen=True)
class ReviewState:
    """
    Scheduling state of one card for one user.
    """
    status: ReviewStatus
    due_at: datetime
    interval_days: int = 0
    ease: float = DEFAULT_EASE
    reps: int = 0
    lapses: int = 0
    last_review_at: Optional[datetime] = None

    def with_changes(self, **changes) -> "ReviewState":
        return replace(self, **changes)

    @property
    def is_learning(self) -> bool:
        return self.status in LEARNING_STATUSES

    def is_due(self, now: datetime) -> bool:
        """A card is due once its due_at is at or before now."""
        return as_utc(self.due_at) <= as_utc(now)


def initialize_review_state(now: Optional[datetime] = None) -> ReviewState:
    """
    Default state for a card seen for the first time: new and due immediately.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return ReviewState(
        status=ReviewStatus.NEW,
        due_at=as_utc(now),
        interval_days=0,
        ease=DEFAULT_EASE,
        reps=0,
        lapses=0,
        last_review_at=None,
    )


def clamp_ease(ease: float) -> float:
    return round(max(EASE_MIN, min(EASE_MAX, ease)), 4)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    SQLite hands back naive datetimes for DateTime(timezone=True) columns;
    those are stored as UTC, so tag them rather than convert.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class ReviewLogEntry:
    """
    One rating event: rating plus the before/after scheduling values.
    """
    user_id: str
    card_id: str
    rating: Rating
    prev_state: Optional[ReviewStatus]
    next_state: ReviewStatus
    prev_due_at: Optional[datetime]
    next_due_at: datetime
    prev_interval_days: Optional[int]
    next_interval_days: int
    prev_ease: Optional[float]
    next_ease: float
    reviewed_at: datetime
