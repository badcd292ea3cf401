"""
Live requeue policy.

Pure functions deciding whether a rated card comes back within the
current session and how far ahead it is put.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from practice.session.types import PracticeCard
from practice.srs.constants import (
    DUE_SOON_WINDOW_MINUTES,
    LEARNING_STATUSES,
    MIN_REQUEUE_OFFSET,
    REQUEUE_OFFSETS,
    SIMULATED_REQUEUE_OFFSETS,
    Rating,
    ReviewStatus,
)
from practice.srs.review_state import as_utc


@dataclass(frozen=True)
class RequeueResult:
    queue: list[PracticeCard]
    position: int
    reinserted_at: Optional[int]   # None when the card left the session


def is_due_soon(due_at: datetime, now: datetime) -> bool:
    """True when due_at falls within the due-soon window from now."""
    return as_utc(due_at) <= as_utc(now) + timedelta(minutes=DUE_SOON_WINDOW_MINUTES)


def reinsert_offset(
    rating: Rating,
    next_status: ReviewStatus,
    due_soon: bool
) -> Optional[int]:
    """
    Offset ahead of the rated card's old position, or None to drop it.

    A card comes back when it was failed, is still in a learning state,
    or is due again within the due-soon window.
    """
    rating = Rating(rating)
    should_requeue = (
        rating == Rating.AGAIN
        or ReviewStatus(next_status) in LEARNING_STATUSES
        or due_soon
    )
    if not should_requeue:
        return None
    return max(MIN_REQUEUE_OFFSET, REQUEUE_OFFSETS.get(rating, 0))


def simulated_reinsert_offset(rating: Rating) -> Optional[int]:
    """
    Offset used when ratings are not persisted (free practice).

    There is no authoritative state to look at, so only the rating counts.
    """
    return SIMULATED_REQUEUE_OFFSETS.get(Rating(rating))


def requeue(
    queue: list[PracticeCard],
    at: int,
    offset: Optional[int],
    replacement: Optional[PracticeCard] = None
) -> RequeueResult:
    """
    Remove queue[at] and put it back offset positions ahead.

    Args:
        queue: Current queue (not modified)
        at: Index of the rated card
        offset: Positions ahead of at, or None to drop the card
        replacement: Card to reinsert instead of the removed one
            (e.g. with refreshed scheduling fields)

    Returns:
        RequeueResult with the new queue and a position clamped to it
    """
    new_queue = list(queue)
    removed = new_queue.pop(at)

    reinserted_at = None
    if offset is not None:
        reinserted_at = max(0, min(at + offset, len(new_queue)))
        new_queue.insert(reinserted_at, replacement or removed)

    position = 0 if not new_queue else max(0, min(at, len(new_queue) - 1))
    return RequeueResult(queue=new_queue, position=position, reinserted_at=reinserted_at)
