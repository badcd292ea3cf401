"""
Scheduler - SRS Algorithm Logic

Pure scheduling: (rating, prior state, now) -> next state. No database calls.

Caller is responsible for:
1. Loading the prior state
2. Persisting the returned state
3. Appending the review log entry (see build_log_entry)
"""

from __future__ import annotations
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from practice.srs.constants import (
    AGAIN_DELAY_MINUTES,
    EASE_DELTA,
    EASY_BONUS,
    GRADUATING_INTERVAL_DAYS,
    HARD_INTERVAL_FACTOR,
    HARD_LEARNING_DELAY_MINUTES,
    Rating,
    ReviewStatus,
)
from practice.srs.review_state import ReviewLogEntry, ReviewState, as_utc, clamp_ease


def compute_next(
    rating: Rating,
    prior: ReviewState,
    now: Optional[datetime] = None
) -> ReviewState:
    """
    Compute the next review state for a rating.

    Args:
        rating: User rating (AGAIN, HARD, GOOD, EASY)
        prior: Current state of the card
        now: Instant of the rating (defaults to now, UTC)

    Returns:
        New ReviewState; prior is left untouched
    """
    if now is None:
        now = datetime.now(timezone.utc)
    now = as_utc(now)
    rating = Rating(rating)

    if rating == Rating.AGAIN:
        return _apply_again(prior, now)
    if prior.status == ReviewStatus.REVIEW:
        return _apply_review(prior, rating, now)
    return _apply_learning(prior, rating, now)


def _apply_again(prior: ReviewState, now: datetime) -> ReviewState:
    # Lapsing out of review is relearning; anything else is (still) learning
    if prior.status == ReviewStatus.REVIEW:
        status = ReviewStatus.RELEARNING
    else:
        status = ReviewStatus.LEARNING

    return ReviewState(
        status=status,
        due_at=now + timedelta(minutes=AGAIN_DELAY_MINUTES),
        interval_days=0,
        ease=clamp_ease(prior.ease + EASE_DELTA[Rating.AGAIN]),
        reps=prior.reps,
        lapses=prior.lapses + 1,
        last_review_at=now,
    )


def _apply_learning(prior: ReviewState, rating: Rating, now: datetime) -> ReviewState:
    """
    Ratings while new/learning/relearning.

    HARD stays in learning for an hour; GOOD and EASY graduate to review.
    """
    ease = clamp_ease(prior.ease + EASE_DELTA[rating])

    if rating == Rating.HARD:
        return ReviewState(
            status=ReviewStatus.LEARNING,
            due_at=now + timedelta(minutes=HARD_LEARNING_DELAY_MINUTES),
            interval_days=0,
            ease=ease,
            reps=prior.reps + 1,
            lapses=prior.lapses,
            last_review_at=now,
        )

    interval = GRADUATING_INTERVAL_DAYS[rating]
    return ReviewState(
        status=ReviewStatus.REVIEW,
        due_at=now + timedelta(days=interval),
        interval_days=interval,
        ease=ease,
        reps=prior.reps + 1,
        lapses=prior.lapses,
        last_review_at=now,
    )


def _apply_review(prior: ReviewState, rating: Rating, now: datetime) -> ReviewState:
    """
    Ratings while in review: grow the interval by the rating's multiplier.
    """
    prior_interval = prior.interval_days if prior.interval_days > 0 else 1
    ease = clamp_ease(prior.ease + EASE_DELTA[rating])

    if rating == Rating.HARD:
        factor = HARD_INTERVAL_FACTOR
    elif rating == Rating.GOOD:
        factor = ease
    else:
        factor = ease * EASY_BONUS

    interval = max(1, _floor_days(prior_interval * factor))
    return ReviewState(
        status=ReviewStatus.REVIEW,
        due_at=now + timedelta(days=interval),
        interval_days=interval,
        ease=ease,
        reps=prior.reps + 1,
        lapses=prior.lapses,
        last_review_at=now,
    )


def _floor_days(value: float) -> int:
    # 10 * 2.3 lands just under 23.0 in binary floating point
    return int(math.floor(value + 1e-9))


def build_log_entry(
    user_id: str,
    card_id: str,
    rating: Rating,
    prior: ReviewState,
    next_state: ReviewState,
    reviewed_at: datetime
) -> ReviewLogEntry:
    """
    Build the immutable review log entry for a transition.
    """
    return ReviewLogEntry(
        user_id=user_id,
        card_id=card_id,
        rating=Rating(rating),
        prev_state=prior.status,
        next_state=next_state.status,
        prev_due_at=prior.due_at,
        next_due_at=next_state.due_at,
        prev_interval_days=prior.interval_days,
        next_interval_days=next_state.interval_days,
        prev_ease=prior.ease,
        next_ease=next_state.ease,
        reviewed_at=as_utc(reviewed_at),
    )
