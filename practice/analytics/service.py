"""
Service layer to assemble the review-history view.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from practice.analytics.metrics import build_day_index, compute_daily_rating_counts
from practice.analytics.queries import attach_fronts, load_review_log_df, scoped_card_ids
from practice.analytics.types import ReviewHistoryData
from practice.cards_repo import CardSource
from practice.srs.constants import (
    DEFAULT_HISTORY_DAYS,
    DEFAULT_RECENT_LIMIT,
    MAX_HISTORY_DAYS,
    MAX_RECENT_LIMIT,
)
from practice.srs.review_store import ReviewLog


def _clamp(value: Optional[int], default: int, maximum: int) -> int:
    if value is None:
        value = default
    return max(1, min(int(value), maximum))


def build_review_history(
    user_id: str,
    project_id: Optional[str] = None,
    days: Optional[int] = None,
    recent_limit: Optional[int] = None,
    review_log: Optional[ReviewLog] = None,
    cards: Optional[CardSource] = None,
    now: Optional[datetime] = None
) -> ReviewHistoryData:
    """
    Per-day rating counts over the last `days` days and the most recent reviews.

    Args:
        user_id: User identifier for scoping review data
        project_id: Restrict to cards of one project (None = all)
        days: Window length, clamped to [1, 365] (default 30)
        recent_limit: Recent reviews to return, clamped to [1, 200] (default 50)
    """
    review_log = review_log or ReviewLog()
    cards = cards or CardSource()
    now = now or datetime.now(timezone.utc)
    days = _clamp(days, DEFAULT_HISTORY_DAYS, MAX_HISTORY_DAYS)
    recent_limit = _clamp(recent_limit, DEFAULT_RECENT_LIMIT, MAX_RECENT_LIMIT)

    card_ids = scoped_card_ids(cards, project_id)
    day_index = build_day_index(now, days)
    since = day_index[0].to_pydatetime()

    window_df = load_review_log_df(review_log, user_id, card_ids=card_ids, since=since)
    daily = compute_daily_rating_counts(window_df, day_index)

    recent_df = load_review_log_df(review_log, user_id, card_ids=card_ids, limit=recent_limit)
    recent = attach_fronts(recent_df, cards)

    return ReviewHistoryData(
        days=days,
        total_reviews=int(daily["total"].sum()),
        daily_counts=daily,
        recent=recent,
    )
