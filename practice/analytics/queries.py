"""
Data-loading helpers for review-history analytics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import pandas as pd

from practice.cards_repo import CardSource
from practice.srs.review_store import ReviewLog


LOG_COLUMNS = [
    "reviewed_at",
    "day_utc",
    "card_id",
    "rating",
    "prev_state",
    "next_state",
    "next_interval_days",
    "next_ease",
]


def scoped_card_ids(cards: CardSource, project_id: Optional[str]) -> Optional[list[str]]:
    """Card ids of a project, or None for no project scoping."""
    if project_id is None:
        return None
    return [card.id for card in cards.cards_for_project(project_id)]


def load_review_log_df(
    review_log: ReviewLog,
    user_id: str,
    card_ids: Optional[list[str]] = None,
    since: Optional[datetime] = None,
    limit: Optional[int] = None
) -> pd.DataFrame:
    """
    Load review log entries into a dataframe, newest first.
    """
    entries = review_log.entries(user_id, card_ids=card_ids, since=since, limit=limit)
    if not entries:
        return pd.DataFrame(columns=LOG_COLUMNS)

    df = pd.DataFrame([
        {
            "reviewed_at": entry.reviewed_at,
            "card_id": entry.card_id,
            "rating": entry.rating.value,
            "prev_state": entry.prev_state.value if entry.prev_state else None,
            "next_state": entry.next_state.value,
            "next_interval_days": entry.next_interval_days,
            "next_ease": entry.next_ease,
        }
        for entry in entries
    ])
    df["reviewed_at"] = pd.to_datetime(df["reviewed_at"], utc=True, errors="coerce")
    df = df.dropna(subset=["reviewed_at"])
    df["day_utc"] = df["reviewed_at"].dt.floor("D")
    return df[LOG_COLUMNS].reset_index(drop=True)


def attach_fronts(df: pd.DataFrame, cards: CardSource) -> pd.DataFrame:
    """Add the card front text next to card_id (blank for deleted cards)."""
    df = df.copy()
    if df.empty:
        df["front"] = pd.Series(dtype="object")
        return df
    by_id = cards.cards_by_id(df["card_id"].unique().tolist())
    df["front"] = df["card_id"].map(lambda card_id: by_id[card_id].front if card_id in by_id else "")
    return df
