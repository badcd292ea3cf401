"""
Types for review-history reporting.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class ReviewHistoryData:
    """
    Precomputed review history for one user (optionally one project).
    """
    days: int
    total_reviews: int
    daily_counts: pd.DataFrame   # index: UTC day; columns: total, again, hard, good, easy
    recent: pd.DataFrame         # newest first: reviewed_at, card_id, front, rating, next_state, ...
