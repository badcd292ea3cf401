"""
Metric computations over the review log.
"""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from practice.srs.constants import Rating
from practice.srs.review_state import as_utc


RATING_COLUMNS = [rating.value for rating in Rating]
COUNT_COLUMNS = ["total"] + RATING_COLUMNS


def build_day_index(end: datetime, days: int) -> pd.DatetimeIndex:
    """
    Dense UTC day index of the last `days` days, ending on end's day.
    """
    end_day = pd.Timestamp(as_utc(end)).floor("D")
    return pd.date_range(end=end_day, periods=days, freq="D", tz="UTC")


def compute_daily_rating_counts(
    events_df: pd.DataFrame,
    day_index: pd.DatetimeIndex
) -> pd.DataFrame:
    """
    Rating counts per day: total plus one column per rating.

    Days without reviews are zero-filled.
    """
    if events_df.empty:
        return pd.DataFrame(0, index=day_index, columns=COUNT_COLUMNS, dtype="int64")

    counts = (
        events_df.groupby(["day_utc", "rating"]).size()
        .unstack(fill_value=0)
        .reindex(columns=RATING_COLUMNS, fill_value=0)
    )
    counts["total"] = counts[RATING_COLUMNS].sum(axis=1)
    counts = counts.reindex(index=day_index, fill_value=0)
    return counts[COUNT_COLUMNS].astype("int64")
