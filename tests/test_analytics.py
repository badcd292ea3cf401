"""
Review history built from the review log.
"""

from __future__ import annotations

import pandas as pd

from practice.analytics import build_review_history
from practice.srs.constants import Rating

from tests.conftest import GROUP, NOW, PROJECT, USER


def rate_some(service):
    service.start_session(USER, PROJECT, GROUP)
    service.submit_rating(USER, "c1", Rating.GOOD)
    service.submit_rating(USER, "c2", Rating.AGAIN)
    service.submit_rating(USER, "c3", Rating.AGAIN)


def test_daily_counts_and_recent_reviews(service, review_log, cards):
    rate_some(service)

    history = build_review_history(
        USER, project_id=PROJECT, days=7, review_log=review_log, cards=cards, now=NOW
    )

    assert history.days == 7
    assert history.total_reviews == 3
    assert len(history.daily_counts) == 7
    today = history.daily_counts.loc[pd.Timestamp("2026-03-01", tz="UTC")]
    assert today["total"] == 3
    assert today["again"] == 2
    assert today["good"] == 1
    assert today["hard"] == 0
    assert history.daily_counts["total"].iloc[:-1].sum() == 0

    assert history.recent["front"].tolist() == ["front 3", "front 2", "front 1"]
    assert history.recent["rating"].tolist() == ["again", "again", "good"]


def test_history_scoped_to_project(service, review_log, cards):
    rate_some(service)

    history = build_review_history(
        USER, project_id="other-project", review_log=review_log, cards=cards, now=NOW
    )

    assert history.total_reviews == 0
    assert history.recent.empty
    assert len(history.daily_counts) == 30


def test_window_and_limit_are_clamped(service, review_log, cards):
    rate_some(service)

    short = build_review_history(USER, days=0, recent_limit=0, review_log=review_log, cards=cards, now=NOW)
    assert len(short.daily_counts) == 1
    assert len(short.recent) == 1

    long = build_review_history(USER, days=1000, review_log=review_log, cards=cards, now=NOW)
    assert long.days == 365
