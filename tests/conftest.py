"""
Shared fixtures: a throwaway SQLite database, a controllable clock and
a seeded group of cards.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from practice.actions import PracticeService
from practice.cards_repo import CardContent, CardSource
from practice.session.manager import SessionQueueManager
from practice.session.persistence import SessionPersistence
from practice.srs.database import create_db_engine, init_db, make_session_factory
from practice.srs.review_store import ReviewLog, ReviewStateStore


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
USER = "user-1"
PROJECT = "proj-1"
GROUP = "group-1"


class Clock:
    """Manually advanced UTC clock."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def session_factory(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'practice.db'}")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return ReviewStateStore(session_factory)


@pytest.fixture
def review_log(session_factory):
    return ReviewLog(session_factory)


@pytest.fixture
def cards(session_factory):
    source = CardSource(session_factory)
    source.add_cards([
        CardContent(
            id=f"c{i}",
            project_id=PROJECT,
            group_id=GROUP,
            front=f"front {i}",
            back=f"back {i}",
            order_index=i,
        )
        for i in range(1, 6)
    ])
    return source


@pytest.fixture
def service(store, review_log, cards, clock):
    return PracticeService(store=store, review_log=review_log, cards=cards, clock=clock)


@pytest.fixture
def storage():
    return {}


@pytest.fixture
def persistence(storage):
    return SessionPersistence(storage)


@pytest.fixture
def make_manager(service, persistence, clock):
    def _make(user_id=USER, group_id=GROUP, limit=None):
        return SessionQueueManager(
            service=service,
            persistence=persistence,
            user_id=user_id,
            project_id=PROJECT,
            group_id=group_id,
            limit=limit,
            clock=clock,
        )
    return _make
