"""
Session snapshot persistence: validation on read and file storage.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from practice.session.persistence import FileSessionStorage, SessionPersistence, session_key
from practice.session.types import PracticeCard, SessionSnapshot, UndoSnapshot
from practice.srs.constants import SNAPSHOT_VERSION, ReviewStatus


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_snapshot(saved_at=NOW, project_id="p1", group_id="g1", **overrides):
    queue = [
        PracticeCard(id="c1", group_id=group_id, front="f1", back="b1", due_at=NOW),
        PracticeCard(
            id="c2", group_id=group_id, front="f2", back="b2", order_index=1,
            due_at=NOW + timedelta(days=1), state=ReviewStatus.REVIEW, interval_days=1,
        ),
    ]
    fields = dict(
        saved_at=saved_at,
        project_id=project_id,
        group_id=group_id,
        mode="all",
        method="writing",
        write_through=False,
        queue=queue,
        position=1,
        flipped=True,
        initial_count=3,
        reviewed_count=1,
        undo=[UndoSnapshot(queue=queue[:1], position=0, flipped=True, reviewed_count=0)],
    )
    fields.update(overrides)
    return SessionSnapshot(**fields)


def test_session_key_format():
    assert session_key("p1", "g1") == f"practice_session:v{SNAPSHOT_VERSION}:p1:g1"


def test_save_then_load_restores_verbatim():
    persistence = SessionPersistence({})
    snapshot = make_snapshot()

    assert persistence.save(snapshot)
    loaded = persistence.load("p1", "g1", now=NOW + timedelta(hours=1))

    assert loaded == snapshot
    assert loaded.queue[1].state == ReviewStatus.REVIEW
    assert loaded.undo[0].reviewed_count == 0


def test_expired_snapshot_is_discarded():
    storage = {}
    persistence = SessionPersistence(storage)
    persistence.save(make_snapshot())

    assert persistence.load("p1", "g1", now=NOW + timedelta(hours=6, minutes=1)) is None
    assert storage == {}


def test_snapshot_within_window_is_kept():
    persistence = SessionPersistence({})
    persistence.save(make_snapshot())

    assert persistence.load("p1", "g1", now=NOW + timedelta(hours=5, minutes=59)) is not None


def test_snapshot_from_the_future_is_discarded():
    storage = {}
    persistence = SessionPersistence(storage)
    persistence.save(make_snapshot(saved_at=NOW + timedelta(days=30)))

    assert persistence.load("p1", "g1", now=NOW + timedelta(days=29)) is None
    assert storage == {}


def test_version_mismatch_is_discarded():
    storage = {}
    persistence = SessionPersistence(storage)
    storage[persistence.key("p1", "g1")] = make_snapshot(version=SNAPSHOT_VERSION - 1).model_dump_json()

    assert persistence.load("p1", "g1", now=NOW) is None
    assert storage == {}


def test_group_mismatch_is_discarded():
    storage = {}
    persistence = SessionPersistence(storage)
    storage[persistence.key("p1", "g1")] = make_snapshot(group_id="other").model_dump_json()

    assert persistence.load("p1", "g1", now=NOW) is None
    assert storage == {}


def test_corrupt_payload_is_discarded():
    storage = {}
    persistence = SessionPersistence(storage)
    storage[persistence.key("p1", "g1")] = "{not json"

    assert persistence.load("p1", "g1", now=NOW) is None
    assert storage == {}


def test_missing_snapshot():
    assert SessionPersistence({}).load("p1", "g1", now=NOW) is None


def test_clear_removes_only_that_group():
    storage = {}
    persistence = SessionPersistence(storage)
    persistence.save(make_snapshot(group_id="g1"))
    persistence.save(make_snapshot(group_id="g2"))

    persistence.clear("p1", "g1")

    assert list(storage) == [persistence.key("p1", "g2")]


def test_file_storage_round_trip(tmp_path):
    storage = FileSessionStorage(tmp_path / "sessions")
    key = session_key("p1", "g/1")

    storage[key] = '{"a": 1}'

    assert storage[key] == '{"a": 1}'
    assert list(storage) == [key]
    assert len(storage) == 1
    del storage[key]
    assert key not in storage
    assert len(storage) == 0


def test_persistence_over_file_storage(tmp_path):
    persistence = SessionPersistence(FileSessionStorage(tmp_path))
    snapshot = make_snapshot()
    persistence.save(snapshot)

    reopened = SessionPersistence(FileSessionStorage(tmp_path))
    assert reopened.load("p1", "g1", now=NOW) == snapshot


def test_save_failure_is_reported_not_raised():
    class BrokenStorage(dict):
        def __setitem__(self, key, value):
            raise OSError("disk full")

    assert SessionPersistence(BrokenStorage()).save(make_snapshot()) is False
