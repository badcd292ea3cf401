"""
Live session behaviour: requeue, undo, failures and resume.
"""

from __future__ import annotations

import pytest

from practice.results import ErrorKind
from practice.srs.constants import Rating, ReviewStatus

from tests.conftest import GROUP, PROJECT, USER


ALL_IDS = ["c1", "c2", "c3", "c4", "c5"]


def queue_ids(manager):
    return [card.id for card in manager.queue]


@pytest.fixture
def manager(make_manager):
    m = make_manager()
    assert m.open("due").ok
    return m


def test_open_builds_fresh_due_session(manager):
    assert queue_ids(manager) == ALL_IDS
    assert manager.write_through
    assert manager.initial_count == 5
    assert manager.due_count == 5
    assert manager.new_count == 5
    assert manager.current.id == "c1"
    assert manager.progress().header == "1/5"
    assert manager.progress().percent == 0


def test_again_requeues_four_ahead(manager):
    result = manager.rate(Rating.AGAIN)

    assert result.ok
    assert result.data.next_state == ReviewStatus.LEARNING
    assert queue_ids(manager) == ["c2", "c3", "c4", "c5", "c1"]
    assert manager.queue[-1].state == ReviewStatus.LEARNING
    assert manager.queue[-1].ease == pytest.approx(2.3)
    assert manager.position == 0
    assert manager.reviewed_count == 1


def test_good_on_new_card_leaves_session(manager):
    manager.rate(Rating.GOOD)

    assert queue_ids(manager) == ["c2", "c3", "c4", "c5"]
    assert manager.reviewed_count == 1


def test_hard_keeps_learning_card_at_end(manager):
    manager.rate(Rating.HARD)

    assert queue_ids(manager) == ["c2", "c3", "c4", "c5", "c1"]


def test_queue_conservation_over_many_ratings(manager):
    ratings = [Rating.AGAIN, Rating.HARD, Rating.GOOD, Rating.EASY, Rating.AGAIN, Rating.GOOD]
    dismissed = set()
    rated = 0

    while manager.current is not None and rated < 40:
        card_id = manager.current.id
        assert manager.rate(ratings[rated % len(ratings)]).ok
        rated += 1
        if card_id not in queue_ids(manager):
            dismissed.add(card_id)

        ids = queue_ids(manager)
        assert len(ids) == len(set(ids))
        assert set(ids) | dismissed == set(ALL_IDS)
        assert not set(ids) & dismissed

    assert manager.reviewed_count == rated


def test_finishing_the_session(manager):
    for _ in range(5):
        assert manager.rate(Rating.GOOD).ok

    assert manager.is_finished
    assert manager.current is None
    assert manager.progress().header == "5/5"
    assert manager.progress().percent == 100

    result = manager.rate(Rating.GOOD)
    assert not result.ok
    assert result.kind == ErrorKind.INVALID_INPUT


def test_undo_restores_previous_queue_but_not_server_state(manager, store):
    manager.flip()
    manager.rate(Rating.AGAIN)

    assert manager.can_undo
    assert manager.undo()

    assert queue_ids(manager) == ALL_IDS
    assert manager.reviewed_count == 0
    assert manager.flipped
    assert not manager.can_undo
    assert not manager.undo()
    assert store.read_one(USER, "c1").status == ReviewStatus.LEARNING


def test_only_one_level_of_undo(manager):
    manager.rate(Rating.AGAIN)
    manager.rate(Rating.AGAIN)

    assert manager.undo()
    assert queue_ids(manager) == ["c2", "c3", "c4", "c5", "c1"]
    assert not manager.undo()


def test_failed_rating_leaves_session_untouched(manager, store):
    manager.flip()
    manager.user_id = "intruder"

    result = manager.rate(Rating.GOOD)

    assert not result.ok
    assert result.kind == ErrorKind.MISSING_STATE
    assert queue_ids(manager) == ALL_IDS
    assert manager.reviewed_count == 0
    assert manager.flipped
    assert not manager.can_undo
    assert store.read_one(USER, "c1").status == ReviewStatus.NEW


def test_free_practice_simulates_without_writing(make_manager, store, review_log):
    manager = make_manager()
    manager.open("all")
    assert not manager.write_through

    result = manager.rate(Rating.AGAIN)

    assert result.ok
    assert result.data is None
    assert queue_ids(manager) == ["c2", "c3", "c4", "c1", "c5"]
    assert manager.reviewed_count == 1
    assert store.read_one(USER, "c1").status == ReviewStatus.NEW
    assert review_log.entries(USER) == []


def test_free_practice_can_opt_into_write_through(make_manager, store):
    manager = make_manager()
    manager.open("all")
    manager.set_write_through(True)

    result = manager.rate(Rating.GOOD)

    assert result.data.next_state == ReviewStatus.REVIEW
    assert store.read_one(USER, "c1").status == ReviewStatus.REVIEW
    assert "c1" not in queue_ids(manager)


def test_due_mode_always_writes_through(manager):
    manager.set_write_through(False)
    assert manager.write_through


def test_session_resumes_from_snapshot(manager, make_manager):
    manager.rate(Rating.AGAIN)

    resumed = make_manager()
    result = resumed.open("due")

    assert result.ok and result.data is True
    assert queue_ids(resumed) == ["c2", "c3", "c4", "c5", "c1"]
    assert resumed.reviewed_count == 1
    assert resumed.can_undo


def test_stale_snapshot_is_rebuilt(manager, make_manager, clock):
    manager.rate(Rating.AGAIN)
    clock.advance(hours=7)

    reopened = make_manager()
    result = reopened.open("due")

    assert result.ok and result.data is False
    assert reopened.reviewed_count == 0
    assert queue_ids(reopened) == ["c2", "c3", "c4", "c5", "c1"]


def test_reload_rebuilds_from_store(manager):
    manager.rate(Rating.GOOD)
    result = manager.reload()

    assert result.ok
    assert manager.reviewed_count == 0
    assert queue_ids(manager) == ["c2", "c3", "c4", "c5", "c1"]
    assert manager.due_count == 4
    assert not manager.can_undo


def test_switch_mode(manager):
    assert manager.switch_mode("all").ok
    assert manager.mode == "all"
    assert not manager.write_through

    result = manager.switch_mode("cram")
    assert result.kind == ErrorKind.INVALID_INPUT


def test_flip_and_method_are_persisted(manager, persistence, clock):
    manager.flip()
    assert persistence.load(PROJECT, GROUP, now=clock()).flipped

    assert manager.set_method("writing").ok
    stored = persistence.load(PROJECT, GROUP, now=clock())
    assert stored.method == "writing"
    assert not stored.flipped

    result = manager.set_method("shouting")
    assert not result.ok
    assert result.kind == ErrorKind.INVALID_INPUT
    assert manager.method == "writing"


def test_check_answer_against_back(manager):
    assert manager.check_answer("BACK 1").correct
    assert not manager.check_answer("front 1").correct


def test_writing_flow_keeps_typed_answer_through_reveal(manager):
    assert manager.set_method("writing").ok
    check = manager.check_answer("back 1")
    manager.reveal()

    assert manager.flipped
    assert check.typed == "back 1"
    assert check.verdict == "Correct"
    assert manager.rate(Rating.GOOD).ok
    assert not manager.flipped
    assert manager.current.id == "c2"


def test_open_requires_user(make_manager):
    manager = make_manager(user_id=None)
    result = manager.open()

    assert result.kind == ErrorKind.AUTH
    assert not manager.loaded


def test_empty_group(make_manager):
    manager = make_manager(group_id="empty")
    assert manager.open().ok

    assert manager.is_empty
    assert not manager.is_finished
    assert manager.current is None

    assert manager.switch_mode("all").ok
    assert manager.is_empty


def test_group_with_nothing_due_is_not_empty(manager, service):
    for card_id in ALL_IDS:
        assert service.submit_rating(USER, card_id, Rating.EASY).ok

    assert manager.reload().ok
    assert manager.due_count == 0
    assert not manager.is_empty
    assert queue_ids(manager) == ALL_IDS


def test_limit_truncates_queue(make_manager):
    manager = make_manager(limit=2)
    manager.open()

    assert queue_ids(manager) == ["c1", "c2"]
    assert manager.due_count == 5


def test_close_persists_only_loaded_sessions(make_manager, storage):
    make_manager(user_id=None).close()
    assert storage == {}
