"""
Initial queue ordering and counts.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from practice.cards_repo import CardContent
from practice.session.queue_builder import build_queue, clamp_limit
from practice.srs.constants import ReviewStatus
from practice.srs.review_state import ReviewState


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def card(card_id, order_index):
    return CardContent(
        id=card_id, project_id="p", group_id="g",
        front=card_id, back=card_id.upper(), order_index=order_index,
    )


def state(status, due_at, interval_days=0):
    return ReviewState(status=status, due_at=due_at, interval_days=interval_days)


def test_due_cards_first_then_future_with_order_index_tiebreak():
    cards = [card("a", 0), card("b", 1), card("c", 2), card("d", 3), card("e", 4)]
    states = {
        "a": state(ReviewStatus.REVIEW, NOW + timedelta(days=1), 1),
        "b": state(ReviewStatus.REVIEW, NOW - timedelta(hours=1), 3),
        "c": state(ReviewStatus.LEARNING, NOW - timedelta(hours=2)),
        "d": state(ReviewStatus.LEARNING, NOW + timedelta(hours=1)),
        "e": state(ReviewStatus.REVIEW, NOW - timedelta(hours=2), 2),
    }

    built = build_queue(cards, states, NOW, limit=10)

    assert [c.id for c in built.cards] == ["c", "e", "b", "d", "a"]
    assert built.due_count == 3
    assert built.new_count == 0


def test_all_new_group_is_fully_due():
    cards = [card(f"c{i}", i) for i in range(5)]
    states = {c.id: state(ReviewStatus.NEW, NOW) for c in cards}

    built = build_queue(cards, states, NOW, limit=10)

    assert len(built.cards) == 5
    assert built.due_count == 5
    assert built.new_count == 5
    assert [c.id for c in built.cards] == ["c0", "c1", "c2", "c3", "c4"]


def test_truncation_keeps_counts_over_full_group():
    cards = [card(f"c{i}", i) for i in range(8)]
    states = {c.id: state(ReviewStatus.NEW, NOW) for c in cards}

    built = build_queue(cards, states, NOW, limit=3)

    assert [c.id for c in built.cards] == ["c0", "c1", "c2"]
    assert built.due_count == 8
    assert built.new_count == 8


def test_missing_state_reads_as_new_and_due():
    built = build_queue([card("x", 0)], {}, NOW)

    assert built.cards[0].state == ReviewStatus.NEW
    assert built.cards[0].due_at == NOW
    assert built.due_count == 1


def test_practice_card_carries_state_snapshot():
    due = NOW - timedelta(days=2)
    built = build_queue([card("x", 7)], {"x": state(ReviewStatus.REVIEW, due, 4)}, NOW)

    practice_card = built.cards[0]
    assert practice_card.front == "x"
    assert practice_card.back == "X"
    assert practice_card.order_index == 7
    assert practice_card.interval_days == 4
    assert practice_card.due_at == due


def test_clamp_limit():
    assert clamp_limit(None) == 50
    assert clamp_limit(0) == 1
    assert clamp_limit(-5) == 1
    assert clamp_limit(80) == 80
    assert clamp_limit(1000) == 200
