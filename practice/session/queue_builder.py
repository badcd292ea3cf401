"""
Initial queue construction for a practice session.

Cards are merged with their review state and ordered due-first. The
mode does not change the ordering: "due" and "all" sessions get the same
merged list, and the counts let the UI tell how much is actually due.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional

from practice.cards_repo import CardContent
from practice.session.types import PracticeCard
from practice.srs.constants import DEFAULT_SESSION_LIMIT, MAX_SESSION_LIMIT, ReviewStatus
from practice.srs.review_state import ReviewState, as_utc, initialize_review_state


@dataclass(frozen=True)
class QueueBuild:
    cards: list[PracticeCard]
    due_count: int   # Over the full group, not the truncated queue
    new_count: int


def clamp_limit(limit: Optional[int]) -> int:
    """Session size: default when absent, otherwise kept in [1, MAX_SESSION_LIMIT]."""
    if limit is None:
        limit = DEFAULT_SESSION_LIMIT
    return max(1, min(int(limit), MAX_SESSION_LIMIT))


def merge_card(card: CardContent, state: Optional[ReviewState], now: datetime) -> PracticeCard:
    """
    Combine card content with its state; a missing state reads as new and due now.
    """
    state = state or initialize_review_state(now)
    return PracticeCard(
        id=card.id,
        group_id=card.group_id,
        front=card.front,
        back=card.back,
        order_index=card.order_index,
        due_at=as_utc(state.due_at),
        state=state.status,
        interval_days=state.interval_days,
        ease=state.ease,
    )


def build_queue(
    cards: Iterable[CardContent],
    states: Mapping[str, ReviewState],
    now: datetime,
    limit: Optional[int] = None
) -> QueueBuild:
    """
    Build the ordered, truncated session queue.

    Order: due cards (due_at <= now) first by due_at, then not-yet-due
    cards by due_at; ties broken by order_index.

    Args:
        cards: Cards of the group
        states: Review state per card id
        now: Reference instant for "due"
        limit: Maximum queue length (clamped, see clamp_limit)
    """
    now = as_utc(now)
    merged = [merge_card(card, states.get(card.id), now) for card in cards]

    due_count = sum(1 for card in merged if card.due_at <= now)
    new_count = sum(1 for card in merged if card.state == ReviewStatus.NEW)

    merged.sort(key=lambda card: (card.due_at > now, card.due_at, card.order_index))

    return QueueBuild(
        cards=merged[:clamp_limit(limit)],
        due_count=due_count,
        new_count=new_count,
    )
