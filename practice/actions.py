"""
Practice service - the two remote operations behind a session.

start_session: lazily initializes review state for a group and returns
the ordered queue with due/new counts.
submit_rating: applies one rating through the scheduler, persists it and
appends a review log entry.

Both return a Result instead of raising.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from practice.cards_repo import CardSource
from practice.errors import (
    InvalidInputError,
    InvalidRatingError,
    NotAuthenticatedError,
    PracticeError,
    ReviewStateMissingError,
)
from practice.results import Result
from practice.session.queue_builder import build_queue
from practice.session.types import SESSION_MODES, PracticeCard
from practice.srs.constants import Rating, ReviewStatus
from practice.srs.review_state import as_utc
from practice.srs.review_store import ReviewLog, ReviewStateStore
from practice.srs.scheduler import build_log_entry, compute_next


logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StartSessionData:
    cards: list[PracticeCard]
    due_count: int
    new_count: int


@dataclass(frozen=True)
class RatingOutcome:
    """Authoritative stored values after a rating."""
    next_due_at: datetime
    next_state: ReviewStatus
    interval_days: int
    ease: float


def parse_rating(value) -> Rating:
    try:
        return Rating(value)
    except ValueError as exc:
        raise InvalidRatingError(f"Unknown rating: {value!r}") from exc


def _require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise NotAuthenticatedError()
    return user_id


class PracticeService:
    """
    Boundary between the session manager and the store/content collaborators.
    """

    def __init__(
        self,
        store: Optional[ReviewStateStore] = None,
        review_log: Optional[ReviewLog] = None,
        cards: Optional[CardSource] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.store = store or ReviewStateStore()
        self.review_log = review_log or ReviewLog()
        self.cards = cards or CardSource()
        self.clock = clock

    def start_session(
        self,
        user_id: Optional[str],
        project_id: str,
        group_id: str,
        limit: Optional[int] = None,
        mode: str = "due"
    ) -> Result[StartSessionData]:
        """
        Build the initial queue for a group.

        Args:
            user_id: Current user (None = not authenticated)
            project_id: Project owning the group
            group_id: Group to practice
            limit: Maximum queue length (default 50, capped at 200)
            mode: "due" or "all"; both return the same merged ordering

        Returns:
            Result with the truncated queue and counts over the whole group
        """
        try:
            user_id = _require_user(user_id)
            if mode not in SESSION_MODES:
                raise InvalidInputError(f"Unknown session mode: {mode!r}")

            group_cards = self.cards.cards_for_group(project_id, group_id)
            if not group_cards:
                return Result.success(StartSessionData(cards=[], due_count=0, new_count=0))

            card_ids = [card.id for card in group_cards]
            now = as_utc(self.clock())
            self.store.ensure_exists(user_id, card_ids, now)
            states = self.store.read_batch(user_id, card_ids)

            built = build_queue(group_cards, states, now, limit)
        except PracticeError as exc:
            logger.warning("start_session failed for group %s: %s", group_id, exc)
            return Result.from_exception(exc)

        logger.info(
            "Started %s session for group %s: %d cards (%d due, %d new)",
            mode, group_id, len(built.cards), built.due_count, built.new_count,
        )
        return Result.success(StartSessionData(
            cards=built.cards,
            due_count=built.due_count,
            new_count=built.new_count,
        ))

    def submit_rating(
        self,
        user_id: Optional[str],
        card_id: str,
        rating
    ) -> Result[RatingOutcome]:
        """
        Apply a rating to the stored state of (user, card).

        The state row must already exist (created by start_session).
        The review log write is best-effort.
        """
        try:
            user_id = _require_user(user_id)
            rating = parse_rating(rating)

            prior = self.store.read_one(user_id, card_id)
            if prior is None:
                raise ReviewStateMissingError(user_id, card_id)

            now = as_utc(self.clock())
            next_state = compute_next(rating, prior, now)
            stored = self.store.write_one(user_id, card_id, next_state)
        except PracticeError as exc:
            logger.warning("submit_rating failed for card %s: %s", card_id, exc)
            return Result.from_exception(exc)

        self._append_log(build_log_entry(user_id, card_id, rating, prior, stored, now))

        return Result.success(RatingOutcome(
            next_due_at=stored.due_at,
            next_state=stored.status,
            interval_days=stored.interval_days,
            ease=stored.ease,
        ))

    def _append_log(self, entry) -> None:
        try:
            self.review_log.append(entry)
        except PracticeError as exc:
            logger.warning("Review log write failed for card %s: %s", entry.card_id, exc)
