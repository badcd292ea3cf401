"""
Review State Store - Database I/O for scheduling state

Handles all database operations for per-(user, card) review state and
the append-only review log.

Schema:
- flashcard_review_state: one row per (user_id, card_id)
- flashcard_review_log: one row per rating event

Algorithm logic lives in practice.srs.scheduler.
"""

from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from practice.errors import ReviewStateMissingError, StoreError
from practice.srs.constants import Rating, ReviewStatus
from practice.srs.database import make_session_factory
from practice.srs.models import ReviewLogRow, ReviewStateRow
from practice.srs.review_state import (
    ReviewLogEntry,
    ReviewState,
    as_utc,
    initialize_review_state,
)


logger = logging.getLogger(__name__)


def _row_to_state(row: ReviewStateRow) -> ReviewState:
    return ReviewState(
        status=ReviewStatus(row.state),
        due_at=as_utc(row.due_at),
        interval_days=int(row.interval_days or 0),
        ease=float(row.ease),
        reps=int(row.reps or 0),
        lapses=int(row.lapses or 0),
        last_review_at=as_utc(row.last_review_at) if row.last_review_at else None,
    )


def _row_to_entry(row: ReviewLogRow) -> ReviewLogEntry:
    return ReviewLogEntry(
        user_id=row.user_id,
        card_id=row.card_id,
        rating=Rating(row.rating),
        prev_state=ReviewStatus(row.prev_state) if row.prev_state else None,
        next_state=ReviewStatus(row.next_state),
        prev_due_at=as_utc(row.prev_due_at) if row.prev_due_at else None,
        next_due_at=as_utc(row.next_due_at),
        prev_interval_days=row.prev_interval_days,
        next_interval_days=row.next_interval_days,
        prev_ease=row.prev_ease,
        next_ease=row.next_ease,
        reviewed_at=as_utc(row.created_at),
    )


class ReviewStateStore:
    """
    Durable per-(user, card) scheduling state.

    Every public method opens and closes its own session. SQLAlchemy
    errors are re-raised as StoreError.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or make_session_factory()

    def ensure_exists(
        self,
        user_id: str,
        card_ids: Iterable[str],
        now: Optional[datetime] = None
    ) -> int:
        """
        Create default rows for cards that have none.

        Insert-if-absent: existing rows are never touched, so the call is
        idempotent.

        Returns:
            Number of rows requested (not necessarily inserted)
        """
        card_ids = list(dict.fromkeys(card_ids))
        if not card_ids:
            return 0

        now = as_utc(now or datetime.now(timezone.utc))
        default = initialize_review_state(now)
        payload = [
            {
                "user_id": user_id,
                "card_id": card_id,
                "state": default.status.value,
                "due_at": default.due_at,
                "interval_days": default.interval_days,
                "ease": default.ease,
                "reps": default.reps,
                "lapses": default.lapses,
                "last_review_at": None,
                "created_at": now,
                "updated_at": now,
            }
            for card_id in card_ids
        ]

        session = self._session_factory()
        try:
            dialect = session.get_bind().dialect.name
            if dialect in ("postgresql", "sqlite"):
                insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
                stmt = insert(ReviewStateRow).values(payload).on_conflict_do_nothing(
                    index_elements=["user_id", "card_id"]
                )
                session.execute(stmt)
            else:
                existing = set(session.scalars(
                    select(ReviewStateRow.card_id).where(
                        ReviewStateRow.user_id == user_id,
                        ReviewStateRow.card_id.in_(card_ids),
                    )
                ))
                for values in payload:
                    if values["card_id"] not in existing:
                        session.add(ReviewStateRow(**values))
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Could not initialize review state: {exc}") from exc
        finally:
            session.close()

        logger.debug("Ensured review state for %d cards (user=%s)", len(card_ids), user_id)
        return len(card_ids)

    def read_batch(self, user_id: str, card_ids: Iterable[str]) -> dict[str, ReviewState]:
        """
        Load states for card_ids. Cards without a row are absent from the result.
        """
        card_ids = list(card_ids)
        if not card_ids:
            return {}

        session = self._session_factory()
        try:
            rows = session.scalars(
                select(ReviewStateRow).where(
                    ReviewStateRow.user_id == user_id,
                    ReviewStateRow.card_id.in_(card_ids),
                )
            ).all()
            return {row.card_id: _row_to_state(row) for row in rows}
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not read review state: {exc}") from exc
        finally:
            session.close()

    def read_one(self, user_id: str, card_id: str) -> Optional[ReviewState]:
        return self.read_batch(user_id, [card_id]).get(card_id)

    def write_one(self, user_id: str, card_id: str, next_state: ReviewState) -> ReviewState:
        """
        Persist the full state tuple and return the stored row.

        The returned state is authoritative; callers should use it
        instead of the value they computed.

        Raises:
            ReviewStateMissingError: no row exists for (user_id, card_id)
            StoreError: the update failed
        """
        now = datetime.now(timezone.utc)
        session = self._session_factory()
        try:
            result = session.execute(
                update(ReviewStateRow)
                .where(
                    ReviewStateRow.user_id == user_id,
                    ReviewStateRow.card_id == card_id,
                )
                .values(
                    state=next_state.status.value,
                    due_at=as_utc(next_state.due_at),
                    interval_days=next_state.interval_days,
                    ease=next_state.ease,
                    reps=next_state.reps,
                    lapses=next_state.lapses,
                    last_review_at=(
                        as_utc(next_state.last_review_at)
                        if next_state.last_review_at else None
                    ),
                    updated_at=now,
                )
            )
            if result.rowcount == 0:
                session.rollback()
                raise ReviewStateMissingError(user_id, card_id)
            session.commit()

            row = session.get(ReviewStateRow, (user_id, card_id), populate_existing=True)
            if row is None:
                raise ReviewStateMissingError(user_id, card_id)
            return _row_to_state(row)
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Could not save review state: {exc}") from exc
        finally:
            session.close()

    def count_rows(self, user_id: str, card_id: str) -> int:
        """Number of state rows for (user_id, card_id); 0 or 1."""
        session = self._session_factory()
        try:
            return len(session.scalars(
                select(ReviewStateRow.card_id).where(
                    ReviewStateRow.user_id == user_id,
                    ReviewStateRow.card_id == card_id,
                )
            ).all())
        finally:
            session.close()


class ReviewLog:
    """
    Append-only audit of rating events.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or make_session_factory()

    def append(self, entry: ReviewLogEntry) -> None:
        """
        Insert one entry.

        Raises:
            StoreError: the insert failed
        """
        session = self._session_factory()
        try:
            session.add(ReviewLogRow(
                user_id=entry.user_id,
                card_id=entry.card_id,
                rating=Rating(entry.rating).value,
                prev_state=entry.prev_state.value if entry.prev_state else None,
                next_state=entry.next_state.value,
                prev_due_at=as_utc(entry.prev_due_at) if entry.prev_due_at else None,
                next_due_at=as_utc(entry.next_due_at),
                prev_interval_days=entry.prev_interval_days,
                next_interval_days=entry.next_interval_days,
                prev_ease=entry.prev_ease,
                next_ease=entry.next_ease,
                created_at=as_utc(entry.reviewed_at),
            ))
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Could not write review log: {exc}") from exc
        finally:
            session.close()

    def entries(
        self,
        user_id: str,
        card_ids: Optional[Iterable[str]] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> list[ReviewLogEntry]:
        """
        Entries for a user, newest first.

        Args:
            user_id: User identifier for scoping review data
            card_ids: Restrict to these cards (None = all cards)
            since: Only entries at or after this instant
            limit: Maximum number of entries to return
        """
        stmt = select(ReviewLogRow).where(ReviewLogRow.user_id == user_id)
        if card_ids is not None:
            card_ids = list(card_ids)
            if not card_ids:
                return []
            stmt = stmt.where(ReviewLogRow.card_id.in_(card_ids))
        if since is not None:
            stmt = stmt.where(ReviewLogRow.created_at >= as_utc(since))
        stmt = stmt.order_by(ReviewLogRow.created_at.desc(), ReviewLogRow.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)

        session = self._session_factory()
        try:
            return [_row_to_entry(row) for row in session.scalars(stmt).all()]
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not read review log: {exc}") from exc
        finally:
            session.close()
