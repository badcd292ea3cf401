"""
Session Queue Manager - the live practice session

Owns the queue of cards for one (user, project, group) session:
- open: resume a stored snapshot or build a fresh queue
- rate: schedule (write-through) or simulate, then requeue the card
- undo: restore the state captured before the last rating
- every mutation is mirrored to SessionPersistence

A failed write-through rating leaves the session exactly as it was
before the rating (queue, position, reveal flag, counter and undo), so
the same card stays current and can be rated again.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from practice.actions import PracticeService, RatingOutcome, parse_rating, utc_now
from practice.errors import InvalidInputError, PracticeError
from practice.results import Result
from practice.session.answers import AnswerCheck, check_typed_answer
from practice.session.persistence import SessionPersistence
from practice.session.requeue import (
    is_due_soon,
    reinsert_offset,
    requeue,
    simulated_reinsert_offset,
)
from practice.session.types import (
    SESSION_MODES,
    STUDY_METHODS,
    PracticeCard,
    SessionSnapshot,
    UndoSnapshot,
)
from practice.session.undo import SnapshotStack
from practice.srs.constants import UNDO_DEPTH


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionProgress:
    reviewed: int
    total: int
    percent: int
    header: str   # "current/total" shown above the card


class SessionQueueManager:
    """
    Queue, position and counters of one practice session.
    """

    def __init__(
        self,
        service: PracticeService,
        persistence: SessionPersistence,
        user_id: Optional[str],
        project_id: str,
        group_id: str,
        limit: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
        undo_depth: int = UNDO_DEPTH
    ):
        self.service = service
        self.persistence = persistence
        self.user_id = user_id
        self.project_id = project_id
        self.group_id = group_id
        self.limit = limit
        self.clock = clock

        self.mode = "due"
        self.method = "classic"
        self.write_through = True

        self.queue: list[PracticeCard] = []
        self.position = 0
        self.flipped = False
        self.initial_count = 0
        self.reviewed_count = 0
        self.due_count = 0
        self.new_count = 0
        self.undo_stack = SnapshotStack(depth=undo_depth)

        self.loaded = False

    # ---- Lifecycle ----

    def open(self, mode: str = "due") -> Result[bool]:
        """
        Resume the stored session for this group, or start a fresh one.

        Returns:
            Result whose data is True when a stored session was restored
        """
        snapshot = self.persistence.load(self.project_id, self.group_id, now=self.clock())
        if snapshot is not None:
            self._restore(snapshot)
            logger.info(
                "Restored %s session for group %s at %d/%d",
                self.mode, self.group_id, self.position, len(self.queue),
            )
            return Result.success(True)

        result = self._load_fresh(mode)
        if not result.ok:
            return Result.failure(result.error, result.kind)
        return Result.success(False)

    def reload(self) -> Result[bool]:
        """Drop the stored session and rebuild the queue in the current mode."""
        self.persistence.clear(self.project_id, self.group_id)
        result = self._load_fresh(self.mode)
        if not result.ok:
            return Result.failure(result.error, result.kind)
        return Result.success(False)

    def switch_mode(self, mode: str) -> Result[bool]:
        """Start over in another mode ("due" or "all")."""
        if mode not in SESSION_MODES:
            return Result.from_exception(InvalidInputError(f"Unknown session mode: {mode!r}"))
        self.persistence.clear(self.project_id, self.group_id)
        result = self._load_fresh(mode)
        if not result.ok:
            return Result.failure(result.error, result.kind)
        return Result.success(False)

    def close(self) -> None:
        """Persist the latest snapshot; no further server writes."""
        if self.loaded:
            self.save()

    def _load_fresh(self, mode: str):
        if mode not in SESSION_MODES:
            return Result.from_exception(InvalidInputError(f"Unknown session mode: {mode!r}"))

        result = self.service.start_session(
            self.user_id, self.project_id, self.group_id, limit=self.limit, mode=mode
        )
        if not result.ok:
            return result

        data = result.data
        self.mode = mode
        self.write_through = mode == "due"
        self.queue = list(data.cards)
        self.position = 0
        self.flipped = False
        self.initial_count = len(data.cards)
        self.reviewed_count = 0
        self.due_count = data.due_count
        self.new_count = data.new_count
        self.undo_stack.clear()
        self.loaded = True
        self.save()
        return result

    def _restore(self, snapshot: SessionSnapshot) -> None:
        self.mode = snapshot.mode
        self.method = snapshot.method
        self.write_through = True if snapshot.mode == "due" else snapshot.write_through
        self.queue = list(snapshot.queue)
        self.position = self._clamp_position(snapshot.position, self.queue)
        self.flipped = snapshot.flipped
        self.initial_count = snapshot.initial_count or len(snapshot.queue)
        self.reviewed_count = snapshot.reviewed_count
        self.due_count = snapshot.due_count
        self.new_count = snapshot.new_count
        self.undo_stack = SnapshotStack(depth=self.undo_stack.depth, items=snapshot.undo)
        self.loaded = True

    # ---- Snapshot ----

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            saved_at=self.clock(),
            project_id=self.project_id,
            group_id=self.group_id,
            mode=self.mode,
            method=self.method,
            write_through=self.write_through,
            queue=list(self.queue),
            position=self.position,
            flipped=self.flipped,
            initial_count=self.initial_count,
            reviewed_count=self.reviewed_count,
            due_count=self.due_count,
            new_count=self.new_count,
            undo=self.undo_stack.to_list(),
        )

    def save(self) -> bool:
        return self.persistence.save(self.snapshot())

    def _capture(self) -> UndoSnapshot:
        return UndoSnapshot(
            queue=list(self.queue),
            position=self.position,
            flipped=self.flipped,
            reviewed_count=self.reviewed_count,
        )

    # ---- Current card and display state ----

    @property
    def current(self) -> Optional[PracticeCard]:
        if not self.queue:
            return None
        return self.queue[self._clamp_position(self.position, self.queue)]

    @property
    def is_finished(self) -> bool:
        return self.initial_count > 0 and not self.queue

    @property
    def is_empty(self) -> bool:
        """Session opened but the group had nothing to practice."""
        return self.loaded and self.initial_count == 0

    @property
    def can_undo(self) -> bool:
        return self.undo_stack.can_undo

    def progress(self) -> SessionProgress:
        total = self.initial_count
        reviewed = max(0, min(self.reviewed_count, total))
        percent = round(reviewed / total * 100) if total else 0
        header = f"{min(reviewed + 1, total)}/{total}"
        return SessionProgress(reviewed=reviewed, total=total, percent=percent, header=header)

    def flip(self) -> None:
        """Toggle the reveal flag of the current card."""
        if self.current is None:
            return
        self.flipped = not self.flipped
        self.save()

    def reveal(self) -> None:
        if self.current is None or self.flipped:
            return
        self.flipped = True
        self.save()

    def set_method(self, method: str) -> Result[None]:
        if method not in STUDY_METHODS:
            return Result.from_exception(InvalidInputError(f"Unknown study method: {method!r}"))
        self.method = method
        self.flipped = False
        self.save()
        return Result.success(None)

    def set_write_through(self, enabled: bool) -> None:
        """Toggle persistence of ratings; always on in "due" mode."""
        self.write_through = True if self.mode == "due" else bool(enabled)
        self.save()

    def check_answer(self, typed: str) -> Optional[AnswerCheck]:
        """Writing method: compare a typed answer with the current card's back."""
        card = self.current
        if card is None:
            return None
        return check_typed_answer(card.back, typed)

    # ---- Rating ----

    def rate(self, rating) -> Result[Optional[RatingOutcome]]:
        """
        Apply a rating to the current card.

        Write-through sessions schedule and persist the rating, then
        requeue using the stored values. Other sessions only simulate the
        reorder. Data is the stored outcome, or None when simulated.
        """
        card = self.current
        if card is None:
            return Result.from_exception(InvalidInputError("No card to rate."))
        try:
            rating = parse_rating(rating)
        except PracticeError as exc:
            return Result.from_exception(exc)

        before = self._capture()
        at = self._clamp_position(self.position, self.queue)

        if not self.write_through:
            offset = simulated_reinsert_offset(rating)
            self._apply_requeue(before, at, offset, None)
            logger.debug("Simulated %s on card %s: offset=%s", rating.value, card.id, offset)
            return Result.success(None)

        result = self.service.submit_rating(self.user_id, card.id, rating)
        if not result.ok:
            return result

        outcome = result.data
        refreshed = card.with_schedule(
            outcome.next_due_at, outcome.next_state, outcome.interval_days, outcome.ease
        )
        due_soon = is_due_soon(outcome.next_due_at, self.clock())
        offset = reinsert_offset(rating, outcome.next_state, due_soon)
        self._apply_requeue(before, at, offset, refreshed)
        logger.debug(
            "Rated card %s %s -> %s, due %s, offset=%s",
            card.id, rating.value, outcome.next_state.value,
            outcome.next_due_at.isoformat(), offset,
        )
        return result

    def _apply_requeue(
        self,
        before: UndoSnapshot,
        at: int,
        offset: Optional[int],
        replacement: Optional[PracticeCard]
    ) -> None:
        moved = requeue(self.queue, at, offset, replacement)
        self.undo_stack.push(before)
        self.queue = moved.queue
        self.position = moved.position
        self.flipped = False
        self.reviewed_count += 1
        self.save()

    def undo(self) -> bool:
        """
        Restore the state from before the last rating.

        The server-side write of that rating is not reversed.
        """
        snapshot = self.undo_stack.pop()
        if snapshot is None:
            return False
        self.queue = list(snapshot.queue)
        self.position = snapshot.position
        self.flipped = snapshot.flipped
        self.reviewed_count = snapshot.reviewed_count
        self.save()
        return True

    @staticmethod
    def _clamp_position(position: int, queue: list) -> int:
        if not queue:
            return 0
        return max(0, min(position, len(queue) - 1))

