"""
Card repository - read access to flashcard content.

Cards are created and edited by the project/group CRUD layer; the
practice core only needs "the cards in group G".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from practice.errors import StoreError
from practice.srs.database import make_session_factory
from practice.srs.models import Flashcard


@dataclass(frozen=True)
class CardContent:
    id: str
    project_id: str
    group_id: str
    front: str
    back: str
    order_index: int


def _to_content(row: Flashcard) -> CardContent:
    return CardContent(
        id=row.id,
        project_id=row.project_id,
        group_id=row.group_id,
        front=row.front,
        back=row.back,
        order_index=int(row.order_index or 0),
    )


class CardSource:
    """
    Flashcard content lookups backed by the flashcards table.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or make_session_factory()

    def _fetch(self, stmt) -> list[CardContent]:
        session = self._session_factory()
        try:
            return [_to_content(row) for row in session.scalars(stmt).all()]
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not load cards: {exc}") from exc
        finally:
            session.close()

    def cards_for_group(self, project_id: str, group_id: str) -> list[CardContent]:
        """
        Cards of one group in static display order.
        """
        stmt = (
            select(Flashcard)
            .where(Flashcard.project_id == project_id, Flashcard.group_id == group_id)
            .order_by(Flashcard.order_index.asc(), Flashcard.id.asc())
        )
        return self._fetch(stmt)

    def cards_for_project(self, project_id: str) -> list[CardContent]:
        stmt = (
            select(Flashcard)
            .where(Flashcard.project_id == project_id)
            .order_by(Flashcard.group_id.asc(), Flashcard.order_index.asc())
        )
        return self._fetch(stmt)

    def cards_by_id(self, card_ids: Iterable[str]) -> dict[str, CardContent]:
        card_ids = list(card_ids)
        if not card_ids:
            return {}
        stmt = select(Flashcard).where(Flashcard.id.in_(card_ids))
        return {card.id: card for card in self._fetch(stmt)}

    def add_cards(self, cards: Iterable[CardContent]) -> int:
        """
        Insert card rows (used by the CSV importer and tests).

        Returns:
            Number of cards inserted
        """
        session = self._session_factory()
        count = 0
        try:
            for card in cards:
                session.add(Flashcard(
                    id=card.id,
                    project_id=card.project_id,
                    group_id=card.group_id,
                    front=card.front,
                    back=card.back,
                    order_index=card.order_index,
                ))
                count += 1
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Could not save cards: {exc}") from exc
        finally:
            session.close()
        return count
