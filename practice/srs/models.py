"""
SQLAlchemy ORM Models for the practice database

Defines the card content table, the per-user review state and the
append-only review log.
"""

from sqlalchemy import Column, DateTime, Float, Integer, String, Text, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Flashcard(Base):
    """
    Card content. Owned by the project/group CRUD layer; read-only here.
    """
    __tablename__ = 'flashcards'

    id = Column(String(64), primary_key=True)
    project_id = Column(String(64), nullable=False, index=True)
    group_id = Column(String(64), nullable=False, index=True)

    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)  # Static display order

    created_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Flashcard({self.id}, group={self.group_id})>"


class ReviewStateRow(Base):
    """
    Scheduling state of one card for one user.
    """
    __tablename__ = 'flashcard_review_state'

    # Primary key: composite of user_id and card_id
    user_id = Column(String(255), primary_key=True, nullable=False)
    card_id = Column(String(64), primary_key=True, nullable=False)

    state = Column(String(20), nullable=False, default="new")  # new/learning/relearning/review
    due_at = Column(DateTime(timezone=True), nullable=False)
    interval_days = Column(Integer, nullable=False, default=0)
    ease = Column(Float, nullable=False, default=2.5)
    reps = Column(Integer, nullable=False, default=0)
    lapses = Column(Integer, nullable=False, default=0)
    last_review_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<ReviewStateRow({self.user_id}, {self.card_id}, {self.state})>"


class ReviewLogRow(Base):
    """
    Log entry for a single rating. Never updated after insert.
    """
    __tablename__ = 'flashcard_review_log'

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False)
    card_id = Column(String(64), nullable=False)

    rating = Column(String(10), nullable=False)  # again/hard/good/easy

    prev_state = Column(String(20), nullable=True)
    next_state = Column(String(20), nullable=False)
    prev_due_at = Column(DateTime(timezone=True), nullable=True)
    next_due_at = Column(DateTime(timezone=True), nullable=False)
    prev_interval_days = Column(Integer, nullable=True)
    next_interval_days = Column(Integer, nullable=False)
    prev_ease = Column(Float, nullable=True)
    next_ease = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_review_log_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<ReviewLogRow(id={self.id}, {self.card_id}, rating={self.rating})>"
