"""
Error taxonomy for the practice core.

Service functions in practice.actions catch these and turn them into
failed Result values; nothing here is meant to reach the UI as a raise.
"""

from __future__ import annotations


class PracticeError(Exception):
    """Base class for practice-core failures."""


class NotAuthenticatedError(PracticeError):
    """No active user at call time."""

    def __init__(self, message: str = "Not authenticated."):
        super().__init__(message)


class ReviewStateMissingError(PracticeError):
    """A rating was submitted for a card with no review-state row."""

    def __init__(self, user_id: str, card_id: str):
        self.user_id = user_id
        self.card_id = card_id
        super().__init__(
            f"Review state not found for card {card_id} (session not initialized?)"
        )


class StoreError(PracticeError):
    """Transient failure reading or writing the review-state store."""


class InvalidInputError(PracticeError):
    """Caller input outside the accepted values (mode, method, limit)."""


class InvalidRatingError(InvalidInputError):
    """Rating not one of again/hard/good/easy."""
