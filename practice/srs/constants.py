"""
SRS Constants and Parameters

All tunable numbers of the scheduler and the practice session in one place.
"""

from enum import Enum


# ---- Ratings and States ----

class Rating(str, Enum):
    """User rating of a single presentation."""
    AGAIN = "again"   # Not recalled
    HARD = "hard"     # Recalled with effort
    GOOD = "good"     # Recalled normally
    EASY = "easy"     # Recalled effortlessly


class ReviewStatus(str, Enum):
    """Scheduling state of a card for one user."""
    NEW = "new"
    LEARNING = "learning"
    RELEARNING = "relearning"
    REVIEW = "review"


LEARNING_STATUSES = frozenset({
    ReviewStatus.NEW,
    ReviewStatus.LEARNING,
    ReviewStatus.RELEARNING,
})


# ---- Ease Factor ----

DEFAULT_EASE = 2.5
EASE_MIN = 1.3
EASE_MAX = 3.0

EASE_DELTA = {
    Rating.AGAIN: -0.20,
    Rating.HARD: -0.15,
    Rating.GOOD: 0.0,
    Rating.EASY: +0.15,
}


# ---- Step Delays ----

AGAIN_DELAY_MINUTES = 10
HARD_LEARNING_DELAY_MINUTES = 60

# Graduating intervals when leaving new/learning/relearning (days)
GRADUATING_INTERVAL_DAYS = {
    Rating.GOOD: 1,
    Rating.EASY: 3,
}

# Multipliers in the review branch
HARD_INTERVAL_FACTOR = 1.2
EASY_BONUS = 1.3


# ---- Session Queue ----

DEFAULT_SESSION_LIMIT = 50
MAX_SESSION_LIMIT = 200

# A requeued card due within this window stays in the live session
DUE_SOON_WINDOW_MINUTES = 30

# Positions ahead of the current one when a card is put back (write-through)
REQUEUE_OFFSETS = {
    Rating.AGAIN: 4,
    Rating.HARD: 8,
}
MIN_REQUEUE_OFFSET = 1

# Positions ahead when ratings are only simulated locally
SIMULATED_REQUEUE_OFFSETS = {
    Rating.AGAIN: 3,
    Rating.HARD: 8,
}


# ---- Session Persistence ----

SNAPSHOT_VERSION = 5
SNAPSHOT_TTL_HOURS = 6
UNDO_DEPTH = 1


# ---- Review History ----

DEFAULT_HISTORY_DAYS = 30
MAX_HISTORY_DAYS = 365
DEFAULT_RECENT_LIMIT = 50
MAX_RECENT_LIMIT = 200
