"""
SRS - spaced-repetition scheduling for flashcards

Quick start:
    from practice import srs

    # Initialize database
    srs.init_db()

    # Compute the next state (algorithm only, no DB calls)
    next_state = srs.compute_next(srs.Rating.GOOD, prior_state)

    # Persist through the store
    store = srs.ReviewStateStore()
    stored = store.write_one(user_id, card_id, next_state)
"""

# Core scheduler API (algorithm logic)
from practice.srs.scheduler import build_log_entry, compute_next

# Database API
from practice.srs.database import (
    create_db_engine,
    get_default_user_id,
    init_db,
    is_test_mode,
    make_session_factory,
)
from practice.srs.review_store import ReviewLog, ReviewStateStore

# Constants and parameters
from practice.srs.constants import (
    DEFAULT_EASE,
    EASE_MAX,
    EASE_MIN,
    Rating,
    ReviewStatus,
)

# State types
from practice.srs.review_state import (
    ReviewLogEntry,
    ReviewState,
    initialize_review_state,
)


__all__ = [
    # Core algorithm
    "compute_next",
    "build_log_entry",

    # Database operations
    "create_db_engine",
    "get_default_user_id",
    "init_db",
    "is_test_mode",
    "make_session_factory",
    "ReviewStateStore",
    "ReviewLog",

    # Enums
    "Rating",
    "ReviewStatus",

    # State
    "ReviewState",
    "ReviewLogEntry",
    "initialize_review_state",

    # Parameters
    "DEFAULT_EASE",
    "EASE_MIN",
    "EASE_MAX",
]
