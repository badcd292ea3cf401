"""UI Components for the practice app"""

from practice_app.ui.flashcard import render_flashcard
from practice_app.ui.session_stats import render_session_stats, render_session_complete
from practice_app.ui.rating_buttons import render_rating_buttons

__all__ = [
    "render_flashcard",
    "render_session_stats",
    "render_session_complete",
    "render_rating_buttons",
]
