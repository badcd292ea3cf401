"""
Flashcard style presets and constants.
"""

from __future__ import annotations

from dataclasses import dataclass


# ---- Shared Card Layout ----

CARD_PADDING = "35px 24px"
CARD_MIN_HEIGHT = "210px"
FRONT_BG_COLOR = "#f0f2f6"
BACK_BG_COLOR = "#e8f4f8"


@dataclass(frozen=True)
class FlashcardStyle:
    """
    Visual style preset for flashcards.
    """
    main_font_size: str = "2.2em"
    main_color: str = "#1f1f1f"
    subtitle_font_size: str = "1.0em"
    subtitle_color: str = "#666"
    corner_font_size: str = "0.85em"
    corner_color: str = "#666"
    bg_color: str = FRONT_BG_COLOR


FRONT_STYLE = FlashcardStyle(bg_color=FRONT_BG_COLOR)

BACK_STYLE = FlashcardStyle(
    main_font_size="1.8em",
    bg_color=BACK_BG_COLOR,
)
