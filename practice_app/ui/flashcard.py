"""
Flashcard UI Component

Renders one side of a practice card.
"""

from __future__ import annotations

import html

import streamlit as st

from practice_app.ui.flashcard_style import (
    CARD_MIN_HEIGHT,
    CARD_PADDING,
    FlashcardStyle,
)


def render_flashcard(
    main_text: str,
    style: FlashcardStyle,
    subtitle: str = "",
    corner_text: str = "",
) -> None:
    """
    Render a card face.

    Args:
        main_text: Card text (escaped; line breaks preserved)
        style: Colors and font sizes
        subtitle: Optional smaller text below the main text
        corner_text: Optional text in the top-right corner
    """
    main = html.escape(main_text).replace("\n", "<br>")

    corner_html = ""
    if corner_text:
        corner_html = (
            f'<div style="position: absolute; top: 15px; right: 20px; '
            f'font-size: {style.corner_font_size}; color: {style.corner_color}; '
            f'font-style: italic;">{html.escape(corner_text)}</div>'
        )

    subtitle_html = ""
    if subtitle:
        subtitle_html = (
            f'<p style="font-size: {style.subtitle_font_size}; color: {style.subtitle_color}; '
            f'margin: 15px 0 0 0; text-align: center;">{html.escape(subtitle)}</p>'
        )

    card_html = (
        f'<div style="background-color: {style.bg_color}; padding: {CARD_PADDING}; '
        'border-radius: 15px; text-align: center; box-shadow: 0 4px 6px '
        f'rgba(0, 0, 0, 0.1); min-height: {CARD_MIN_HEIGHT}; display: flex; '
        'flex-direction: column; align-items: center; justify-content: center; '
        f'position: relative;">{corner_html}'
        f'<div style="font-size: {style.main_font_size}; color: {style.main_color}; '
        f'overflow-wrap: anywhere; line-height: 1.4;">{main}</div>'
        f'{subtitle_html}</div>'
    )

    st.markdown(card_html, unsafe_allow_html=True)
