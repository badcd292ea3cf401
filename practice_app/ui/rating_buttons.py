"""
Rating Button UI

Renders the four rating buttons for the current card.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from practice.srs.constants import Rating


RATING_BUTTONS = [
    ("❌ Again", Rating.AGAIN),
    ("😰 Hard", Rating.HARD),
    ("👍 Good", Rating.GOOD),
    ("✨ Easy", Rating.EASY),
]


def render_rating_buttons(key_suffix: str, disabled: bool = False) -> Optional[Rating]:
    """
    Render rating buttons.

    Returns:
        Rating selected by user, or None if no button clicked
    """
    st.markdown("**How well did you remember this card?**")

    selected = None
    columns = st.columns(len(RATING_BUTTONS))
    for column, (label, rating) in zip(columns, RATING_BUTTONS):
        with column:
            if st.button(
                label,
                key=f"rate_{rating.value}_{key_suffix}",
                use_container_width=True,
                disabled=disabled,
            ):
                selected = rating
    return selected
