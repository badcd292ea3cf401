"""
Session Statistics UI

Renders progress metrics and controls.
"""

from __future__ import annotations

import streamlit as st

from practice.session.manager import SessionQueueManager


def render_session_stats(manager: SessionQueueManager) -> bool:
    """
    Render session progress metrics and exit button.

    Returns:
        True if quit button was clicked, False otherwise
    """
    progress = manager.progress()

    col1, col2, col3, col4 = st.columns([2, 2, 2, 1])

    with col1:
        st.metric("Card", progress.header)

    with col2:
        st.metric("Reviewed", f"{progress.reviewed} ({progress.percent}%)")

    with col3:
        st.metric("Due / New", f"{manager.due_count} / {manager.new_count}")

    with col4:
        st.markdown("<br>", unsafe_allow_html=True)  # Align with metrics
        if st.button("❌", help="Close session", use_container_width=True):
            return True

    st.progress(progress.percent / 100)
    st.divider()
    return False


def render_session_complete(manager: SessionQueueManager) -> None:
    """Render session completion message."""
    st.success(f"🎉 Session complete! You reviewed {manager.reviewed_count} cards.")
