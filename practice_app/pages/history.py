"""
Review history page rendering.
"""

from __future__ import annotations

import streamlit as st

from practice.analytics import build_review_history


@st.cache_data(show_spinner=False)
def _cached_history(user_id: str, project_id: str, days: int):
    return build_review_history(user_id=user_id, project_id=project_id or None, days=days)


def render_history_page() -> None:
    st.subheader("Review History")

    user_id = st.session_state.user_id
    if not user_id:
        st.info("Select a user on the practice page first.")
        return

    days = st.slider("Days", min_value=7, max_value=365, value=30)
    if st.button("Refresh"):
        _cached_history.clear()
        st.rerun()

    history = _cached_history(user_id, st.session_state.project_id, days)

    st.metric("Reviews", f"{history.total_reviews:,}")
    if history.total_reviews == 0:
        st.info("No reviews in this period.")
    else:
        st.bar_chart(history.daily_counts.drop(columns=["total"]))

    st.markdown("### Recent Reviews")
    if history.recent.empty:
        st.info("No reviews yet.")
    else:
        st.dataframe(
            history.recent[["reviewed_at", "front", "rating", "next_state", "next_interval_days"]],
            use_container_width=True,
            hide_index=True,
        )
