"""
Practice page rendering.
"""

from __future__ import annotations

import streamlit as st

from practice import srs
from practice.session.manager import SessionQueueManager
from practice_app.state import close_manager, open_manager
from practice_app.ui import (
    render_flashcard,
    render_rating_buttons,
    render_session_complete,
    render_session_stats,
)
from practice_app.ui.flashcard_style import BACK_STYLE, FRONT_STYLE


MODE_LABELS = {
    "due": "Due cards (updates your schedule)",
    "all": "Free practice (all cards)",
}
METHOD_LABELS = {
    "classic": "Classic",
    "writing": "Writing",
}


def render_practice_page() -> None:
    """
    Render the practice flow (launcher or active session).
    """
    manager = st.session_state.practice_manager
    if manager is None:
        _render_launcher()
    else:
        _render_session(manager)


def _render_launcher() -> None:
    st.title("📚 Practice")
    if srs.is_test_mode():
        st.warning("⚠️ **TEST MODE** - Using test_study_db (set TEST_MODE=false in .env for production)")

    st.session_state.user_id = st.text_input("User", value=st.session_state.user_id or "") or None
    st.session_state.project_id = st.text_input("Project", value=st.session_state.project_id)
    st.session_state.group_id = st.text_input("Group", value=st.session_state.group_id)

    mode = st.radio(
        "Mode",
        list(MODE_LABELS),
        format_func=MODE_LABELS.get,
        horizontal=True,
    )

    if st.session_state.practice_notice:
        st.error(st.session_state.practice_notice)

    ready = bool(st.session_state.project_id and st.session_state.group_id)
    if st.button("Start", type="primary", use_container_width=True, disabled=not ready):
        open_manager(mode)
        st.rerun()


def _render_session(manager: SessionQueueManager) -> None:
    if render_session_stats(manager):
        close_manager()
        st.rerun()

    _render_controls(manager)

    if st.session_state.practice_notice:
        st.error(st.session_state.practice_notice)

    if manager.is_empty:
        st.info("This group has no cards yet.")
        return

    if manager.is_finished:
        render_session_complete(manager)
        return

    card = manager.current
    position_key = f"{manager.position}_{manager.reviewed_count}"

    render_flashcard(card.front, FRONT_STYLE, corner_text=card.state.value)
    st.markdown("<br>", unsafe_allow_html=True)

    if manager.method == "writing" and not manager.flipped:
        typed = st.text_input("Your answer", key=f"answer_{position_key}")
        if st.button("Check", use_container_width=True, type="primary"):
            # widget state is dropped once the input is hidden
            st.session_state.practice_answer = (position_key, manager.check_answer(typed))
            manager.reveal()
            st.rerun()
        return

    if not manager.flipped:
        if st.button("Reveal Answer", use_container_width=True, type="primary"):
            manager.reveal()
            st.rerun()
        return

    render_flashcard(card.back, BACK_STYLE)
    if manager.method == "writing":
        _render_typed_answer(position_key)
    st.markdown("<br>", unsafe_allow_html=True)

    rating = render_rating_buttons(key_suffix=position_key)
    if rating is not None:
        result = manager.rate(rating)
        if result.ok:
            st.session_state.practice_answer = None
        st.session_state.practice_notice = None if result.ok else result.error
        st.rerun()


def _render_controls(manager: SessionQueueManager) -> None:
    col1, col2, col3, col4 = st.columns([2, 2, 1, 1])

    with col1:
        method = st.selectbox(
            "Method",
            list(METHOD_LABELS),
            index=list(METHOD_LABELS).index(manager.method),
            format_func=METHOD_LABELS.get,
        )
        if method != manager.method:
            result = manager.set_method(method)
            st.session_state.practice_notice = None if result.ok else result.error
            st.rerun()

    with col2:
        if manager.mode == "all":
            write_through = st.toggle("Save to schedule", value=manager.write_through)
            if write_through != manager.write_through:
                manager.set_write_through(write_through)
                st.rerun()
        else:
            st.caption(MODE_LABELS["due"])

    with col3:
        if st.button("↩️", help="Undo last rating", disabled=not manager.can_undo):
            manager.undo()
            st.rerun()

    with col4:
        if st.button("🔄", help="Rebuild the queue"):
            result = manager.reload()
            st.session_state.practice_notice = None if result.ok else result.error
            st.rerun()


def _render_typed_answer(position_key: str) -> None:
    stored = st.session_state.practice_answer
    if stored is None or stored[0] != position_key:
        return
    check = stored[1]
    st.markdown(f"**Your answer:** {check.typed or '(blank)'}")
    if check.correct:
        st.success(check.verdict)
    else:
        st.warning(check.verdict)
