"""
Streamlit session state and practice wiring helpers.
"""

from __future__ import annotations

import os
from typing import Optional

import streamlit as st

from practice import srs
from practice.actions import PracticeService
from practice.session.manager import SessionQueueManager
from practice.session.persistence import FileSessionStorage, SessionPersistence


DEFAULT_UI_SESSION_LIMIT = 80


def get_session_limit() -> int:
    """Queue size requested by the UI (PRACTICE_SESSION_LIMIT, default 80)."""
    return int(os.getenv("PRACTICE_SESSION_LIMIT", DEFAULT_UI_SESSION_LIMIT))


def init_database() -> None:
    """
    Initialize database schema (cached per Streamlit process).
    """
    @st.cache_resource
    def _init_database() -> None:
        srs.init_db()

    _init_database()


@st.cache_resource
def get_service() -> PracticeService:
    return PracticeService()


@st.cache_resource
def get_persistence() -> SessionPersistence:
    return SessionPersistence(FileSessionStorage())


def ensure_session_state() -> None:
    """
    Populate Streamlit session_state with defaults.
    """
    if "user_id" not in st.session_state:
        st.session_state.user_id = srs.get_default_user_id() or None
    if "project_id" not in st.session_state:
        st.session_state.project_id = ""
    if "group_id" not in st.session_state:
        st.session_state.group_id = ""
    if "practice_manager" not in st.session_state:
        st.session_state.practice_manager = None
    if "practice_notice" not in st.session_state:
        st.session_state.practice_notice = None
    if "practice_answer" not in st.session_state:
        st.session_state.practice_answer = None


def open_manager(mode: str) -> Optional[SessionQueueManager]:
    """
    Open (or resume) the session for the selected project/group.

    Failures are stored as a notice for the page to show.
    """
    manager = SessionQueueManager(
        service=get_service(),
        persistence=get_persistence(),
        user_id=st.session_state.user_id,
        project_id=st.session_state.project_id,
        group_id=st.session_state.group_id,
        limit=get_session_limit(),
    )
    result = manager.open(mode)
    if not result.ok:
        st.session_state.practice_notice = result.error
        return None

    st.session_state.practice_notice = None
    st.session_state.practice_answer = None
    st.session_state.practice_manager = manager
    return manager


def close_manager() -> None:
    manager = st.session_state.practice_manager
    if manager is not None:
        manager.close()
    st.session_state.practice_manager = None
    st.session_state.practice_answer = None
