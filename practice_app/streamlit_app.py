"""
Flashcard Practice - Main App

Streamlit UI over the practice session engine.
Run with: streamlit run practice_app/streamlit_app.py
"""

import logging

import streamlit as st
from dotenv import load_dotenv

from practice_app.router import PAGES
from practice_app.state import ensure_session_state, init_database


load_dotenv()
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(
    page_title="Flashcard Practice",
    page_icon="📚",
    layout="centered"
)

init_database()
ensure_session_state()


def main():
    """Main app entry point."""
    tabs = st.tabs([page.title for page in PAGES])
    for tab, page in zip(tabs, PAGES):
        with tab:
            page.render()


if __name__ == "__main__":
    main()
