"""
Simple page router for Streamlit tabs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from practice_app.pages.history import render_history_page
from practice_app.pages.practice import render_practice_page


@dataclass(frozen=True)
class AppPage:
    title: str
    render: Callable[[], None]


PAGES = [
    AppPage(title="Practice", render=render_practice_page),
    AppPage(title="History", render=render_history_page),
]
