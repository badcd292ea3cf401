"""
Typed-answer checking for the writing study method.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass


_WHITESPACE = re.compile(r"\s+")


def normalize_answer(text: str) -> str:
    """
    Trim, lowercase, strip diacritics and collapse whitespace.
    """
    text = (text or "").strip().lower()
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", text)


def answer_matches(expected: str, typed: str) -> bool:
    """
    True when the normalized typed answer appears in the expected one.

    An empty answer never matches.
    """
    typed_norm = normalize_answer(typed)
    if not typed_norm:
        return False
    return typed_norm in normalize_answer(expected)


@dataclass(frozen=True)
class AnswerCheck:
    """A typed answer and whether it matched, shown next to the revealed back."""
    typed: str
    correct: bool

    @property
    def verdict(self) -> str:
        if not self.typed.strip():
            return "No answer given"
        return "Correct" if self.correct else "Not quite"


def check_typed_answer(expected: str, typed: str) -> AnswerCheck:
    typed = typed or ""
    return AnswerCheck(typed=typed, correct=answer_matches(expected, typed))
