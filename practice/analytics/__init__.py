"""
Analytics package exports.
"""

from practice.analytics.service import build_review_history
from practice.analytics.types import ReviewHistoryData

__all__ = [
    "build_review_history",
    "ReviewHistoryData",
]
