"""Utility functions for the xcode test engine."""

from .user_feedback import StatusIcon, UserFeedback

__all__ = [
    "StatusIcon",
    "UserFeedback",
]
