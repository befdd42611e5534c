"""Core engine orchestration."""

from .engine import XcodeTestEngine

__all__ = ['XcodeTestEngine']
