"""Base service class shared by the pipeline stages."""

import logging
from abc import ABC
from pathlib import Path
from typing import Optional

from xcode_test_engine.models.data_models import EngineConfig
from xcode_test_engine.utils.user_feedback import UserFeedback

# Notice kind -> logging level used when no UserFeedback was supplied
_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class BaseService(ABC):
    """A pipeline stage bound to one resolved EngineConfig.

    Stage notices go to the rich UserFeedback when the caller supplied one
    (the CLI does) and to the stage's logger otherwise, so library callers
    only ever see standard logging.
    """

    def __init__(self, config: EngineConfig, feedback: Optional[UserFeedback] = None):
        self.config = config
        self.project_root = config.project_root
        self.feedback = feedback or UserFeedback()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.use_rich_ui = feedback is not None

    def _artifacts_dir(self, label: str) -> Optional[Path]:
        """Capture directory for one subprocess, or None when captures are off."""
        if self.config.artifacts_dir is None:
            return None
        return self.config.artifacts_dir / label

    def _notify(self, kind: str, message: str, suggestion: Optional[str] = None) -> None:
        """Report a stage notice of the given kind (see _LOG_LEVELS)."""
        level = _LOG_LEVELS[kind]
        if self.use_rich_ui and (kind != "debug" or self.feedback.verbose):
            show = getattr(self.feedback, kind)
            if kind in ("warning", "error"):
                show(message, suggestion)
            else:
                show(message)
            return

        if kind == "success":
            message = f"SUCCESS: {message}"
        if suggestion:
            message = f"{message} (suggestion: {suggestion})"
        self.logger.log(level, message)
