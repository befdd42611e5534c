"""Data models for the xcode test engine."""

from .data_models import (
    ENGINE_RECORD_NAME,
    TESTS_FAILED_EXIT_CODE,
    BuildOutcome,
    CoverageArtifacts,
    CoverageMode,
    EngineConfig,
    Invocation,
    OutcomeKind,
    ResultKind,
    ResultRecord,
    SelectionPolicy,
)

__all__ = [
    "ENGINE_RECORD_NAME",
    "TESTS_FAILED_EXIT_CODE",
    "BuildOutcome",
    "CoverageArtifacts",
    "CoverageMode",
    "EngineConfig",
    "Invocation",
    "OutcomeKind",
    "ResultKind",
    "ResultRecord",
    "SelectionPolicy",
]
