"""Error parsing utilities for broken xcodebuild runs with actionable guidance."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from xcode_test_engine.models.data_models import BuildOutcome


@dataclass
class ErrorReport:
    kind: str  # 'usage' | 'compile' | 'destination' | 'unknown'
    reasons: List[str]
    guidance: List[str]
    excerpts: List[str]


_XCODEBUILD_ERROR = re.compile(r"^xcodebuild: error: (?P<message>.+)$", re.MULTILINE)
_COMPILE_ERROR = re.compile(r"^(?P<location>[^\s:][^:]*:\d+:\d+): error: (?P<message>.+)$", re.MULTILINE)


def parse_errors(outcome: BuildOutcome) -> ErrorReport:
    """Summarize why xcodebuild broke, for logs and user guidance."""
    text = (outcome.stderr or "") + "\n" + (outcome.stdout or "")
    excerpts = _tail(text.splitlines())

    usage = _XCODEBUILD_ERROR.findall(text)
    if usage:
        if any("destination" in message.lower() for message in usage):
            return ErrorReport(
                kind="destination",
                reasons=usage,
                guidance=["Check the 'destination' build setting against 'xcrun simctl list devices'."],
                excerpts=excerpts,
            )
        return ErrorReport(
            kind="usage",
            reasons=usage,
            guidance=["Check the 'build' settings in .arcconfig (workspace, scheme, sdk)."],
            excerpts=excerpts,
        )

    compile_errors = [f"{m.group('location')}: {m.group('message')}" for m in _COMPILE_ERROR.finditer(text)]
    if compile_errors or "** BUILD FAILED **" in text or "** TEST BUILD FAILED **" in text:
        return ErrorReport(
            kind="compile",
            reasons=compile_errors or ["Build failed"],
            guidance=["Reproduce with the printed xcodebuild command and fix the compile errors."],
            excerpts=excerpts,
        )

    return ErrorReport(
        kind="unknown",
        reasons=[f"xcodebuild exited with status {outcome.exit_code}"],
        guidance=["Check the captured stderr"],
        excerpts=excerpts,
    )


def _tail(lines: List[str], n: int = 50) -> List[str]:
    return lines[-n:]
