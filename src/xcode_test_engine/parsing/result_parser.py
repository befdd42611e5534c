"""Parse xcodebuild test output into normalized result records."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from xcode_test_engine.models.data_models import ENGINE_RECORD_NAME, ResultKind, ResultRecord
from .coverage_parser import parse_llvm_cov_show

logger = logging.getLogger(__name__)

# Test Case '-[AppTests.LoginTests testEmptyPassword]' failed (0.012 seconds).
# Test case 'LoginTests.testEmptyPassword()' passed on 'iPhone 15' (0.004 seconds)
_TEST_CASE_PATTERN = re.compile(
    r"^Test [Cc]ase '(?P<name>[^']+)' (?P<status>passed|failed|skipped)"
    r"(?: on '[^']*')?\s*\((?P<duration>[\d.]+) seconds\)",
    re.MULTILINE,
)
# /src/AppTests/LoginTests.m:42: error: -[LoginTests testEmptyPassword] : XCTAssertTrue failed
_FAILURE_PATTERN = re.compile(
    r"^(?P<location>\S.*?:\d+): error: (?P<name>-\[[^\]]+\]|[\w.]+\(\)) : (?P<message>.*)$",
    re.MULTILINE,
)

_STATUS = {
    "passed": ResultKind.PASS,
    "failed": ResultKind.FAIL,
    "skipped": ResultKind.SKIP,
}


class ResultParser(ABC):
    """Turns raw build output into result records.

    Implementations must accept a missing coverage report and a disabled
    coverage flag without failing.
    """

    @abstractmethod
    def parse(
        self,
        *,
        project_root: Path,
        xcode_args: Sequence[str],
        stderr: str,
        enable_coverage: bool,
        coverage_report: Optional[str],
        stdout: Optional[str] = None,
    ) -> List[ResultRecord]:
        ...


class XcodeTestResultParser(ResultParser):
    """Reads XCTest case lines, which xcodebuild writes to stderr."""

    def parse(
        self,
        *,
        project_root: Path,
        xcode_args: Sequence[str],
        stderr: str,
        enable_coverage: bool,
        coverage_report: Optional[str],
        stdout: Optional[str] = None,
    ) -> List[ResultRecord]:
        text = (stderr or "") + ("\n" + stdout if stdout else "")

        coverage: Dict[str, str] = {}
        if enable_coverage and coverage_report:
            coverage = parse_llvm_cov_show(coverage_report, project_root)
            logger.debug(f"Parsed coverage for {len(coverage)} files")

        failures = self._collect_failures(text)
        records: "OrderedDict[str, ResultRecord]" = OrderedDict()
        for match in _TEST_CASE_PATTERN.finditer(text):
            name = normalize_test_name(match.group("name"))
            if name in records:
                continue
            records[name] = ResultRecord(
                name=name,
                result=_STATUS[match.group("status")],
                duration=float(match.group("duration")),
                user_data="\n".join(failures.get(name, [])) or None,
                coverage=dict(coverage),
            )

        if not records:
            command = "xcodebuild " + " ".join(xcode_args) + " test"
            logger.warning("No test case results found in xcodebuild output")
            return [
                ResultRecord(
                    name=ENGINE_RECORD_NAME,
                    result=ResultKind.UNSOUND,
                    user_data=f"No test results were found in the output of: {command}",
                    coverage=dict(coverage),
                )
            ]
        return list(records.values())

    @staticmethod
    def _collect_failures(text: str) -> Dict[str, List[str]]:
        failures: Dict[str, List[str]] = {}
        for match in _FAILURE_PATTERN.finditer(text):
            name = normalize_test_name(match.group("name"))
            failures.setdefault(name, []).append(
                f"{match.group('location')}: {match.group('message').strip()}"
            )
        return failures


def normalize_test_name(raw: str) -> str:
    """`-[Suite test]` and `Suite.test()` both become `Suite::test`."""
    raw = raw.strip()
    if raw.startswith("-[") and raw.endswith("]"):
        suite, _, test = raw[2:-1].partition(" ")
        return f"{suite}::{test}" if test else suite
    if raw.endswith("()"):
        suite, _, test = raw[:-2].rpartition(".")
        return f"{suite}::{test}" if suite else test
    return raw
