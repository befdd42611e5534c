"""Adapt pipeline outputs to the result parser."""

from pathlib import Path
from typing import List, Optional

from xcode_test_engine.models.data_models import ENGINE_RECORD_NAME, Invocation, ResultKind, ResultRecord
from .result_parser import ResultParser, XcodeTestResultParser


class ResultAssembler:
    """Hands the run's outputs to a ResultParser without interpreting them."""

    def __init__(self, parser: Optional[ResultParser] = None):
        self.parser = parser or XcodeTestResultParser()

    def assemble(
        self,
        project_root: Path,
        invocation: Invocation,
        stderr: str,
        coverage_enabled: bool,
        coverage_report: Optional[str],
    ) -> List[ResultRecord]:
        # stdout is withheld; xcodebuild reports test cases on stderr
        return list(
            self.parser.parse(
                project_root=project_root,
                xcode_args=invocation.tokens,
                stderr=stderr,
                enable_coverage=coverage_enabled,
                coverage_report=coverage_report,
                stdout=None,
            )
        )

    @staticmethod
    def broken_build(stderr: str) -> List[ResultRecord]:
        """The single synthetic record standing in for a broken build."""
        return [ResultRecord(name=ENGINE_RECORD_NAME, result=ResultKind.BROKEN, user_data=stderr)]
