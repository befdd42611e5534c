"""Main engine orchestrator."""

from pathlib import Path
from typing import List, Optional, Sequence

from xcode_test_engine.build.command_builder import build_invocation
from xcode_test_engine.config import CONFIG_FILE, ConfigResolver
from xcode_test_engine.models.data_models import CoverageMode, EngineConfig, OutcomeKind, ResultRecord
from xcode_test_engine.parsing.assembler import ResultAssembler
from xcode_test_engine.parsing.result_parser import ResultParser
from xcode_test_engine.services import BuildService, CoverageService
from xcode_test_engine.utils.user_feedback import UserFeedback


class XcodeTestEngine:
    """Builds, runs, and interprets xcodebuild unit test and coverage results.

    Stages run strictly in order: resolve configuration, build arguments,
    build and test, extract coverage (only after a clean run with coverage
    enabled), and assemble results. Configuration and pre-build errors are
    raised before any build cost is incurred; a broken build becomes a single
    BROKEN record.
    """

    def __init__(
        self,
        project_root: Path,
        coverage_requested: CoverageMode = CoverageMode.UNSET,
        run_all_tests: bool = True,
        paths: Sequence[str] = (),
        config_file: str = CONFIG_FILE,
        parser: Optional[ResultParser] = None,
        feedback: Optional[UserFeedback] = None,
    ):
        self.project_root = Path(project_root)
        self.coverage_requested = coverage_requested
        self.run_all_tests = run_all_tests
        self.paths = list(paths)
        self.config_file = config_file
        self.assembler = ResultAssembler(parser)
        self.feedback = feedback

    def resolve_config(self) -> EngineConfig:
        return ConfigResolver(self.config_file, self.coverage_requested).resolve(self.project_root)

    def run(self) -> List[ResultRecord]:
        config = self.resolve_config()
        invocation = build_invocation(config.build_settings, config.project_root)

        build_service = BuildService(config, self.feedback)
        outcome = build_service.run(
            invocation,
            config.pre_build_command,
            config.project_root,
            run_selected_only=not self.run_all_tests,
            selected_paths=self.paths,
        )
        if outcome is None:
            return []

        if outcome.kind is OutcomeKind.BROKEN:
            return self.assembler.broken_build(outcome.stderr)

        coverage_report = None
        if outcome.kind is OutcomeKind.SUCCESS and config.coverage_enabled:
            coverage_service = CoverageService(config, self.feedback)
            coverage_report = coverage_service.extract(
                invocation,
                config.coverage_settings,
                config.project_root,
                config.project_root,
            )

        return self.assembler.assemble(
            config.project_root,
            invocation,
            outcome.stderr,
            config.coverage_enabled,
            coverage_report,
        )
