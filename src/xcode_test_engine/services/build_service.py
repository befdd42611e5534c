"""Build and test execution service."""

from pathlib import Path
from typing import Optional, Sequence

from xcode_test_engine.build.command_builder import build_shell_command, build_xcodebuild_command
from xcode_test_engine.build.errors import parse_errors
from xcode_test_engine.build.runner import run_command
from xcode_test_engine.exceptions import PreBuildError
from xcode_test_engine.models.data_models import BuildOutcome, Invocation, OutcomeKind
from .base_service import BaseService


class BuildService(BaseService):
    """Runs the optional pre-build step and the xcodebuild test invocation."""

    def run(
        self,
        invocation: Invocation,
        pre_build_command: Optional[str],
        working_dir: Path,
        run_selected_only: bool = False,
        selected_paths: Sequence[str] = (),
    ) -> Optional[BuildOutcome]:
        """Build and run the tests.

        Returns None without running anything when only selected paths
        should be tested and none were given. Raises PreBuildError when the
        pre-build command fails.
        """
        if run_selected_only and not selected_paths:
            self._notify("info", "No paths selected, skipping build")
            return None

        if pre_build_command:
            self.run_pre_build(pre_build_command, working_dir)

        spec = build_xcodebuild_command(invocation, config=self.config)
        spec.cwd = working_dir
        self._notify("info", "Building and running tests")
        self._notify("debug", f"Command: {spec.display}")
        with self.feedback.status_spinner("Running xcodebuild test"):
            result = run_command(spec, timeout=self.config.timeout, artifacts_dir=self._artifacts_dir("build"))

        outcome = BuildOutcome(exit_code=result.returncode, stdout=result.stdout, stderr=result.stderr)
        if outcome.kind is OutcomeKind.SUCCESS:
            self._notify("success", f"Build and tests succeeded in {result.duration:.1f}s")
        elif outcome.kind is OutcomeKind.TESTS_FAILED:
            self._notify("warning", "Build succeeded but some tests failed")
        else:
            report = parse_errors(outcome)
            self._notify(
                "error",
                f"xcodebuild exited with status {outcome.exit_code}: {'; '.join(report.reasons[:3])}",
                report.guidance[0] if report.guidance else None,
            )
        return outcome

    def run_pre_build(self, command: str, working_dir: Path) -> None:
        """Run the pre-build command; any non-zero exit aborts the run."""
        spec = build_shell_command(command, cwd=working_dir)
        self._notify("info", f"Running pre-build command: {command}")
        result = run_command(spec, timeout=self.config.timeout, artifacts_dir=self._artifacts_dir("pre-build"))
        if result.returncode != 0:
            raise PreBuildError(
                f"Pre-build command '{command}' failed with status {result.returncode}:\n{result.stderr}",
                returncode=result.returncode,
                stderr=result.stderr,
                suggestion="Run the 'pre-build' command from .arcconfig by hand in the project root.",
            )
