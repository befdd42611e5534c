"""Coverage extraction service."""

from pathlib import Path
from typing import Mapping, Optional

from xcode_test_engine.build.artifacts import discover_artifacts, parse_obj_root
from xcode_test_engine.build.command_builder import build_llvm_cov_command, build_xcodebuild_command
from xcode_test_engine.build.runner import run_command
from xcode_test_engine.exceptions import CoverageToolError
from xcode_test_engine.models.data_models import CoverageArtifacts, Invocation
from .base_service import BaseService


class CoverageService(BaseService):
    """Locates the coverage profile for a finished run and renders it with llvm-cov."""

    def extract(
        self,
        invocation: Invocation,
        coverage_settings: Mapping[str, str],
        project_root: Path,
        working_dir: Path,
    ) -> Optional[str]:
        """Return the llvm-cov report text, or None when llvm-cov produced none.

        Raises CoverageSettingNotFoundError when OBJROOT cannot be determined
        and CoverageToolError when llvm-cov fails with a status that is not
        tolerated.
        """
        with self.feedback.status_spinner("Extracting coverage"):
            artifacts = self.locate_artifacts(invocation, coverage_settings["product"], project_root)
            return self.render_report(artifacts, working_dir)

    def locate_artifacts(self, invocation: Invocation, product: str, project_root: Path) -> CoverageArtifacts:
        spec = build_xcodebuild_command(invocation, config=self.config, show_build_settings=True)
        spec.cwd = project_root
        self._notify("debug", f"Reading build settings: {spec.display}")
        result = run_command(spec, timeout=self.config.timeout, artifacts_dir=self._artifacts_dir("build-settings"))

        obj_root = parse_obj_root(result.stdout)
        self._notify("debug", f"OBJROOT = {obj_root}")
        artifacts = discover_artifacts(obj_root, product, self.config.artifact_selection)
        self._notify("debug", f"Profile data: {artifacts.profdata_path}, product: {artifacts.product_path}")
        return artifacts

    def render_report(self, artifacts: CoverageArtifacts, working_dir: Path) -> Optional[str]:
        # Missing artifacts are passed through as empty paths and left for llvm-cov to report
        profdata = str(artifacts.profdata_path) if artifacts.profdata_path else ""
        product = str(artifacts.product_path) if artifacts.product_path else ""
        spec = build_llvm_cov_command(profdata, product, config=self.config)
        spec.cwd = working_dir

        result = run_command(spec, timeout=self.config.timeout, artifacts_dir=self._artifacts_dir("llvm-cov"))
        if result.returncode == 0:
            self._notify("success", "Coverage report generated")
            return result.stdout or None

        if result.returncode in spec.acceptable_returncodes and result.stdout.strip():
            self._notify("warning", f"llvm-cov exited with status {result.returncode}, using its report anyway")
            return result.stdout

        raise CoverageToolError(
            f"llvm-cov exited with status {result.returncode}:\n{result.stderr}",
            returncode=result.returncode,
            stderr=result.stderr,
            suggestion="Check that the coverage 'product' setting matches the built test bundle or binary.",
        )
