import pytest
from unittest.mock import patch
from pathlib import Path

from xcode_test_engine.build.runner import RunResult
from xcode_test_engine.exceptions import PreBuildError
from xcode_test_engine.models.data_models import EngineConfig, Invocation, OutcomeKind
from xcode_test_engine.services.build_service import BuildService
from xcode_test_engine.utils.user_feedback import UserFeedback


def run_result(returncode=0, stdout="", stderr=""):
    return RunResult(returncode=returncode, stdout=stdout, stderr=stderr, duration=0.1, cmd=[], cwd="")


class TestBuildService:
    """Test suite for BuildService."""

    @pytest.fixture
    def config(self, tmp_path):
        return EngineConfig(project_root=tmp_path, build_settings={"scheme": "App"}, timeout=30.0)

    @pytest.fixture
    def service(self, config):
        return BuildService(config, UserFeedback(quiet=True))

    @pytest.fixture
    def invocation(self):
        return Invocation(settings=(("scheme", "App"), ("enableCodeCoverage", "NO")))

    def test_selected_only_without_paths_runs_nothing(self, service, invocation, tmp_path):
        with patch('xcode_test_engine.services.build_service.run_command') as mock_run:
            outcome = service.run(invocation, "make deps", tmp_path, run_selected_only=True, selected_paths=[])

        assert outcome is None
        mock_run.assert_not_called()

    def test_selected_only_with_paths_runs_build(self, service, invocation, tmp_path):
        with patch('xcode_test_engine.services.build_service.run_command', return_value=run_result()) as mock_run:
            outcome = service.run(invocation, None, tmp_path, run_selected_only=True, selected_paths=["App/View.swift"])

        assert outcome.kind is OutcomeKind.SUCCESS
        mock_run.assert_called_once()

    def test_success_outcome(self, service, invocation, tmp_path):
        with patch('xcode_test_engine.services.build_service.run_command',
                   return_value=run_result(0, "out", "Test Case ...")) as mock_run:
            outcome = service.run(invocation, None, tmp_path)

        spec = mock_run.call_args[0][0]
        assert spec.argv == ["xcodebuild", "-scheme", "App", "-enableCodeCoverage", "NO", "test"]
        assert spec.cwd == tmp_path
        assert spec.env["NSUnbufferedIO"] == "YES"
        assert mock_run.call_args[1]["timeout"] == 30.0
        assert outcome.exit_code == 0
        assert outcome.stdout == "out"
        assert outcome.stderr == "Test Case ..."

    def test_tests_failed_outcome(self, service, invocation, tmp_path):
        with patch('xcode_test_engine.services.build_service.run_command', return_value=run_result(65)):
            outcome = service.run(invocation, None, tmp_path)

        assert outcome.kind is OutcomeKind.TESTS_FAILED

    def test_broken_outcome_keeps_stderr(self, service, invocation, tmp_path):
        with patch('xcode_test_engine.services.build_service.run_command',
                   return_value=run_result(70, stderr="xcodebuild: error: Unable to find a destination")):
            outcome = service.run(invocation, None, tmp_path)

        assert outcome.kind is OutcomeKind.BROKEN
        assert outcome.stderr == "xcodebuild: error: Unable to find a destination"

    def test_pre_build_runs_before_build(self, service, invocation, tmp_path):
        calls = []

        def fake_run(spec, **kwargs):
            calls.append(spec.argv)
            return run_result()

        with patch('xcode_test_engine.services.build_service.run_command', side_effect=fake_run):
            service.run(invocation, "pod install", tmp_path)

        assert calls[0] == ["/bin/sh", "-c", "pod install"]
        assert calls[1][0] == "xcodebuild"

    def test_pre_build_failure_aborts(self, service, invocation, tmp_path):
        with patch('xcode_test_engine.services.build_service.run_command',
                   return_value=run_result(2, stderr="pod: command not found")) as mock_run:
            with pytest.raises(PreBuildError) as exc:
                service.run(invocation, "pod install", tmp_path)

        assert exc.value.returncode == 2
        assert exc.value.stderr == "pod: command not found"
        assert "pod: command not found" in exc.value.message
        mock_run.assert_called_once()

    def test_artifacts_dir_is_labelled(self, tmp_path, invocation):
        config = EngineConfig(project_root=tmp_path, build_settings={"scheme": "App"}, artifacts_dir=tmp_path / "logs")
        service = BuildService(config, UserFeedback(quiet=True))

        with patch('xcode_test_engine.services.build_service.run_command', return_value=run_result()) as mock_run:
            service.run(invocation, None, tmp_path)

        assert mock_run.call_args[1]["artifacts_dir"] == Path(tmp_path / "logs" / "build")
