import pytest

from xcode_test_engine.exceptions import (
    CommandExecutionError,
    ConfigMalformedError,
    ConfigMissingError,
    ConfigurationError,
    CoverageError,
    CoverageSettingNotFoundError,
    CoverageToolError,
    PreBuildError,
    SectionMissingError,
    XcodeTestEngineError,
)


class TestXcodeTestEngineError:
    """Test XcodeTestEngineError class."""

    def test_init_with_message_only(self):
        # Arrange
        message = "Something went wrong"

        # Act
        error = XcodeTestEngineError(message)

        # Assert
        assert error.message == message
        assert error.suggestion is None
        assert str(error) == message

    def test_init_with_message_and_suggestion(self):
        error = XcodeTestEngineError("Something went wrong", "Try again")

        assert str(error) == "Something went wrong\n\nSuggestion: Try again"


class TestHierarchy:
    """Errors are grouped so callers can tell configuration problems apart."""

    @pytest.mark.parametrize("error_class", [ConfigMissingError, ConfigMalformedError, SectionMissingError])
    def test_configuration_errors(self, error_class):
        assert issubclass(error_class, ConfigurationError)
        assert issubclass(error_class, XcodeTestEngineError)

    @pytest.mark.parametrize("error_class", [CoverageSettingNotFoundError, CoverageToolError])
    def test_coverage_errors(self, error_class):
        assert issubclass(error_class, CoverageError)
        assert not issubclass(error_class, ConfigurationError)

    def test_runtime_errors_are_not_configuration_errors(self):
        assert not issubclass(PreBuildError, ConfigurationError)
        assert not issubclass(CommandExecutionError, ConfigurationError)


class TestErrorAttributes:
    """Test extra attributes carried by specific errors."""

    def test_config_missing_error_keeps_path(self):
        error = ConfigMissingError("missing", config_path="/repo/.arcconfig", suggestion="create it")

        assert error.config_path == "/repo/.arcconfig"
        assert error.suggestion == "create it"

    def test_pre_build_error_keeps_status_and_stderr(self):
        error = PreBuildError("pre-build failed", returncode=2, stderr="oops")

        assert error.returncode == 2
        assert error.stderr == "oops"

    def test_coverage_tool_error_keeps_status_and_stderr(self):
        error = CoverageToolError("llvm-cov failed", returncode=1, stderr="no profile")

        assert error.returncode == 1
        assert error.stderr == "no profile"

    def test_command_execution_error_keeps_command(self):
        error = CommandExecutionError("not found", command="xcodebuild test")

        assert error.command == "xcodebuild test"
