"""Custom exception classes for the xcode test engine."""

from typing import Optional


class XcodeTestEngineError(Exception):
    """Base exception for all xcode test engine errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def __str__(self):
        result = self.message
        if self.suggestion:
            result += f"\n\nSuggestion: {self.suggestion}"
        return result


class ConfigurationError(XcodeTestEngineError):
    """Raised when there are configuration-related issues."""
    pass


class ConfigMissingError(ConfigurationError):
    """Raised when the project configuration file does not exist."""

    def __init__(self, message: str, config_path: Optional[str] = None, suggestion: Optional[str] = None):
        super().__init__(message, suggestion)
        self.config_path = config_path


class ConfigMalformedError(ConfigurationError):
    """Raised when the project configuration file cannot be parsed."""

    def __init__(self, message: str, config_path: Optional[str] = None, suggestion: Optional[str] = None):
        super().__init__(message, suggestion)
        self.config_path = config_path


class SectionMissingError(ConfigurationError):
    """Raised when the engine section or its build settings are absent."""
    pass


class CommandExecutionError(XcodeTestEngineError):
    """Raised when a subprocess cannot be started."""

    def __init__(self, message: str, command: Optional[str] = None, suggestion: Optional[str] = None):
        super().__init__(message, suggestion)
        self.command = command


class PreBuildError(XcodeTestEngineError):
    """Raised when the pre-build command exits with a non-zero status."""

    def __init__(self, message: str, returncode: int, stderr: str = "", suggestion: Optional[str] = None):
        super().__init__(message, suggestion)
        self.returncode = returncode
        self.stderr = stderr


class CoverageError(XcodeTestEngineError):
    """Raised when coverage extraction fails."""
    pass


class CoverageSettingNotFoundError(CoverageError):
    """Raised when OBJROOT is missing from the build settings output."""
    pass


class CoverageToolError(CoverageError):
    """Raised when llvm-cov exits with a status that is not tolerated."""

    def __init__(self, message: str, returncode: int, stderr: str = "", suggestion: Optional[str] = None):
        super().__init__(message, suggestion)
        self.returncode = returncode
        self.stderr = stderr
