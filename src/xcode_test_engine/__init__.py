"""Build, run, and interpret xcodebuild unit test and coverage results."""

from xcode_test_engine.core import XcodeTestEngine
from xcode_test_engine.config import ConfigResolver
from xcode_test_engine.models import CoverageMode, ResultKind, ResultRecord

__version__ = "0.1.0"

__all__ = [
    "XcodeTestEngine",
    "ConfigResolver",
    "CoverageMode",
    "ResultKind",
    "ResultRecord",
]
