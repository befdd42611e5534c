"""Data models for the xcode test engine."""

import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple


# xcodebuild exits with 65 when the build succeeded but tests failed.
TESTS_FAILED_EXIT_CODE = 65

# Name of records that stand in for a whole run
ENGINE_RECORD_NAME = "Xcode test engine"


class CoverageMode(Enum):
    """Coverage preference supplied by the calling framework."""
    OFF = "off"        # --no-coverage
    UNSET = "unset"    # no coverage flag given
    ON = "on"          # --coverage

    @classmethod
    def from_flag(cls, flag: Optional[bool]) -> "CoverageMode":
        if flag is None:
            return cls.UNSET
        return cls.ON if flag else cls.OFF


class SelectionPolicy(Enum):
    """How a single artifact is picked when a scan finds several."""
    LEXICOGRAPHIC = "lexicographic"
    NEWEST = "newest"
    FIRST = "first"  # filesystem scan order, not portable


class OutcomeKind(Enum):
    """Classification of a build+test run."""
    SUCCESS = "success"
    TESTS_FAILED = "tests_failed"
    BROKEN = "broken"


class ResultKind(Enum):
    """Result of a single test record."""
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"
    BROKEN = "broken"
    UNSOUND = "unsound"


@dataclass(frozen=True)
class EngineConfig:
    """Settings resolved once per run and threaded through every stage."""
    project_root: Path
    build_settings: Mapping[str, str]
    coverage_settings: Optional[Mapping[str, str]] = None
    pre_build_command: Optional[str] = None
    coverage_requested: CoverageMode = CoverageMode.UNSET
    xcodebuild_binary: Tuple[str, ...] = ("xcodebuild",)
    coverage_binary: Tuple[str, ...] = ("xcrun", "llvm-cov")
    timeout: Optional[float] = None
    artifact_selection: SelectionPolicy = SelectionPolicy.LEXICOGRAPHIC
    coverage_acceptable_exit_codes: Tuple[int, ...] = (1,)
    artifacts_dir: Optional[Path] = None

    @property
    def coverage_enabled(self) -> bool:
        return self.coverage_requested is not CoverageMode.OFF and self.coverage_settings is not None

    @property
    def product(self) -> Optional[str]:
        if self.coverage_settings is None:
            return None
        return self.coverage_settings.get("product")


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


@dataclass(frozen=True)
class Invocation:
    """Ordered xcodebuild arguments built from the build settings."""
    settings: Tuple[Tuple[str, str], ...]

    @property
    def tokens(self) -> List[str]:
        """Arguments in their `-key "value"` command line form.

        Backslashes and double quotes inside the value are escaped so the
        rendered line parses back to the same settings.
        """
        return [f'-{key} "{_quote(value)}"' for key, value in self.settings]

    @property
    def argv(self) -> List[str]:
        """Arguments as an unquoted argument vector for subprocess."""
        argv: List[str] = []
        for key, value in self.settings:
            argv.extend([f"-{key}", value])
        return argv

    def render(self) -> str:
        return " ".join(self.tokens)

    @staticmethod
    def parse(rendered: str) -> Dict[str, str]:
        """Recover the `-key value` pairs from a rendered invocation."""
        parts = shlex.split(rendered)
        if len(parts) % 2:
            raise ValueError(f"Unpaired argument in invocation: {rendered!r}")
        return {parts[i][1:]: parts[i + 1] for i in range(0, len(parts), 2)}


@dataclass(frozen=True)
class BuildOutcome:
    """Captured result of the build+test invocation."""
    exit_code: int
    stdout: str
    stderr: str

    @property
    def kind(self) -> OutcomeKind:
        if self.exit_code == 0:
            return OutcomeKind.SUCCESS
        if self.exit_code == TESTS_FAILED_EXIT_CODE:
            return OutcomeKind.TESTS_FAILED
        return OutcomeKind.BROKEN


@dataclass(frozen=True)
class CoverageArtifacts:
    """Coverage inputs discovered under the derived data directory."""
    obj_root: Path
    profdata_path: Optional[Path] = None
    product_path: Optional[Path] = None


@dataclass
class ResultRecord:
    """A normalized test result handed back to the calling framework."""
    name: str
    result: ResultKind
    duration: Optional[float] = None
    user_data: Optional[str] = None
    coverage: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "result": self.result.value,
            "duration": self.duration,
            "userData": self.user_data,
            "coverage": dict(self.coverage),
        }
