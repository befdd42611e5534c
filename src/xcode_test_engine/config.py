"""Configuration management for the xcode test engine."""

import json
import logging
import shlex
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from xcode_test_engine.exceptions import (
    ConfigMalformedError,
    ConfigMissingError,
    SectionMissingError,
)
from xcode_test_engine.models.data_models import CoverageMode, EngineConfig, SelectionPolicy

logger = logging.getLogger(__name__)

CONFIG_FILE = ".arcconfig"
SECTION_KEY = "unit.xcode"


class Config:
    """Project configuration read from the working copy."""

    DEFAULT_ENGINE_SETTINGS = {
        'xcodebuild': 'xcodebuild',        # Build tool command
        'llvm-cov': 'xcrun llvm-cov',      # Coverage tool command
        'timeout': None,                   # Per-subprocess timeout in seconds
        'artifacts': None,                 # Directory for stdout/stderr/cmd.json captures
    }

    DEFAULT_COVERAGE_SETTINGS = {
        'selection': 'lexicographic',      # 'lexicographic' | 'newest' | 'first'
        'acceptable-exit-codes': [1],      # llvm-cov exit codes tolerated when a report was emitted
    }

    def __init__(self, project_root: Union[str, Path], config_file: str = CONFIG_FILE):
        self.project_root = Path(project_root)
        path = Path(config_file)
        self.config_path = path if path.is_absolute() else self.project_root / path
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from the project file.

        The file is read as JSON first (the `.arcconfig` format) and as YAML
        otherwise. Raises ConfigMissingError or ConfigMalformedError.
        """
        if not self.config_path.exists():
            raise ConfigMissingError(
                f"Unable to find '{self.config_path.name}' file to configure the xcode test engine.",
                config_path=str(self.config_path),
                suggestion=f"Create a '{self.config_path.name}' file in the root directory of the working copy."
            )

        try:
            text = self.config_path.read_text(encoding='utf-8')
        except (UnicodeDecodeError, OSError) as e:
            raise ConfigMalformedError(
                f"Unable to read '{self.config_path}' as UTF-8 text: {e}",
                config_path=str(self.config_path)
            ) from e

        try:
            data = json.loads(text)
        except ValueError:
            try:
                data = yaml.safe_load(text)
            except yaml.YAMLError as e:
                raise ConfigMalformedError(
                    f"Expected '{self.config_path.name}' to be a valid JSON or YAML file, "
                    f"but failed to decode '{self.config_path}': {e}",
                    config_path=str(self.config_path)
                ) from e

        if not isinstance(data, dict):
            raise ConfigMalformedError(
                f"Expected '{self.config_path}' to contain a mapping at the top level.",
                config_path=str(self.config_path)
            )
        logger.debug(f"Loaded configuration from {self.config_path}")
        return data

    def get(self, key: str, default=None):
        """Get configuration value using dot notation.

        A literal dotted key (as `.arcconfig` stores `unit.xcode`) takes
        precedence over nested lookup.
        """
        if key in self.config:
            return self.config[key]

        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_section(self, key: str = SECTION_KEY) -> Dict[str, Any]:
        """Return the engine section merged over the engine defaults."""
        section = self.get(key)
        if not isinstance(section, dict):
            raise SectionMissingError(
                f"Unable to find '{key}' keys in {self.config_path.name}.",
                suggestion=f"Add a '{key}' section with a 'build' mapping of xcodebuild settings."
            )
        merged = self._deep_merge(self.DEFAULT_ENGINE_SETTINGS, section)
        if isinstance(section.get('coverage'), dict):
            merged['coverage'] = self._deep_merge(self.DEFAULT_COVERAGE_SETTINGS, section['coverage'])
        return merged

    def _deep_merge(self, default: Dict, user: Dict) -> Dict:
        """Deeply merge user config with defaults."""
        result = default.copy()

        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


class ConfigResolver:
    """Turn the project configuration into an immutable EngineConfig."""

    def __init__(self, config_file: str = CONFIG_FILE, coverage_requested: CoverageMode = CoverageMode.UNSET):
        self.config_file = config_file
        self.coverage_requested = coverage_requested

    def resolve(self, project_root: Union[str, Path]) -> EngineConfig:
        project_root = Path(project_root)
        config = Config(project_root, self.config_file)
        section = config.get_section()

        build = section.get('build')
        if not isinstance(build, dict) or not build:
            raise SectionMissingError(
                f"Expected a non-empty 'build' mapping in the '{SECTION_KEY}' section.",
                suggestion="Add xcodebuild settings such as 'workspace' and 'scheme' under 'build'."
            )

        coverage = section.get('coverage')
        if coverage is not None:
            if not isinstance(coverage, dict) or not coverage.get('product'):
                raise ConfigMalformedError(
                    f"The '{SECTION_KEY}.coverage' section must be a mapping with a 'product' key.",
                    config_path=str(config.config_path)
                )

        pre_build = section.get('pre-build')
        if pre_build is not None and not isinstance(pre_build, str):
            raise ConfigMalformedError(
                f"Expected '{SECTION_KEY}.pre-build' to be a command string.",
                config_path=str(config.config_path)
            )

        coverage_enabled = self.coverage_requested is not CoverageMode.OFF and coverage is not None
        build_settings = {str(k): str(v) for k, v in build.items()}
        build_settings['enableCodeCoverage'] = 'YES' if coverage_enabled else 'NO'

        coverage_settings = None
        selection = SelectionPolicy.LEXICOGRAPHIC
        acceptable: Tuple[int, ...] = ()
        if coverage is not None:
            coverage_settings = {
                str(k): v for k, v in coverage.items()
                if k not in ('selection', 'acceptable-exit-codes')
            }
            coverage_settings['product'] = str(coverage['product'])
            selection = self._selection_policy(coverage.get('selection'), config)
            acceptable = self._exit_codes(coverage.get('acceptable-exit-codes'), config)

        artifacts = section.get('artifacts')
        engine_config = EngineConfig(
            project_root=project_root,
            build_settings=MappingProxyType(build_settings),
            coverage_settings=MappingProxyType(coverage_settings) if coverage_settings is not None else None,
            pre_build_command=pre_build or None,
            coverage_requested=self.coverage_requested,
            xcodebuild_binary=self._command(section.get('xcodebuild'), 'xcodebuild', config),
            coverage_binary=self._command(section.get('llvm-cov'), 'llvm-cov', config),
            timeout=self._timeout(section.get('timeout'), config),
            artifact_selection=selection,
            coverage_acceptable_exit_codes=acceptable,
            artifacts_dir=project_root / artifacts if artifacts else None,
        )
        logger.debug(
            f"Resolved engine config: {len(build_settings)} build settings, "
            f"coverage {'enabled' if engine_config.coverage_enabled else 'disabled'}"
        )
        return engine_config

    @staticmethod
    def _command(value: Any, key: str, config: Config) -> Tuple[str, ...]:
        if isinstance(value, str) and value.strip():
            return tuple(shlex.split(value))
        if isinstance(value, list) and value and all(isinstance(v, str) for v in value):
            return tuple(value)
        raise ConfigMalformedError(
            f"Expected '{SECTION_KEY}.{key}' to be a command string or list of strings.",
            config_path=str(config.config_path)
        )

    @staticmethod
    def _timeout(value: Any, config: Config) -> Optional[float]:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigMalformedError(
                f"Expected '{SECTION_KEY}.timeout' to be a positive number of seconds.",
                config_path=str(config.config_path)
            )
        return float(value)

    @staticmethod
    def _selection_policy(value: Any, config: Config) -> SelectionPolicy:
        try:
            return SelectionPolicy(value)
        except ValueError as e:
            choices = ", ".join(p.value for p in SelectionPolicy)
            raise ConfigMalformedError(
                f"Unknown coverage selection policy {value!r}; expected one of: {choices}.",
                config_path=str(config.config_path)
            ) from e

    @staticmethod
    def _exit_codes(value: Any, config: Config) -> Tuple[int, ...]:
        if not isinstance(value, list) or not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
            raise ConfigMalformedError(
                f"Expected '{SECTION_KEY}.coverage.acceptable-exit-codes' to be a list of integers.",
                config_path=str(config.config_path)
            )
        return tuple(value)
