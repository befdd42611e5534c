"""Command builder for invoking xcodebuild and llvm-cov with robust env handling."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from xcode_test_engine.models.data_models import EngineConfig, Invocation

WORKSPACE_KEY = "workspace"


@dataclass
class CommandSpec:
    argv: List[str]
    cwd: Path
    env: Dict[str, str]
    acceptable_returncodes: Tuple[int, ...] = field(default=(0,))

    @property
    def display(self) -> str:
        return " ".join(self.argv)


def build_invocation(settings: Mapping[str, str], project_root: Union[str, Path]) -> Invocation:
    """Turn build settings into ordered xcodebuild arguments.

    Settings keep their insertion order. The `workspace` value is rewritten
    to `<project_root>/<value>`; nothing else is touched or validated.
    """
    pairs = []
    for key, value in settings.items():
        if key == WORKSPACE_KEY:
            value = f"{project_root}/{value}"
        pairs.append((key, value))
    return Invocation(settings=tuple(pairs))


def build_environment(extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Inherit the current environment and apply overrides."""
    env: Dict[str, str] = dict(os.environ)
    for k, v in (extra or {}).items():
        env[str(k)] = str(v)
    return env


def build_xcodebuild_command(
    invocation: Invocation,
    *,
    config: EngineConfig,
    show_build_settings: bool = False,
    acceptable_returncodes: Sequence[int] = (0,),
) -> CommandSpec:
    """Construct `xcodebuild <args> [-showBuildSettings] test`.

    Output is forced unbuffered through NSUnbufferedIO so test lines are not
    lost when xcodebuild is killed mid-run.
    """
    argv = [*config.xcodebuild_binary, *invocation.argv]
    if show_build_settings:
        argv.append("-showBuildSettings")
    argv.append("test")
    return CommandSpec(
        argv=argv,
        cwd=config.project_root,
        env=build_environment({"NSUnbufferedIO": "YES"}),
        acceptable_returncodes=tuple(acceptable_returncodes),
    )


def build_llvm_cov_command(
    profdata_path: str,
    product_path: str,
    *,
    config: EngineConfig,
) -> CommandSpec:
    """Construct `llvm-cov show -use-color=false -instr-profile <profdata> <product>`."""
    argv = [
        *config.coverage_binary,
        "show",
        "-use-color=false",
        "-instr-profile",
        profdata_path,
        product_path,
    ]
    return CommandSpec(
        argv=argv,
        cwd=config.project_root,
        env=build_environment(),
        acceptable_returncodes=(0, *config.coverage_acceptable_exit_codes),
    )


def build_shell_command(command: str, *, cwd: Path) -> CommandSpec:
    """Wrap a free-form shell command such as the pre-build step."""
    return CommandSpec(argv=["/bin/sh", "-c", command], cwd=cwd, env=build_environment())
