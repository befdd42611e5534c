"""Process runner for executing build and coverage commands with structured capture."""

from __future__ import annotations

import json
import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from xcode_test_engine.exceptions import CommandExecutionError
from .command_builder import CommandSpec

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    returncode: int
    stdout: str
    stderr: str
    duration: float
    cmd: List[str]
    cwd: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_command(
    spec: CommandSpec,
    *,
    timeout: Optional[float] = None,
    artifacts_dir: Optional[Path] = None,
) -> RunResult:
    """Run the provided command spec synchronously and capture structured results.

    - Captures stdout/stderr, return code, and duration
    - Writes artifacts (stdout.txt, stderr.txt, cmd.json) to artifacts_dir if provided
    - Raises CommandExecutionError when the executable cannot be started
    - Raises TimeoutError on timeout with partial outputs written to artifacts

    The return code is not interpreted here; callers compare it against
    spec.acceptable_returncodes.
    """
    start = time.time()
    logger.debug(f"Running: {spec.display} (cwd={spec.cwd})")
    try:
        completed = subprocess.run(
            spec.argv,
            cwd=spec.cwd,
            env=spec.env,
            text=True,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        if not Path(spec.cwd).is_dir():
            raise CommandExecutionError(
                f"Working directory does not exist: '{spec.cwd}'",
                command=spec.display,
                suggestion="Run from the working copy root or pass --directory."
            ) from e
        raise CommandExecutionError(
            f"Command not found: '{spec.argv[0]}'",
            command=spec.display,
            suggestion="Install the Xcode command line tools or configure the command path in .arcconfig."
        ) from e
    except subprocess.TimeoutExpired as e:
        duration = time.time() - start
        partial_result = RunResult(
            returncode=-1,
            stdout=_text(e.stdout),
            stderr=_text(e.stderr),
            duration=duration,
            cmd=list(spec.argv),
            cwd=str(spec.cwd),
        )
        if artifacts_dir is not None:
            _write_artifacts(partial_result, artifacts_dir)
        raise TimeoutError(
            f"Command timed out after {timeout}s: {spec.display}"
        ) from e

    duration = time.time() - start
    result = RunResult(
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        duration=duration,
        cmd=list(spec.argv),
        cwd=str(spec.cwd),
    )
    logger.debug(f"Exited {result.returncode} after {duration:.1f}s: {spec.display}")

    if artifacts_dir is not None:
        _write_artifacts(result, artifacts_dir)
    return result


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _write_artifacts(result: RunResult, base_dir: Path) -> None:
    try:
        base_dir.mkdir(parents=True, exist_ok=True)
        (base_dir / "stdout.txt").write_text(result.stdout)
        (base_dir / "stderr.txt").write_text(result.stderr)
        cmd_payload: Dict[str, object] = {
            "argv": result.cmd,
            "cwd": result.cwd,
            "returncode": result.returncode,
            "duration": result.duration,
        }
        (base_dir / "cmd.json").write_text(json.dumps(cmd_payload, indent=2))
    except OSError as e:
        # Best-effort artifacts
        logger.warning(f"Failed to write artifacts to {base_dir}: {e}")
