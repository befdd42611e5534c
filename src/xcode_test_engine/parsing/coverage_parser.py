"""Parse `llvm-cov show` text into per-file line coverage strings."""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)

# "   12|      3|    code" ; count column is blank for non-executable lines
_LINE_PATTERN = re.compile(r"^\s*(?P<line>\d+)\|\s*(?P<count>[0-9.]+[kMGTPE]?)?\s*\|")

NOT_EXECUTABLE = "N"
COVERED = "C"
UNCOVERED = "U"


def parse_llvm_cov_show(report: str, project_root: Union[str, Path]) -> Dict[str, str]:
    """Convert llvm-cov show output to {relative path: "NCCU..."}.

    Each character describes one source line. Files outside project_root
    (system headers, dependencies) are dropped.
    """
    root = Path(project_root)
    coverage: Dict[str, str] = {}
    current: Optional[str] = None
    lines: Dict[int, str] = {}
    orphaned = 0

    def flush():
        if current is None or not lines:
            return
        relative = _relative(current, root)
        if relative is None:
            logger.debug(f"Ignoring coverage for file outside project: {current}")
            return
        coverage[relative] = _render(lines)

    for raw in report.splitlines():
        if not raw.strip():
            continue
        if _is_file_header(raw):
            flush()
            current = raw[:-1]
            lines = {}
            continue

        match = _LINE_PATTERN.match(raw)
        if not match:
            continue
        if current is None:
            orphaned += 1
            continue
        number = int(match.group("line"))
        count = match.group("count")
        if not count:
            state = NOT_EXECUTABLE
        elif _is_zero(count):
            state = UNCOVERED
        else:
            state = COVERED
        # Instantiations can repeat a line; any execution marks it covered
        if lines.get(number) != COVERED:
            lines[number] = state

    flush()
    if orphaned:
        logger.warning(
            f"Ignored {orphaned} coverage lines that appear before any file header; "
            "the report does not name the source file they belong to"
        )
    return coverage


def _is_file_header(raw: str) -> bool:
    return raw.endswith(":") and not raw[0].isspace() and "|" not in raw


def _is_zero(count: str) -> bool:
    digits = count.rstrip("kMGTPE")
    try:
        return float(digits) == 0
    except ValueError:
        return False


def _relative(path: str, root: Path) -> Optional[str]:
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return None


def _render(lines: Dict[int, str]) -> str:
    chars: List[str] = [NOT_EXECUTABLE] * max(lines)
    for number, state in lines.items():
        chars[number - 1] = state
    return "".join(chars)
