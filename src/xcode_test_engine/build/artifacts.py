"""Locate coverage artifacts under the xcodebuild derived data directory."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from xcode_test_engine.exceptions import CoverageSettingNotFoundError
from xcode_test_engine.models.data_models import CoverageArtifacts, SelectionPolicy

logger = logging.getLogger(__name__)

PROFDATA_NAME = "Coverage.profdata"
OBJROOT_PATTERN = re.compile(r"^\s*OBJROOT = (.+)$", re.MULTILINE)


def parse_obj_root(settings_output: str) -> Path:
    """Extract OBJROOT from `xcodebuild -showBuildSettings` output.

    Multi-scheme projects may print several values; the first one wins.
    """
    matches = [m.strip() for m in OBJROOT_PATTERN.findall(settings_output)]
    if not matches:
        raise CoverageSettingNotFoundError(
            "Unable to find OBJROOT configuration.",
            suggestion="Run 'xcodebuild -showBuildSettings test' with the configured build settings and check its output."
        )
    if len(set(matches)) > 1:
        logger.warning(f"Found {len(set(matches))} different OBJROOT values, using {matches[0]}")
    return Path(matches[0])


def scan(root: Path) -> Iterator[Path]:
    """Yield every directory and file below root in filesystem scan order."""
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        for name in dirnames:
            yield base / name
        for name in filenames:
            yield base / name


def find_profdata(root: Path) -> List[Path]:
    return [p for p in scan(root) if p.name == PROFDATA_NAME and p.is_file()]


def find_product(root: Path, product: str) -> List[Path]:
    """Entries whose path below root contains the product name."""
    return [p for p in scan(root) if product in p.relative_to(root).as_posix()]


def select(candidates: Sequence[Path], policy: SelectionPolicy) -> Optional[Path]:
    """Pick one candidate according to the configured policy."""
    if not candidates:
        return None
    if len(candidates) > 1:
        logger.debug(f"{len(candidates)} candidates, selecting by {policy.value}: {[str(c) for c in candidates]}")
    if policy is SelectionPolicy.FIRST:
        return candidates[0]
    if policy is SelectionPolicy.NEWEST:
        # Ties fall back to the lexicographically smallest path
        return sorted(candidates, key=lambda p: (-_mtime(p), str(p)))[0]
    return min(candidates, key=str)


def discover_artifacts(obj_root: Path, product: str, policy: SelectionPolicy) -> CoverageArtifacts:
    """Search the parent of OBJROOT for the profile data and product binary."""
    search_root = obj_root.parent
    logger.debug(f"Searching {search_root} for coverage artifacts")

    profdata = select(find_profdata(search_root), policy)
    if profdata is None:
        logger.warning(f"No {PROFDATA_NAME} found under {search_root}")

    product_path = select(find_product(search_root, product), policy)
    if product_path is None:
        logger.warning(f"No entry matching product '{product}' found under {search_root}")

    return CoverageArtifacts(obj_root=obj_root, profdata_path=profdata, product_path=product_path)


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0
