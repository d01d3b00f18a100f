"""Directory shape, file size and naming convention statistics."""

from __future__ import annotations

import os
import re
from pathlib import PurePosixPath
from typing import Dict, Iterable, List, Pattern, Sequence, Tuple

from ..logging import get_logger
from ..models import DirectoryStats, SizeStats

SNAKE_CASE = "snake_case"
CAMEL_CASE = "camelCase"
PASCAL_CASE = "PascalCase"
MIXED = "mixed"

# First match wins; single lowercase words fall through to MIXED.
NAMING_RULES: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)+$"), SNAKE_CASE),
    (re.compile(r"^[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)+$"), CAMEL_CASE),
    (re.compile(r"^[A-Z][a-z0-9]+(?:[A-Z][a-z0-9]*)+$"), PASCAL_CASE),
)

logger = get_logger("layout")


def _normalise(path: str) -> str:
    return path.replace("\\", "/")


def directory_of(path: str) -> str:
    normalised = _normalise(path)
    if "/" not in normalised:
        return ""
    return normalised.rsplit("/", 1)[0]


def path_depth(path: str) -> int:
    """Number of separators in the directory portion of ``path``."""
    return directory_of(path).count("/")


def classify_naming(path: str) -> str:
    stem = PurePosixPath(_normalise(path)).stem
    for pattern, label in NAMING_RULES:
        if pattern.match(stem):
            return label
    return MIXED


def size_distribution(sizes: Iterable[int]) -> SizeStats:
    """Summarise byte sizes.

    The median of an even-length list is the element at ``n // 2``; the two
    middle values are not averaged.
    """
    ordered = sorted(sizes)
    if not ordered:
        return SizeStats()
    total = sum(ordered)
    return SizeStats(
        total=total,
        average=total // max(len(ordered), 1),
        median=ordered[len(ordered) // 2],
        minimum=ordered[0],
        maximum=ordered[-1],
    )


def _file_sizes(paths: Sequence[str]) -> List[int]:
    sizes: List[int] = []
    for path in paths:
        try:
            sizes.append(os.path.getsize(path))
        except OSError as exc:
            logger.debug("Unable to stat %s: %s", path, exc)
    return sizes


def analyze_directories(paths: Sequence[str]) -> DirectoryStats:
    """Derive directory, size and naming statistics from the path list alone."""
    directories: Dict[str, int] = {}
    max_depth = 0
    naming: Dict[str, int] = {SNAKE_CASE: 0, CAMEL_CASE: 0, PASCAL_CASE: 0, MIXED: 0}

    for path in paths:
        directory = directory_of(path)
        directories[directory] = directories.get(directory, 0) + 1
        max_depth = max(max_depth, directory.count("/"))
        naming[classify_naming(path)] += 1

    return DirectoryStats(
        directories=directories,
        max_depth=max_depth,
        size=size_distribution(_file_sizes(paths)),
        naming=naming,
    )


__all__ = [
    "CAMEL_CASE",
    "MIXED",
    "NAMING_RULES",
    "PASCAL_CASE",
    "SNAKE_CASE",
    "analyze_directories",
    "classify_naming",
    "directory_of",
    "path_depth",
    "size_distribution",
]
