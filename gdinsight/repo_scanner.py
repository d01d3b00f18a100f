"""Project scanning utilities that enumerate candidate script paths."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence, Set

from .errors import ScanError
from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".godot",
    ".import",
    ".mono",
    ".venv",
    "node_modules",
    "__pycache__",
}

logger = get_logger("scanner")


@dataclass
class IgnoreRule:
    """Represents a single exclude pattern."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _iter_files(
    root: Path, *, recursive: bool, include: str, rules: Sequence[IgnoreRule]
) -> Iterator[Path]:
    try:
        root_key = root.resolve(strict=True)
    except OSError as exc:
        raise ScanError(f"Cannot open project root {root}: {exc}") from exc
    if not root_key.is_dir():
        raise ScanError(f"Project root is not a directory: {root}")

    # Walk from the resolved root so returned paths match resolved res:// targets.
    visited: Set[Path] = {root_key}
    stack: List[tuple[Path, str]] = [(root_key, "")]
    while stack:
        current, rel_dir = stack.pop()
        try:
            entries = sorted(os.scandir(current), key=lambda entry: entry.name)
        except OSError as exc:
            if current == root_key:
                raise ScanError(f"Cannot open project root {root}: {exc}") from exc
            logger.debug("Skipping unreadable directory %s: %s", current, exc)
            continue

        subdirs: List[tuple[Path, str]] = []
        for entry in entries:
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            try:
                is_dir = entry.is_dir()
            except OSError:
                continue
            if is_dir:
                if not recursive or entry.name in _EXCLUDED_DIRS:
                    continue
                if _should_ignore(rel_path, True, rules):
                    continue
                resolved = Path(entry.path).resolve()
                if resolved in visited:
                    logger.debug("Skipping already visited directory %s", entry.path)
                    continue
                visited.add(resolved)
                subdirs.append((Path(entry.path), rel_path))
                continue
            if not fnmatchcase(entry.name, include):
                continue
            if _should_ignore(rel_path, False, rules):
                continue
            yield Path(entry.path)

        # Reverse so directories pop in alphabetical order.
        stack.extend(reversed(subdirs))


class RepoScanner:
    """Walks a project directory to produce the ordered list of script paths."""

    def scan(
        self,
        root: str,
        *,
        recursive: bool = True,
        include: str = "*.gd",
        exclude: Sequence[str] = (),
    ) -> List[str]:
        """Return matching file paths in deterministic walk order.

        An unreadable root is logged and reported as an empty list so callers
        surface it as "no scripts found" instead of crashing.
        """
        root_path = Path(root).expanduser()
        rules = [rule for rule in (build_ignore_rule(p) for p in exclude) if rule is not None]
        try:
            paths = [
                str(path)
                for path in _iter_files(root_path, recursive=recursive, include=include, rules=rules)
            ]
        except ScanError as exc:
            logger.warning("%s", exc)
            return []
        logger.debug("Scanner discovered %d files under %s", len(paths), root_path)
        return paths


__all__ = ["IgnoreRule", "RepoScanner", "build_ignore_rule"]
