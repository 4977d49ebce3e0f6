"""Resolve glob patterns to an ordered list of stylesheet paths."""
from enum import Enum
from fnmatch import fnmatch
from pathlib import Path
import glob
import logging
import os

logger = logging.getLogger(__name__)


class CollectErrorKind(Enum):
    INVALID_PATTERN = "invalid_pattern"


class CollectError(Exception):
    """A glob pattern could not be expanded."""
    def __init__(self, kind: CollectErrorKind, pattern: str, detail: str = ""):
        self.kind = kind
        self.pattern = pattern
        self.detail = detail
        message = f"Invalid pattern {pattern!r}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


def collect(
    patterns: list[str],
    base_dir: Path | str | None = None,
    ignore: tuple[str, ...] | list[str] = ()
) -> list[str]:
    """
    Expand glob patterns into a sorted, de-duplicated list of file paths.

    Multiple patterns are unioned. Directories are skipped. `**` matches
    across directories. Matching nothing is not an error, but is logged.

    Args:
        patterns: Glob patterns, relative to base_dir unless absolute
        base_dir: Directory to expand relative patterns against (default: cwd,
            in which case returned paths stay relative)
        ignore: Glob patterns for paths to drop

    Returns:
        Paths sorted lexicographically

    Raises:
        CollectError: If a pattern is empty or cannot be expanded
    """
    root = str(base_dir) if base_dir is not None else None
    matches: set[str] = set()

    for pattern in patterns:
        if not pattern or not pattern.strip():
            raise CollectError(CollectErrorKind.INVALID_PATTERN, pattern, "empty pattern")
        if "\x00" in pattern:
            raise CollectError(CollectErrorKind.INVALID_PATTERN, pattern, "contains NUL byte")

        try:
            found = glob.glob(pattern, root_dir=root, recursive=True)
        except (OSError, ValueError) as e:
            raise CollectError(CollectErrorKind.INVALID_PATTERN, pattern, str(e)) from e

        logger.debug(f"Pattern {pattern!r} matched {len(found)} paths")
        matches.update(found)

    paths = []
    for match in matches:
        full = os.path.join(root, match) if root is not None else match
        if os.path.isdir(full):
            continue
        if any(fnmatch(match, pat) for pat in ignore):
            logger.debug(f"Ignoring {match}")
            continue
        paths.append(match)

    paths.sort()

    if not paths:
        logger.warning(f"No files matched {', '.join(repr(p) for p in patterns)}")

    if root is None:
        return paths
    return [os.path.join(root, p) for p in paths]
