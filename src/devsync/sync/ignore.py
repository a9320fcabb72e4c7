"""Ignore patterns for the workspace watcher.

Editor swap files, VCS metadata and temporary files never map to a sync
action, so they are dropped before they reach the debouncer. Patterns
use fnmatch syntax and are tried against the relative path and against
every path component, so ``.git`` also hides ``.git/objects/ab``. A
pattern prefixed with ``!`` re-includes what the defaults would drop.
"""

from __future__ import annotations

import fnmatch
from pathlib import Path

IGNORE_FILE_NAME = ".devsyncignore"

DEFAULT_IGNORE_PATTERNS = (
    ".git",
    ".hg",
    ".DS_Store",
    "Thumbs.db",
    "*.tmp",
    "*.temp",
    "*~",
    ".#*",
    "*.sw[a-p]",
    "4913",  # vim write probe
)


class IgnorePatterns:
    """Decides which watched paths are noise."""

    def __init__(self, patterns: list[str] | None = None) -> None:
        self._patterns = [*DEFAULT_IGNORE_PATTERNS, *(patterns or [])]

    @property
    def patterns(self) -> list[str]:
        """Get a copy of the active patterns."""
        return list(self._patterns)

    def load_from_file(self, path: Path) -> None:
        """Append patterns from an ignore file; ``#`` starts a comment."""
        if not path.is_file():
            return
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.split("#", 1)[0].strip()
            if line:
                self._patterns.append(line.rstrip("/"))

    def should_ignore(self, path: Path, base_path: Path) -> bool:
        """Check a path against the patterns.

        A pattern starting with ``!`` is an exception: matching paths are
        kept even if another pattern matches, so ``!*.tmp`` lets real
        ``fs/cache.tmp`` files through.

        Args:
            path: Absolute path reported by the watcher.
            base_path: Watched root the path belongs to.

        Returns:
            True if the path should be dropped. Paths outside
            ``base_path`` are never ignored.
        """
        try:
            rel = path.relative_to(base_path)
        except ValueError:
            return False

        ignored = False
        for pattern in self._patterns:
            if pattern.startswith("!"):
                if _matches(rel, pattern[1:]):
                    return False
            elif not ignored and _matches(rel, pattern):
                ignored = True
        return ignored


def _matches(rel: Path, pattern: str) -> bool:
    if fnmatch.fnmatch(rel.as_posix(), pattern):
        return True
    return any(fnmatch.fnmatch(part, pattern) for part in rel.parts)
