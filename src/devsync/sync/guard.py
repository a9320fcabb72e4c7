"""Suppression of self-caused filesystem events.

Every config download rewrites the local mirror, which the watcher then
reports like a user edit. The engine announces each such write with
expect_self_event(); the next event for that path is dropped.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

logger = logging.getLogger(__name__)


class SuppressionGuard:
    """Counts pending self-caused writes per path.

    Only paths the engine announces are ever suppressed; by default that is
    the managed config mirror.
    """

    def __init__(self, default_path: Path) -> None:
        """Initialize the guard.

        Args:
            default_path: Path announced when expect_self_event() gets none.
        """
        self._default_path = Path(default_path)
        self._pending: Counter[Path] = Counter()

    def expect_self_event(self, path: Path | None = None) -> None:
        """Record that the engine is about to write ``path`` itself."""
        key = Path(path) if path is not None else self._default_path
        self._pending[key] += 1
        logger.debug("Expecting self-caused event for %s (%d pending)", key, self._pending[key])

    def should_suppress(self, path: Path | str) -> bool:
        """Consume one pending self-event for ``path``.

        Returns:
            True if the event was self-caused and must be dropped.
        """
        key = Path(path)
        if self._pending[key] <= 0:
            return False

        self._pending[key] -= 1
        if self._pending[key] == 0:
            del self._pending[key]
        return True

    def pending(self, path: Path | None = None) -> int:
        """Get the number of pending self-events for a path."""
        key = Path(path) if path is not None else self._default_path
        return self._pending.get(key, 0)
