"""Event classification.

Maps a changed path to exactly one action category using first-match
priority:

    | Priority | Match                          | Category       |
    |----------|--------------------------------|----------------|
    | 1        | reboot sentinel                | REBOOT         |
    | 2        | managed config mirror          | CONFIG_SYNC    |
    | 3        | under the workspace fs/ tree   | WORKSPACE_FILE |
    | 4        | firmware artifact              | FIRMWARE_READY |
    | 5        | build sentinel                 | BUILD_REQUEST  |
    | -        | anything else                  | IGNORED        |
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from devsync.core.types import EventCategory

if TYPE_CHECKING:
    from devsync.core.config import SyncPaths


class EventClassifier:
    """Assigns a category to a changed path."""

    def __init__(self, paths: SyncPaths) -> None:
        self._paths = paths

    def classify(self, path: Path | str) -> EventCategory:
        """Classify a path.

        Args:
            path: Absolute path of the changed file.

        Returns:
            The category of the first matching rule.
        """
        path = Path(path)
        paths = self._paths

        if path == paths.reboot_sentinel:
            return EventCategory.REBOOT
        if path == paths.config_mirror:
            return EventCategory.CONFIG_SYNC
        if path != paths.fs_dir and path.is_relative_to(paths.fs_dir):
            return EventCategory.WORKSPACE_FILE
        if path == paths.firmware:
            return EventCategory.FIRMWARE_READY
        if path == paths.build_sentinel:
            return EventCategory.BUILD_REQUEST
        return EventCategory.IGNORED
