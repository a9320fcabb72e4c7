"""Tests for event classification."""

from __future__ import annotations

from pathlib import Path

import pytest

from devsync.core.config import SyncPaths
from devsync.core.types import EventCategory
from devsync.sync.classifier import EventClassifier


@pytest.fixture
def paths(tmp_path: Path) -> SyncPaths:
    """Paths for a workspace in tmp_path."""
    return SyncPaths.create(tmp_path)


@pytest.fixture
def classifier(paths: SyncPaths) -> EventClassifier:
    """Classifier for the workspace."""
    return EventClassifier(paths)


class TestEventClassifier:
    """Tests for EventClassifier.classify()."""

    def test_reboot_sentinel(self, classifier: EventClassifier, paths: SyncPaths) -> None:
        """The reboot sentinel maps to REBOOT."""
        assert classifier.classify(paths.reboot_sentinel) == EventCategory.REBOOT

    def test_config_mirror(self, classifier: EventClassifier, paths: SyncPaths) -> None:
        """The config mirror maps to CONFIG_SYNC."""
        assert classifier.classify(paths.config_mirror) == EventCategory.CONFIG_SYNC

    def test_workspace_file(self, classifier: EventClassifier, paths: SyncPaths) -> None:
        """Files under fs/ map to WORKSPACE_FILE."""
        assert classifier.classify(paths.fs_dir / "init.js") == EventCategory.WORKSPACE_FILE

    def test_nested_workspace_file(self, classifier: EventClassifier, paths: SyncPaths) -> None:
        """Nested files under fs/ are workspace files too."""
        assert classifier.classify(paths.fs_dir / "lib" / "util.js") == EventCategory.WORKSPACE_FILE

    def test_fs_dir_itself_ignored(self, classifier: EventClassifier, paths: SyncPaths) -> None:
        """The fs/ directory itself is not a file to sync."""
        assert classifier.classify(paths.fs_dir) == EventCategory.IGNORED

    def test_firmware(self, classifier: EventClassifier, paths: SyncPaths) -> None:
        """The firmware artifact maps to FIRMWARE_READY."""
        assert classifier.classify(paths.firmware) == EventCategory.FIRMWARE_READY

    def test_build_sentinel(self, classifier: EventClassifier, paths: SyncPaths) -> None:
        """The build sentinel maps to BUILD_REQUEST."""
        assert classifier.classify(paths.build_sentinel) == EventCategory.BUILD_REQUEST

    @pytest.mark.parametrize(
        "relative",
        ["src/main.c", "mos.yml", "build/objs/main.o", "fsx/init.js", ".devsync/other"],
    )
    def test_other_paths_ignored(
        self, classifier: EventClassifier, paths: SyncPaths, relative: str
    ) -> None:
        """Anything else is IGNORED."""
        assert classifier.classify(paths.workspace / relative) == EventCategory.IGNORED

    def test_accepts_strings(self, classifier: EventClassifier, paths: SyncPaths) -> None:
        """String paths are accepted."""
        assert classifier.classify(str(paths.firmware)) == EventCategory.FIRMWARE_READY

    def test_priority_reboot_over_workspace(self, workspace: Path) -> None:
        """A reboot sentinel inside fs/ is still a reboot."""
        paths = SyncPaths.create(workspace, workspace / "fs")
        classifier = EventClassifier(paths)

        assert classifier.classify(paths.reboot_sentinel) == EventCategory.REBOOT
        assert classifier.classify(paths.config_mirror) == EventCategory.CONFIG_SYNC
        assert classifier.classify(paths.build_sentinel) == EventCategory.WORKSPACE_FILE

    def test_priority_workspace_over_firmware(self, tmp_path: Path) -> None:
        """fs/ files win over later rules."""
        paths = SyncPaths.create(tmp_path)
        classifier = EventClassifier(paths)
        assert classifier.classify(paths.fs_dir / "fw.zip") == EventCategory.WORKSPACE_FILE

    def test_exactly_one_category(self, classifier: EventClassifier, paths: SyncPaths) -> None:
        """Every path yields exactly one category member."""
        candidates = [
            paths.reboot_sentinel,
            paths.config_mirror,
            paths.fs_dir / "a.txt",
            paths.firmware,
            paths.build_sentinel,
            paths.workspace / "README.md",
        ]
        results = [classifier.classify(p) for p in candidates]
        assert results == [
            EventCategory.REBOOT,
            EventCategory.CONFIG_SYNC,
            EventCategory.WORKSPACE_FILE,
            EventCategory.FIRMWARE_READY,
            EventCategory.BUILD_REQUEST,
            EventCategory.IGNORED,
        ]
