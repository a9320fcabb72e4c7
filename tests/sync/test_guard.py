"""Tests for self-event suppression."""

from __future__ import annotations

from pathlib import Path

from devsync.sync.guard import SuppressionGuard


class TestSuppressionGuard:
    """Tests for SuppressionGuard."""

    def test_nothing_pending(self, tmp_path: Path) -> None:
        """Without expected events nothing is suppressed."""
        mirror = tmp_path / "config.json"
        guard = SuppressionGuard(mirror)
        assert guard.should_suppress(mirror) is False
        assert guard.pending() == 0

    def test_suppresses_exactly_once(self, tmp_path: Path) -> None:
        """One expected event suppresses the next event only."""
        mirror = tmp_path / "config.json"
        guard = SuppressionGuard(mirror)
        guard.expect_self_event()

        assert guard.should_suppress(mirror) is True
        assert guard.should_suppress(mirror) is False

    def test_counts_multiple(self, tmp_path: Path) -> None:
        """Each expected event suppresses one event."""
        mirror = tmp_path / "config.json"
        guard = SuppressionGuard(mirror)
        guard.expect_self_event()
        guard.expect_self_event(mirror)
        assert guard.pending() == 2

        assert guard.should_suppress(mirror) is True
        assert guard.should_suppress(mirror) is True
        assert guard.should_suppress(mirror) is False

    def test_other_paths_never_suppressed(self, tmp_path: Path) -> None:
        """Pending events for the mirror do not hide other paths."""
        mirror = tmp_path / "config.json"
        guard = SuppressionGuard(mirror)
        guard.expect_self_event()

        assert guard.should_suppress(tmp_path / "fs" / "init.js") is False
        assert guard.pending() == 1

    def test_string_paths(self, tmp_path: Path) -> None:
        """String and Path forms of one path are the same key."""
        mirror = tmp_path / "config.json"
        guard = SuppressionGuard(mirror)
        guard.expect_self_event()
        assert guard.should_suppress(str(mirror)) is True
