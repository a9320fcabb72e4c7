"""Tests for watcher ignore patterns."""

from pathlib import Path

from devsync.sync.ignore import IgnorePatterns


class TestIgnorePatterns:
    """Tests for ignore pattern matching."""

    def test_git_tree_ignored(self, tmp_path: Path) -> None:
        """Anything under .git is ignored."""
        ignore = IgnorePatterns()
        assert ignore.should_ignore(tmp_path / ".git" / "objects" / "ab", tmp_path) is True

    def test_editor_files_ignored(self, tmp_path: Path) -> None:
        """Swap, backup and lock files are ignored."""
        ignore = IgnorePatterns()
        for name in (".init.js.swp", "init.js~", ".#init.js", "4913", "x.tmp"):
            assert ignore.should_ignore(tmp_path / "fs" / name, tmp_path) is True, name

    def test_normal_files_kept(self, tmp_path: Path) -> None:
        """Real workspace files are not ignored."""
        ignore = IgnorePatterns()
        assert ignore.should_ignore(tmp_path / "fs" / "init.js", tmp_path) is False
        assert ignore.should_ignore(tmp_path / "build" / "fw.zip", tmp_path) is False
        assert ignore.should_ignore(tmp_path / ".devsync" / "config.json", tmp_path) is False

    def test_custom_pattern(self, tmp_path: Path) -> None:
        """Extra patterns are honoured."""
        ignore = IgnorePatterns(["*.log", "deps"])
        assert ignore.should_ignore(tmp_path / "app.log", tmp_path) is True
        assert ignore.should_ignore(tmp_path / "deps" / "lib" / "x.c", tmp_path) is True

    def test_load_from_file(self, tmp_path: Path) -> None:
        """Patterns load from an ignore file, skipping comments."""
        ignore_file = tmp_path / ".devsyncignore"
        ignore_file.write_text("*.bak\n# comment\ntemp/  # trailing\n\n")

        ignore = IgnorePatterns()
        ignore.load_from_file(ignore_file)

        assert ignore.should_ignore(tmp_path / "a.bak", tmp_path) is True
        assert ignore.should_ignore(tmp_path / "temp" / "x", tmp_path) is True
        assert "# comment" not in ignore.patterns

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """A missing ignore file is not an error."""
        IgnorePatterns().load_from_file(tmp_path / "nonexistent")

    def test_outside_base_not_ignored(self, tmp_path: Path) -> None:
        """Paths outside the watched root are never ignored."""
        ignore = IgnorePatterns()
        assert ignore.should_ignore(Path("/elsewhere/.git"), tmp_path / "ws") is False

    def test_exception_keeps_workspace_file(self, tmp_path: Path) -> None:
        """A ! pattern lets a real fs/ file through the defaults."""
        ignore = IgnorePatterns(["!*.tmp"])

        assert ignore.should_ignore(tmp_path / "fs" / "cache.tmp", tmp_path) is False
        assert ignore.should_ignore(tmp_path / "fs" / ".init.js.swp", tmp_path) is True

    def test_exception_from_file(self, tmp_path: Path) -> None:
        """Exceptions load from the ignore file too."""
        ignore_file = tmp_path / ".devsyncignore"
        ignore_file.write_text("!fs/cache.tmp\n")

        ignore = IgnorePatterns()
        ignore.load_from_file(ignore_file)

        assert ignore.should_ignore(tmp_path / "fs" / "cache.tmp", tmp_path) is False
        assert ignore.should_ignore(tmp_path / "fs" / "other.tmp", tmp_path) is True
