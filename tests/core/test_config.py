"""Tests for core configuration classes."""

from __future__ import annotations

from pathlib import Path

import pytest

from devsync.core.config import Connection, DevConfig, SyncPaths, read_config_mirror
from devsync.core.types import MalformedConfigError, TransportKind


class TestConnection:
    """Tests for connection string parsing."""

    def test_device_path_is_point_to_point(self) -> None:
        """A local device path should select the point-to-point transport."""
        conn = Connection.parse("/dev/ttyUSB0")
        assert conn.kind == TransportKind.POINT_TO_POINT
        assert conn.is_network is False
        assert conn.host is None
        assert str(conn) == "/dev/ttyUSB0"

    def test_windows_port_is_point_to_point(self) -> None:
        """COM ports have no scheme and are point-to-point."""
        assert Connection.parse("COM3").kind == TransportKind.POINT_TO_POINT

    def test_websocket_url_is_network(self) -> None:
        """A ws:// URL should select the network transport."""
        conn = Connection.parse("ws://192.168.1.4/rpc")
        assert conn.kind == TransportKind.NETWORK_STREAM
        assert conn.is_network is True
        assert conn.host == "192.168.1.4"
        assert conn.scheme == "ws"
        assert conn.is_http is False

    def test_http_url(self) -> None:
        """http:// URLs can be spoken to directly."""
        conn = Connection.parse("HTTP://device.local")
        assert conn.is_http is True
        assert conn.host == "device.local"

    def test_whitespace_stripped(self) -> None:
        """Surrounding whitespace should be ignored."""
        assert Connection.parse("  /dev/ttyACM0\n").raw == "/dev/ttyACM0"

    def test_empty_rejected(self) -> None:
        """Empty connection strings are invalid."""
        with pytest.raises(ValueError, match="must not be empty"):
            Connection.parse("   ")

    def test_url_without_host_rejected(self) -> None:
        """A network URL must name a host."""
        with pytest.raises(ValueError, match="no host"):
            Connection.parse("udp://")


class TestSyncPaths:
    """Tests for derived paths."""

    def test_default_state_dir(self, tmp_path: Path) -> None:
        """State lives in <workspace>/.devsync by default."""
        paths = SyncPaths.create(tmp_path)
        root = tmp_path.resolve()

        assert paths.workspace == root
        assert paths.state_dir == root / ".devsync"
        assert paths.reboot_sentinel == root / ".devsync" / "reboot"
        assert paths.build_sentinel == root / ".devsync" / "build"
        assert paths.config_mirror == root / ".devsync" / "config.json"
        assert paths.fs_dir == root / "fs"
        assert paths.firmware == root / "build" / "fw.zip"
        assert paths.state_dir_in_workspace is True

    def test_custom_state_dir(self, tmp_path: Path) -> None:
        """A state directory outside the workspace is supported."""
        workspace = tmp_path / "app"
        workspace.mkdir()
        state = tmp_path / "state"

        paths = SyncPaths.create(workspace, state)

        assert paths.config_mirror == state.resolve() / "config.json"
        assert paths.state_dir_in_workspace is False

    def test_sentinels(self, tmp_path: Path) -> None:
        """sentinels should list reboot then build."""
        paths = SyncPaths.create(tmp_path)
        assert paths.sentinels == (paths.reboot_sentinel, paths.build_sentinel)


class TestDevConfig:
    """Tests for DevConfig."""

    def test_create_defaults(self, tmp_path: Path) -> None:
        """Should fill defaults for optional settings."""
        config = DevConfig.create(port="/dev/ttyUSB0", workspace=tmp_path)

        assert config.tool == "mos"
        assert config.udp_port == 1993
        assert config.platform is None
        assert config.preserve_config is True
        assert config.ignore_patterns == []
        assert config.paths.workspace == tmp_path.resolve()

    def test_create_overrides(self, tmp_path: Path) -> None:
        """Keyword settings should be applied."""
        config = DevConfig.create(
            port="ws://10.0.0.2/rpc",
            workspace=tmp_path,
            tool="/opt/mos",
            platform="esp32",
            udp_port=5000,
        )
        assert config.tool == "/opt/mos"
        assert config.platform == "esp32"
        assert config.udp_port == 5000
        assert config.connection.is_network is True

    def test_tool_command(self, tmp_path: Path) -> None:
        """Tool commands should target the configured port."""
        config = DevConfig.create(port="/dev/ttyUSB0", workspace=tmp_path)
        assert config.tool_command("call", "Sys.GetInfo") == [
            "mos",
            "--port",
            "/dev/ttyUSB0",
            "call",
            "Sys.GetInfo",
        ]


class TestReadConfigMirror:
    """Tests for reading the local config mirror."""

    def test_reads_object(self, tmp_path: Path) -> None:
        """A JSON object is returned as a dict."""
        mirror = tmp_path / "config.json"
        mirror.write_text('{"wifi": {"sta": {"ssid": "lab"}}}')

        assert read_config_mirror(mirror) == {"wifi": {"sta": {"ssid": "lab"}}}

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Unparseable content raises MalformedConfigError."""
        mirror = tmp_path / "config.json"
        mirror.write_text("{not json")

        with pytest.raises(MalformedConfigError, match="invalid JSON") as exc_info:
            read_config_mirror(mirror)
        assert exc_info.value.path == mirror

    def test_non_object(self, tmp_path: Path) -> None:
        """A JSON array is not a config."""
        mirror = tmp_path / "config.json"
        mirror.write_text("[1, 2]")

        with pytest.raises(MalformedConfigError, match="expected a JSON object"):
            read_config_mirror(mirror)
