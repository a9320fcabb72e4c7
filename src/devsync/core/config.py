"""Shared configuration classes for devsync.

This module defines the configuration object built once at startup and
passed by reference to the device, console and sync components.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from devsync.core.types import MalformedConfigError, TransportKind

DEFAULT_TOOL = "mos"
DEFAULT_UDP_LOG_PORT = 1993
DEFAULT_STATE_DIR_NAME = ".devsync"

# Fixed locations relative to the workspace root
WORKSPACE_FS_DIR = "fs"
FIRMWARE_ARTIFACT = "build/fw.zip"

# Fixed file names inside the state directory
REBOOT_SENTINEL = "reboot"
BUILD_SENTINEL = "build"
CONFIG_MIRROR = "config.json"


@dataclass(frozen=True)
class Connection:
    """Parsed device connection string.

    A string carrying a URL scheme (``ws://``, ``http://``, ``udp://``...)
    names a networked device; anything else is a local device path such
    as ``/dev/ttyUSB0`` or ``COM3``.

    Attributes:
        raw: The connection string as given.
        kind: Transport kind derived from the string.
        scheme: URL scheme for network connections, else empty.
        host: Device host for network connections, else None.
    """

    raw: str
    kind: TransportKind
    scheme: str = ""
    host: str | None = None

    @classmethod
    def parse(cls, value: str) -> Connection:
        """Parse a connection string.

        Raises:
            ValueError: If the string is empty or a URL has no host.
        """
        value = value.strip()
        if not value:
            raise ValueError("Connection string must not be empty")

        if "://" in value:
            parsed = urlparse(value)
            if not parsed.hostname:
                raise ValueError(f"Network connection has no host: {value}")
            return cls(
                raw=value,
                kind=TransportKind.NETWORK_STREAM,
                scheme=parsed.scheme.lower(),
                host=parsed.hostname,
            )

        return cls(raw=value, kind=TransportKind.POINT_TO_POINT)

    @property
    def is_network(self) -> bool:
        """Check if the device is reached over the network."""
        return self.kind == TransportKind.NETWORK_STREAM

    @property
    def is_http(self) -> bool:
        """Check if RPC can be spoken directly over HTTP."""
        return self.scheme in ("http", "https")

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class SyncPaths:
    """Absolute paths the sync engine reacts to."""

    workspace: Path
    state_dir: Path
    reboot_sentinel: Path
    build_sentinel: Path
    config_mirror: Path
    fs_dir: Path
    firmware: Path

    @classmethod
    def create(cls, workspace: Path, state_dir: Path | None = None) -> SyncPaths:
        """Derive every fixed path from the workspace and state directory."""
        workspace = Path(workspace).expanduser().resolve()
        if state_dir is None:
            state_dir = workspace / DEFAULT_STATE_DIR_NAME
        state_dir = Path(state_dir).expanduser().resolve()
        return cls(
            workspace=workspace,
            state_dir=state_dir,
            reboot_sentinel=state_dir / REBOOT_SENTINEL,
            build_sentinel=state_dir / BUILD_SENTINEL,
            config_mirror=state_dir / CONFIG_MIRROR,
            fs_dir=workspace / WORKSPACE_FS_DIR,
            firmware=workspace / FIRMWARE_ARTIFACT,
        )

    @property
    def sentinels(self) -> tuple[Path, Path]:
        """Get the reboot and build sentinel paths."""
        return (self.reboot_sentinel, self.build_sentinel)

    @property
    def state_dir_in_workspace(self) -> bool:
        """Check if the state directory is covered by a workspace watch."""
        return self.state_dir.is_relative_to(self.workspace)


@dataclass
class DevConfig:
    """Configuration for one devsync session.

    Attributes:
        connection: Parsed device connection.
        paths: Workspace and state paths.
        tool: Device tool binary used for RPC, build, flash and console.
        platform: Optional build platform forwarded to the tool.
        udp_port: Local port receiving the network log stream.
        settle_delay_s: Delay after the last change before a batch is delivered.
        ignore_patterns: Extra watcher ignore patterns.
        preserve_config: Restore device config after flashing a fresh build.
        http_timeout: Timeout for HTTP RPC requests in seconds.
    """

    connection: Connection
    paths: SyncPaths
    tool: str = DEFAULT_TOOL
    platform: str | None = None
    udp_port: int = DEFAULT_UDP_LOG_PORT
    settle_delay_s: float = 0.5
    ignore_patterns: list[str] = field(default_factory=list)
    preserve_config: bool = True
    http_timeout: float = 30.0

    @classmethod
    def create(
        cls,
        port: str,
        workspace: Path | str = ".",
        state_dir: Path | str | None = None,
        **kwargs: object,
    ) -> DevConfig:
        """Build a config from raw option values."""
        return cls(
            connection=Connection.parse(port),
            paths=SyncPaths.create(
                Path(workspace),
                Path(state_dir) if state_dir is not None else None,
            ),
            **kwargs,  # type: ignore[arg-type]
        )

    def tool_command(self, *args: str) -> list[str]:
        """Build a device tool command line targeting this connection."""
        return [self.tool, "--port", self.connection.raw, *args]


def read_config_mirror(path: Path) -> dict[str, Any]:
    """Read a local device config mirror.

    Args:
        path: Mirror file holding the device config as JSON.

    Returns:
        The parsed config object.

    Raises:
        MalformedConfigError: If the file is not a JSON object.
    """
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MalformedConfigError(path, f"invalid JSON: {e}") from e
    if not isinstance(config, dict):
        raise MalformedConfigError(path, "expected a JSON object")
    return config
