"""Shared types for devsync.

This module defines the error taxonomy and enums used across the
device, console and sync layers.
"""

from __future__ import annotations

from enum import Enum


class DevSyncError(Exception):
    """Base exception for devsync errors."""


class DeviceUnreachableError(DevSyncError):
    """The device could not be reached or returned no usable config."""


class RemoteCallError(DevSyncError):
    """A single remote procedure call failed.

    Attributes:
        method: RPC method name (e.g. "Config.Get").
    """

    def __init__(self, method: str, message: str) -> None:
        self.method = method
        super().__init__(f"{method}: {message}")


class MalformedConfigError(DevSyncError):
    """The local config mirror is not a valid JSON object."""

    def __init__(self, path: object, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class SubordinateProcessError(DevSyncError):
    """A console or log subordinate exited unexpectedly."""


class ToolError(DevSyncError):
    """An external build or flash invocation failed.

    Attributes:
        returncode: Exit code of the tool.
    """

    def __init__(self, command: str, returncode: int) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(f"'{command}' exited with code {returncode}")


class TransportKind(str, Enum):
    """How the device is reached.

    Decides which console variant runs and how firmware is delivered.
    """

    POINT_TO_POINT = "point-to-point"
    NETWORK_STREAM = "network-stream"


class EventCategory(str, Enum):
    """Semantic action assigned to a filesystem change."""

    REBOOT = "reboot"
    CONFIG_SYNC = "config-sync"
    WORKSPACE_FILE = "workspace-file"
    FIRMWARE_READY = "firmware-ready"
    BUILD_REQUEST = "build-request"
    IGNORED = "ignored"


class EngineState(str, Enum):
    """Lifecycle state of the sync engine."""

    INITIALIZING = "initializing"
    WATCHING = "watching"
    STOPPED = "stopped"
