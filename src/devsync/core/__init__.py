"""Core module - Shared configuration, errors and enums."""

from devsync.core.config import (
    DEFAULT_TOOL,
    DEFAULT_UDP_LOG_PORT,
    Connection,
    DevConfig,
    SyncPaths,
    read_config_mirror,
)
from devsync.core.types import (
    DeviceUnreachableError,
    DevSyncError,
    EngineState,
    EventCategory,
    MalformedConfigError,
    RemoteCallError,
    SubordinateProcessError,
    ToolError,
    TransportKind,
)

__all__ = [
    # Config
    "DEFAULT_TOOL",
    "DEFAULT_UDP_LOG_PORT",
    "Connection",
    "DevConfig",
    "SyncPaths",
    "read_config_mirror",
    # Errors
    "DevSyncError",
    "DeviceUnreachableError",
    "MalformedConfigError",
    "RemoteCallError",
    "SubordinateProcessError",
    "ToolError",
    # Enums
    "EngineState",
    "EventCategory",
    "TransportKind",
]
