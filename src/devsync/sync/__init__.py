"""Sync loop for the development workspace.

Architecture:
    FileWatcher → SyncEngine → EventClassifier
                      │
                      ├─ SuppressionGuard (drops self-caused config writes)
                      ├─ ConsoleSession (suspended around every action)
                      └─ DeviceClient / Toolchain

Components:
- **FileWatcher**: Debounced watchdog watcher delivering WatchEvent batches
- **EventClassifier**: Maps a path to one EventCategory
- **SuppressionGuard**: Counts pending self-caused writes
- **SyncEngine**: Startup sequence and per-event dispatch
"""

from devsync.sync.classifier import EventClassifier
from devsync.sync.engine import EngineStats, SyncEngine
from devsync.sync.guard import SuppressionGuard
from devsync.sync.ignore import DEFAULT_IGNORE_PATTERNS, IgnorePatterns
from devsync.sync.watcher import EventBatcher, FileWatcher, WatchEvent

__all__ = [
    "DEFAULT_IGNORE_PATTERNS",
    "EngineStats",
    "EventBatcher",
    "EventClassifier",
    "FileWatcher",
    "IgnorePatterns",
    "SuppressionGuard",
    "SyncEngine",
    "WatchEvent",
]
