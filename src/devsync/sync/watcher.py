"""File system watcher with debouncing for the sync loop.

This module provides:
- WatchEvent: A changed path, consumed once by the engine
- EventBatcher: Coalesces rapid events per path and delivers batches
- FileWatcher: Watches the workspace (and an external state directory)
  using watchdog

Only the path of a change is delivered. The engine re-stats the path
when it handles the event, so the watchdog event kind is not kept.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from devsync.sync.ignore import IGNORE_FILE_NAME, IgnorePatterns

if TYPE_CHECKING:
    from watchdog.observers.api import BaseObserver

logger = logging.getLogger(__name__)

_DIRECTORY_EVENTS = (DirCreatedEvent, DirDeletedEvent, DirModifiedEvent, DirMovedEvent)


@dataclass
class WatchEvent:
    """A changed path."""

    path: Path
    timestamp: float = field(default_factory=time.time)


def _decode(path: str | bytes) -> str:
    if isinstance(path, bytes):
        return path.decode("utf-8", errors="replace")
    return path


class EventBatcher:
    """Collects changes until the filesystem settles, then delivers a batch.

    Repeated changes to one path inside the same batch collapse into a
    single WatchEvent, so one atomic write yields one event.
    """

    def __init__(self, settle_delay_s: float = 0.5) -> None:
        """Initialize the batcher.

        Args:
            settle_delay_s: Quiet period after the last change before delivery.
        """
        self._settle_delay_s = settle_delay_s
        self._pending: dict[Path, WatchEvent] = {}
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._batches: queue.Queue[list[WatchEvent]] = queue.Queue()

    def add(self, path: Path) -> None:
        """Record a change and restart the settle timer."""
        with self._lock:
            self._pending.pop(path, None)
            self._pending[path] = WatchEvent(path=path)
            if self._timer:
                self._timer.cancel()
            self._timer = threading.Timer(self._settle_delay_s, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Deliver pending changes as one batch."""
        with self._lock:
            if not self._pending:
                return
            batch = list(self._pending.values())
            self._pending.clear()
            self._timer = None

        self._batches.put(batch)
        logger.debug("Delivered batch of %d change(s)", len(batch))

    def get(self, timeout: float | None = None) -> list[WatchEvent] | None:
        """Block until the next batch is delivered.

        Returns:
            The batch, or None if the timeout expired.
        """
        try:
            return self._batches.get(timeout=timeout)
        except queue.Empty:
            return None

    def cancel(self) -> None:
        """Stop any pending timer without delivering."""
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None


class WatchEventHandler(FileSystemEventHandler):
    """Feeds file changes below one watched root into a batcher."""

    def __init__(
        self,
        base_path: Path,
        batcher: EventBatcher,
        ignore_patterns: IgnorePatterns | None = None,
    ) -> None:
        super().__init__()
        self._base_path = base_path
        self._batcher = batcher
        self._ignore = ignore_patterns or IgnorePatterns()

    def _record(self, raw_path: str | bytes) -> None:
        path = Path(_decode(raw_path))
        if self._ignore.should_ignore(path, self._base_path):
            return
        self._batcher.add(path)

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Record created, modified, deleted and moved files."""
        if isinstance(event, _DIRECTORY_EVENTS) or event.is_directory:
            return
        if event.event_type not in ("created", "modified", "deleted", "moved"):
            return

        self._record(event.src_path)
        # Save-by-rename shows up as a move onto the real file
        if event.event_type == "moved" and event.dest_path:
            self._record(event.dest_path)


class FileWatcher:
    """Watches directories recursively and delivers debounced batches.

    Usage:
        with FileWatcher([workspace]) as watcher:
            while True:
                batch = watcher.next_batch(timeout=1.0)
                ...
    """

    def __init__(
        self,
        watch_paths: list[Path],
        settle_delay_s: float = 0.5,
        ignore_patterns: list[str] | None = None,
    ) -> None:
        """Initialize the file watcher.

        Args:
            watch_paths: Directories to watch; the first one is the workspace.
            settle_delay_s: Quiet period before a batch is delivered.
            ignore_patterns: Additional patterns to ignore.

        Raises:
            ValueError: If a watch path is not a directory.
        """
        self._watch_paths = [Path(p).resolve() for p in watch_paths]
        for path in self._watch_paths:
            if not path.is_dir():
                raise ValueError(f"Watch path must be a directory: {path}")

        self._ignore = IgnorePatterns(ignore_patterns)
        if self._watch_paths:
            self._ignore.load_from_file(self._watch_paths[0] / IGNORE_FILE_NAME)

        self._batcher = EventBatcher(settle_delay_s)
        self._observer: BaseObserver = Observer()
        self._running = False

    @property
    def watch_paths(self) -> list[Path]:
        """Get the watched directories."""
        return list(self._watch_paths)

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._running

    def next_batch(self, timeout: float | None = None) -> list[WatchEvent] | None:
        """Block until the watcher delivers one or more changes."""
        return self._batcher.get(timeout)

    def start(self) -> None:
        """Start watching for changes."""
        if self._running:
            return

        for path in self._watch_paths:
            handler = WatchEventHandler(path, self._batcher, self._ignore)
            self._observer.schedule(handler, str(path), recursive=True)
        self._observer.start()
        self._running = True
        logger.debug("Watching %s", ", ".join(str(p) for p in self._watch_paths))

    def stop(self) -> None:
        """Stop watching for changes."""
        if not self._running:
            return

        self._batcher.cancel()
        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._running = False

    def __enter__(self) -> FileWatcher:
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.stop()
