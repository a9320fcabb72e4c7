"""Sync engine driving the development loop.

This module provides:
- SyncEngine: Watches local changes and mirrors them onto the device
- EngineStats: Counters for processed, suppressed, ignored and failed events

Every event goes through classify → suspend console → act → resume console:

    | Category       | Action                                                  |
    |----------------|---------------------------------------------------------|
    | REBOOT         | Reboot the device                                       |
    | CONFIG_SYNC    | Push edited mirror, save, re-download, reboot;          |
    |                | a deleted mirror is only re-downloaded                  |
    | WORKSPACE_FILE | Upload by base name, or remove it if the file is gone   |
    | FIRMWARE_READY | Flash / OTA the artifact if it exists                   |
    | BUILD_REQUEST  | Local build with device config preservation             |
    | IGNORED        | Nothing                                                 |

Events are handled one at a time on the calling thread. A failure while
handling one event is logged and the loop moves on to the next.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from devsync.core.config import read_config_mirror
from devsync.core.types import (
    EngineState,
    EventCategory,
    RemoteCallError,
)
from devsync.device.client import format_status
from devsync.device.toolchain import BuildOptions
from devsync.sync.classifier import EventClassifier
from devsync.sync.guard import SuppressionGuard

if TYPE_CHECKING:
    from devsync.console.base import ConsoleSession
    from devsync.core.config import DevConfig
    from devsync.device.client import DeviceClient
    from devsync.device.toolchain import Toolchain
    from devsync.sync.watcher import FileWatcher, WatchEvent

logger = logging.getLogger(__name__)


@dataclass
class EngineStats:
    """Event counters for one engine run."""

    processed: int = 0
    suppressed: int = 0
    ignored: int = 0
    failed: int = 0


class SyncEngine:
    """Keeps the device in step with the local workspace.

    Usage:
        engine = SyncEngine(config, client, toolchain, console)
        engine.startup()
        with FileWatcher(engine.watch_paths) as watcher:
            engine.run(watcher)
    """

    def __init__(
        self,
        config: DevConfig,
        client: DeviceClient,
        toolchain: Toolchain,
        console: ConsoleSession,
        classifier: EventClassifier | None = None,
        guard: SuppressionGuard | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Session configuration.
            client: Remote action client.
            toolchain: Build and flash invocations.
            console: Console session owned by the engine.
            classifier: Event classifier (default: built from config paths).
            guard: Self-event guard (default: keyed on the config mirror).
        """
        self._config = config
        self._paths = config.paths
        self._client = client
        self._toolchain = toolchain
        self._console = console
        self._classifier = classifier or EventClassifier(config.paths)
        self._guard = guard or SuppressionGuard(config.paths.config_mirror)

        self._state = EngineState.INITIALIZING
        self._stats = EngineStats()
        self._stop_event = threading.Event()

    @property
    def state(self) -> EngineState:
        """Get the engine state."""
        return self._state

    @property
    def stats(self) -> EngineStats:
        """Get event counters."""
        return self._stats

    @property
    def guard(self) -> SuppressionGuard:
        """Get the self-event guard."""
        return self._guard

    @property
    def watch_paths(self) -> list[Path]:
        """Get the directories the watcher must cover."""
        paths = [self._paths.workspace]
        if not self._paths.state_dir_in_workspace:
            paths.append(self._paths.state_dir)
        return paths

    # === Lifecycle ===

    def startup(self) -> None:
        """Bring the device, mirror and console up before watching.

        Raises:
            DeviceUnreachableError: If the initial config download fails.
        """
        self._report_status()

        logger.info("Downloading device config to %s", self._paths.config_mirror)
        self._client.download_config(self._paths.config_mirror)

        self._console.start(wait=False)

        self._paths.state_dir.mkdir(parents=True, exist_ok=True)
        for sentinel in self._paths.sentinels:
            if not sentinel.exists():
                sentinel.touch()
                logger.debug("Created sentinel %s", sentinel)

        self._state = EngineState.WATCHING
        logger.info(
            "Watching %s (touch %s to reboot, %s to build)",
            self._paths.workspace,
            self._paths.reboot_sentinel,
            self._paths.build_sentinel,
        )

    def run(self, watcher: FileWatcher, poll_interval: float = 1.0) -> None:
        """Process watcher batches until stop() is called.

        Args:
            watcher: Started file watcher.
            poll_interval: How often to check for a stop request.
        """
        while not self._stop_event.is_set():
            batch = watcher.next_batch(timeout=poll_interval)
            if batch:
                self.process_batch(batch)

    def stop(self) -> None:
        """Ask run() to return after the current batch."""
        self._stop_event.set()

    def shutdown(self) -> None:
        """Release the console."""
        self._stop_event.set()
        self._console.stop()
        self._state = EngineState.STOPPED

    # === Event handling ===

    def process_batch(self, events: list[WatchEvent]) -> None:
        """Handle events in order, isolating failures per event."""
        for event in events:
            try:
                self.handle(event)
            except Exception as e:
                self._stats.failed += 1
                logger.error("%s: %s", _display(event.path, self._paths.workspace), e)
                logger.debug("Full traceback:", exc_info=True)

    def handle(self, event: WatchEvent) -> EventCategory:
        """Handle one event.

        Returns:
            The category the event was classified as.
        """
        path = Path(event.path)
        category = self._classifier.classify(path)

        if category == EventCategory.IGNORED:
            self._stats.ignored += 1
            return category

        if category == EventCategory.REBOOT:
            self._reboot()
        elif category == EventCategory.CONFIG_SYNC:
            if self._guard.should_suppress(path):
                self._stats.suppressed += 1
                logger.debug("Dropped self-caused change to %s", path)
                return category
            self._sync_config(path)
        elif category == EventCategory.WORKSPACE_FILE:
            self._sync_workspace_file(path)
        elif category == EventCategory.FIRMWARE_READY:
            self._update_firmware(path)
        elif category == EventCategory.BUILD_REQUEST:
            self._build()

        self._stats.processed += 1
        return category

    def _reboot(self) -> None:
        with self._console.suspended():
            logger.info("Rebooting device")
            self._client.reboot()

    def _sync_config(self, path: Path) -> None:
        with self._console.suspended():
            if path.is_file():
                config = read_config_mirror(path)
                logger.info("Uploading config from %s", path.name)
                self._client.set_config(config, save=True, reboot=False)
                self._refresh_config_mirror()
                logger.info("Rebooting device to apply config")
                self._client.reboot()
            else:
                logger.info("Config mirror removed, restoring it from the device")
                self._refresh_config_mirror()

    def _refresh_config_mirror(self) -> None:
        self._client.download_config(self._paths.config_mirror)
        self._guard.expect_self_event(self._paths.config_mirror)

    def _sync_workspace_file(self, path: Path) -> None:
        with self._console.suspended():
            if path.is_file():
                logger.info("↑ %s", path.name)
                self._client.put_file(path, path.name)
            elif not path.exists():
                logger.info("✗ %s", path.name)
                self._client.remove_file(path.name)

    def _update_firmware(self, path: Path) -> None:
        if not path.is_file():
            return
        with self._console.suspended():
            self._toolchain.flash(path)

    def _build(self) -> None:
        options = BuildOptions(
            local=True,
            platform=self._config.platform,
            preserve_config=self._config.preserve_config,
        )
        with self._console.suspended():
            self._toolchain.build(options)

    def _report_status(self) -> None:
        try:
            info = self._client.get_info()
        except RemoteCallError as e:
            logger.warning("Cannot get device status: %s", e)
            return
        logger.info("%s", format_status(info, self._config.connection))


def _display(path: Path, base: Path) -> str:
    try:
        return str(path.relative_to(base))
    except ValueError:
        return str(path)
