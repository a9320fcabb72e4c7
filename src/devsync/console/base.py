"""Console session interface and variant selection.

A console session surfaces device output while the sync engine is idle.
The engine suspends it around every remote action because the
point-to-point transport can only serve one user at a time.
"""

from __future__ import annotations

import contextlib
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from devsync.core.types import TransportKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from devsync.core.config import DevConfig
    from devsync.device.client import DeviceClient


class ConsoleSession(ABC):
    """Capability set shared by both console variants."""

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Check if device output is currently being surfaced."""

    @abstractmethod
    def start(self, wait: bool = False) -> None:
        """Start surfacing device output.

        Args:
            wait: Block until the session finishes.
        """

    @abstractmethod
    def stop(self) -> None:
        """Release the transport used by the session."""

    @contextlib.contextmanager
    def suspended(self) -> Iterator[None]:
        """Stop the session for the duration of the block.

        The session is started again on exit, even if the block raised.
        """
        self.stop()
        try:
            yield
        finally:
            self.start(wait=False)


def create_console_session(config: DevConfig, client: DeviceClient) -> ConsoleSession:
    """Select the console variant for the configured connection.

    Args:
        config: Session configuration.
        client: Device client (used by the network variant).

    Returns:
        SerialConsole for local device paths, UDPLogConsole for network URLs.
    """
    from devsync.console.serial import SerialConsole
    from devsync.console.udp import UDPLogConsole

    if config.connection.kind == TransportKind.NETWORK_STREAM:
        return UDPLogConsole(config, client)
    return SerialConsole(config)
