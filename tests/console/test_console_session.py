"""Tests for the console session interface and variant selection."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from devsync.console.base import ConsoleSession, create_console_session
from devsync.console.serial import SerialConsole
from devsync.console.udp import UDPLogConsole
from devsync.core.config import DevConfig


class RecordingSession(ConsoleSession):
    """Session recording start/stop calls."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    @property
    def is_running(self) -> bool:
        return bool(self.calls) and self.calls[-1] == "start"

    def start(self, wait: bool = False) -> None:
        self.calls.append("start")

    def stop(self) -> None:
        self.calls.append("stop")


class TestSuspended:
    """Tests for ConsoleSession.suspended()."""

    def test_stops_then_starts(self) -> None:
        """The session is stopped inside the block and started after it."""
        session = RecordingSession()
        with session.suspended():
            session.calls.append("act")

        assert session.calls == ["stop", "act", "start"]

    def test_starts_after_failure(self) -> None:
        """The session is resumed even if the action fails."""
        session = RecordingSession()
        with pytest.raises(RuntimeError):
            with session.suspended():
                raise RuntimeError("upload failed")

        assert session.calls == ["stop", "start"]


class TestCreateConsoleSession:
    """Tests for variant selection."""

    def test_serial_port(self, serial_config: DevConfig) -> None:
        """Local device paths get the subordinate console."""
        assert isinstance(create_console_session(serial_config, MagicMock()), SerialConsole)

    def test_network_port(self, network_config: DevConfig) -> None:
        """Network URLs get the UDP log console."""
        assert isinstance(create_console_session(network_config, MagicMock()), UDPLogConsole)
