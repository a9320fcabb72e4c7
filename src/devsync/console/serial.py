"""Point-to-point console session.

Runs ``<tool> --port <conn> console`` as a subordinate process attached to
the same transport the remote actions use, so it must be stopped before
every action and started again afterwards.
"""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

from devsync.console.base import ConsoleSession
from devsync.core.types import SubordinateProcessError

if TYPE_CHECKING:
    from devsync.core.config import DevConfig

logger = logging.getLogger(__name__)


class SerialConsole(ConsoleSession):
    """Console session backed by a subordinate console process."""

    def __init__(self, config: DevConfig, stop_timeout: float = 3.0) -> None:
        """Initialize the session.

        Args:
            config: Session configuration.
            stop_timeout: Grace period after SIGTERM before the process is killed.
        """
        self._config = config
        self._stop_timeout = stop_timeout
        self._process: subprocess.Popen[bytes] | None = None

    @property
    def is_running(self) -> bool:
        """Check if a console process is tracked and alive."""
        return self._process is not None and self._process.poll() is None

    @property
    def pid(self) -> int | None:
        """Get the tracked console process id."""
        return self._process.pid if self._process else None

    def start(self, wait: bool = False) -> None:
        """Spawn the console process unless one is already tracked."""
        if self._process is not None:
            if self._process.poll() is None:
                return
            self._report_exit(self._process)

        command = self._config.tool_command("console")
        logger.debug("Starting console: %s", " ".join(command))
        self._process = subprocess.Popen(command)

        if wait:
            try:
                self._process.wait()
            finally:
                self._process = None

    def stop(self) -> None:
        """Terminate the console process, if one is tracked."""
        process = self._process
        if process is None:
            return

        self._process = None
        if process.poll() is not None:
            logger.debug("Console already exited with code %s", process.returncode)
            return

        logger.debug("Stopping console (pid %s)", process.pid)
        process.terminate()
        try:
            process.wait(timeout=self._stop_timeout)
        except subprocess.TimeoutExpired:
            logger.warning("Console did not exit after SIGTERM, killing it")
            process.kill()
            process.wait()

    def _report_exit(self, process: subprocess.Popen[bytes]) -> None:
        error = SubordinateProcessError(
            f"Console exited unexpectedly with code {process.returncode}, restarting"
        )
        logger.warning("%s", error)
        self._process = None
