"""Build and flash invocations of the device tool.

This module provides:
- BuildOptions: Options for a firmware build
- Toolchain: Runs builds in the workspace and delivers firmware to the device

Firmware delivery depends on the transport: local device paths are
flashed, network devices are updated over the air. Flashing replaces the
device filesystem, so a build requested with ``preserve_config`` pushes the
managed config mirror back after the next successful flash.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from devsync.core.config import read_config_mirror
from devsync.core.types import ToolError

if TYPE_CHECKING:
    from pathlib import Path

    from devsync.core.config import DevConfig
    from devsync.device.client import DeviceClient

logger = logging.getLogger(__name__)


@dataclass
class BuildOptions:
    """Options for a firmware build."""

    local: bool = True
    clean: bool = False
    platform: str | None = None
    preserve_config: bool = True


class Toolchain:
    """Runs the device tool for builds and firmware updates.

    Both operations block until the tool exits; its output goes straight
    to the terminal.
    """

    def __init__(self, config: DevConfig, client: DeviceClient) -> None:
        self._config = config
        self._client = client
        self._restore_config = False

    @property
    def restore_pending(self) -> bool:
        """Check if the next flash will restore the device config."""
        return self._restore_config

    def build(self, options: BuildOptions | None = None) -> None:
        """Build firmware in the workspace.

        Raises:
            ToolError: If the build fails.
        """
        options = options or BuildOptions(platform=self._config.platform)
        command = [self._config.tool, "build"]
        if options.local:
            command.append("--local")
        if options.clean:
            command.append("--clean")
        platform = options.platform or self._config.platform
        if platform:
            command.extend(["--platform", platform])

        logger.info("Building firmware: %s", " ".join(command))
        self._run(command)

        if options.preserve_config:
            self._restore_config = True
        logger.info("Build finished")

    def flash(self, firmware: Path) -> None:
        """Deliver a firmware artifact to the device.

        Raises:
            ToolError: If flashing or the OTA update fails.
            MalformedConfigError: If a pending config restore finds an invalid mirror.
        """
        action = "ota" if self._config.connection.is_network else "flash"
        command = self._config.tool_command(action, str(firmware))

        logger.info("Updating firmware (%s): %s", action, firmware)
        self._run(command)

        if self._restore_config:
            self._restore_config = False
            self._push_config_mirror()
        logger.info("Firmware updated")

    def _push_config_mirror(self) -> None:
        mirror = self._config.paths.config_mirror
        if not mirror.is_file():
            logger.warning("No config mirror at %s, device config not restored", mirror)
            return

        config = read_config_mirror(mirror)
        logger.info("Restoring device config from %s", mirror)
        self._client.set_config(config, save=True, reboot=False)

    def _run(self, command: list[str]) -> None:
        try:
            result = subprocess.run(command, cwd=self._config.paths.workspace, check=False)
        except OSError as e:
            raise ToolError(" ".join(command), 127) from e
        if result.returncode != 0:
            raise ToolError(" ".join(command), result.returncode)
