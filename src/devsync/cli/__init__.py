"""Command-line interface for devsync.

This module provides the main CLI entry point and assembles all commands.

Commands:
- watch: Keep the device in sync with the workspace
- console: Show device output in the foreground
- status: Print device status
- build: Build firmware in the workspace
- flash: Flash a firmware artifact
- config: Manage persisted settings
"""

from __future__ import annotations

from pathlib import Path

import click

from devsync.cli.config import (
    build_dev_config,
    config_cmd,
    get_config_dir,
    get_config_file,
    load_config,
    save_config,
)
from devsync.cli.device import build, console, flash, status
from devsync.cli.output import setup_logging
from devsync.cli.watch import watch


@click.group()
@click.version_option(package_name="devsync")
@click.option("--port", "-p", envvar="DEVSYNC_PORT", help="Device port: /dev/ttyUSB0, COM3, ws://host/rpc, http://host.")
@click.option(
    "--workspace",
    "-C",
    envvar="DEVSYNC_WORKSPACE",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Workspace root (default: current directory).",
)
@click.option("--state-dir", envvar="DEVSYNC_STATE_DIR", help="State directory (default: <workspace>/.devsync).")
@click.option("--tool", envvar="DEVSYNC_TOOL", help="Device tool binary (default: mos).")
@click.option("--platform", envvar="DEVSYNC_PLATFORM", help="Build platform.")
@click.option("--udp-port", envvar="DEVSYNC_UDP_PORT", type=int, help="Local UDP log port (network devices).")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output.")
@click.pass_context
def cli(
    ctx: click.Context,
    port: str | None,
    workspace: Path | None,
    state_dir: str | None,
    tool: str | None,
    platform: str | None,
    udp_port: int | None,
    verbose: bool,
) -> None:
    """devsync - keep an embedded device in step with your workspace."""
    ctx.obj = {
        "port": port,
        "workspace": workspace,
        "state_dir": state_dir,
        "tool": tool,
        "platform": platform,
        "udp_port": udp_port,
    }
    setup_logging(verbose)


cli.add_command(watch)
cli.add_command(console)
cli.add_command(status)
cli.add_command(build)
cli.add_command(flash)
cli.add_command(config_cmd)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "main",
    "build_dev_config",
    "get_config_dir",
    "get_config_file",
    "load_config",
    "save_config",
]
