"""One-shot device commands for the devsync CLI.

Commands:
- status: Print device status
- console: Show device output in the foreground
- build: Build firmware in the workspace
- flash: Deliver a firmware artifact to the device
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import click

from devsync.cli.config import build_dev_config
from devsync.core.types import DevSyncError, ToolError
from devsync.device import BuildOptions, DeviceClient, Toolchain, format_status


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Print device status."""
    config = build_dev_config(ctx.obj)
    with DeviceClient(config) as client:
        try:
            info = client.get_info()
        except DevSyncError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
    click.echo(format_status(info, config.connection))


@click.command()
@click.pass_context
def console(ctx: click.Context) -> None:
    """Show device output until interrupted."""
    from devsync.console import create_console_session

    config = build_dev_config(ctx.obj)
    with DeviceClient(config) as client:
        session = create_console_session(config, client)
        try:
            session.start(wait=True)
            # The network variant returns once the device is pointed at us
            while session.is_running:
                time.sleep(0.5)
        except DevSyncError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        except KeyboardInterrupt:
            click.echo("\nStopping...")
        finally:
            session.stop()


@click.command()
@click.option("--clean", is_flag=True, help="Clean build.")
@click.pass_context
def build(ctx: click.Context, clean: bool) -> None:
    """Build firmware in the workspace."""
    config = build_dev_config(ctx.obj)
    with DeviceClient(config) as client:
        toolchain = Toolchain(config, client)
        try:
            toolchain.build(
                BuildOptions(local=True, clean=clean, platform=config.platform, preserve_config=False)
            )
        except ToolError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(e.returncode or 1)


@click.command()
@click.argument("firmware", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.pass_context
def flash(ctx: click.Context, firmware: Path | None) -> None:
    """Flash FIRMWARE (default: build/fw.zip) onto the device."""
    config = build_dev_config(ctx.obj)
    firmware = firmware or config.paths.firmware
    if not firmware.is_file():
        click.echo(f"Error: firmware not found: {firmware}", err=True)
        sys.exit(1)

    with DeviceClient(config) as client:
        try:
            Toolchain(config, client).flash(firmware)
        except ToolError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(e.returncode or 1)
