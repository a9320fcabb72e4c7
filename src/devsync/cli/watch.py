"""Watch command for the devsync CLI.

Commands:
- watch: Mirror workspace changes onto the device while showing its console
"""

from __future__ import annotations

import sys

import click

from devsync.cli.config import build_dev_config


@click.command()
@click.option(
    "--ignore",
    "-i",
    multiple=True,
    help="Extra pattern to ignore (repeatable); prefix with ! to keep matching files.",
)
@click.option(
    "--no-preserve-config",
    is_flag=True,
    help="Do not restore the device config after flashing a triggered build.",
)
@click.pass_context
def watch(ctx: click.Context, ignore: tuple[str, ...], no_preserve_config: bool) -> None:
    """Watch the workspace and keep the device in sync.

    \b
    fs/<name>            uploaded to / removed from the device as <name>
    build/fw.zip         flashed (or sent over the air) when it appears
    <state>/config.json  device config mirror; edits are pushed and applied
    <state>/reboot       touch to reboot the device
    <state>/build        touch to run a local firmware build

    Editor, VCS and temp files (*.tmp, *.swp, *~, .git, ...) are skipped
    everywhere, fs/ included. Use --ignore "!*.tmp" or a .devsyncignore
    line to upload such files anyway.
    """
    from devsync.console import create_console_session
    from devsync.core.types import DeviceUnreachableError
    from devsync.device import DeviceClient, Toolchain
    from devsync.sync import FileWatcher, SyncEngine

    config = build_dev_config({**ctx.obj, "ignore": ignore})
    if no_preserve_config:
        config.preserve_config = False

    client = DeviceClient(config)
    toolchain = Toolchain(config, client)
    console = create_console_session(config, client)
    engine = SyncEngine(config, client, toolchain, console)

    try:
        engine.startup()
    except DeviceUnreachableError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        client.close()
        sys.exit(1)

    watcher = FileWatcher(
        engine.watch_paths,
        settle_delay_s=config.settle_delay_s,
        ignore_patterns=config.ignore_patterns,
    )
    watcher.start()
    click.echo("Watching for changes... (Ctrl+C to stop)\n")

    try:
        engine.run(watcher)
    except KeyboardInterrupt:
        click.echo("\nStopping...")
    finally:
        watcher.stop()
        engine.shutdown()
        client.close()

    stats = engine.stats
    parts = [f"{stats.processed} handled", f"{stats.suppressed} suppressed"]
    if stats.failed:
        parts.append(click.style(f"{stats.failed} failed", fg="red"))
    click.echo(f"  ✓ {', '.join(parts)}")
