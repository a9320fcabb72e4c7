"""Persisted settings for the devsync CLI.

Settings are plain JSON in ``~/.devsync/config.json``. Command-line
options and ``DEVSYNC_*`` environment variables take precedence.

Commands:
- config show: Print persisted settings
- config set: Persist a setting
- config unset: Remove a persisted setting
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click

from devsync.core.config import DEFAULT_TOOL, DEFAULT_UDP_LOG_PORT, DevConfig

# Settings that may be persisted, with their value types
SETTINGS: dict[str, type] = {
    "port": str,
    "tool": str,
    "platform": str,
    "state_dir": str,
    "udp_port": int,
    "settle_delay": float,
}


def get_config_dir() -> Path:
    """Get the settings directory.

    Returns:
        Path to ~/.devsync.
    """
    return Path.home() / ".devsync"


def get_config_file() -> Path:
    """Get the path to the settings file."""
    return get_config_dir() / "config.json"


def load_config() -> dict[str, Any]:
    """Load persisted settings."""
    config_file = get_config_file()
    if config_file.exists():
        return dict(json.loads(config_file.read_text()))
    return {}


def save_config(config: dict[str, Any]) -> None:
    """Save persisted settings."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config, indent=2))


@click.group("config")
def config_cmd() -> None:
    """Manage persisted settings."""


@config_cmd.command("show")
def show() -> None:
    """Print persisted settings."""
    config = load_config()
    if not config:
        click.echo(f"No settings in {get_config_file()}")
        return
    for key in sorted(config):
        click.echo(f"{key} = {config[key]}")


@config_cmd.command("set")
@click.argument("key", type=click.Choice(sorted(SETTINGS)))
@click.argument("value")
def set_cmd(key: str, value: str) -> None:
    """Persist a setting."""
    try:
        converted = SETTINGS[key](value)
    except ValueError:
        click.echo(f"Error: invalid value for {key}: {value}", err=True)
        sys.exit(1)

    config = load_config()
    config[key] = converted
    save_config(config)
    click.echo(f"{key} = {converted}")


@config_cmd.command("unset")
@click.argument("key", type=click.Choice(sorted(SETTINGS)))
def unset_cmd(key: str) -> None:
    """Remove a persisted setting."""
    config = load_config()
    if config.pop(key, None) is None:
        click.echo(f"{key} is not set")
        return
    save_config(config)
    click.echo(f"Removed {key}")


def build_dev_config(options: dict[str, Any]) -> DevConfig:
    """Merge command-line options over persisted settings.

    Args:
        options: Global option values collected by the command group
            (None means "not given").

    Returns:
        The session configuration.

    Raises:
        click.UsageError: If no device port is configured or it is invalid.
    """
    settings = load_config()

    def pick(key: str, default: Any = None) -> Any:
        value = options.get(key)
        if value is None:
            value = settings.get(key, default)
        return value

    port = pick("port")
    if not port:
        raise click.UsageError(
            "No device port configured. Use --port, DEVSYNC_PORT or 'devsync config set port ...'."
        )

    try:
        return DevConfig.create(
            port=port,
            workspace=pick("workspace", "."),
            state_dir=pick("state_dir"),
            tool=pick("tool", DEFAULT_TOOL),
            platform=pick("platform"),
            udp_port=int(pick("udp_port", DEFAULT_UDP_LOG_PORT)),
            settle_delay_s=float(pick("settle_delay", 0.5)),
            ignore_patterns=list(options.get("ignore") or ()),
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e
