"""Terminal log output for the devsync CLI."""

from __future__ import annotations

import logging
import threading

import click


class ConsoleLogHandler(logging.Handler):
    """Logging handler writing through click with level markers.

    Errors get a red ``✗`` and warnings a yellow ``!`` so failures inside
    the sync loop stand out from device console output. Each record is
    written as one whole line under a lock.
    """

    def __init__(self, lock: threading.Lock | None = None) -> None:
        super().__init__()
        self._lock = lock or threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            if record.levelno >= logging.ERROR:
                msg = click.style(f"✗ {msg}", fg="red")
            elif record.levelno >= logging.WARNING:
                msg = click.style(f"! {msg}", fg="yellow")
            with self._lock:
                click.echo(msg)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False) -> ConsoleLogHandler:
    """Route the devsync logger hierarchy to the terminal.

    Args:
        verbose: Show DEBUG records.

    Returns:
        The installed handler.
    """
    handler = ConsoleLogHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))

    devsync_logger = logging.getLogger("devsync")
    for existing in devsync_logger.handlers[:]:
        devsync_logger.removeHandler(existing)
    devsync_logger.addHandler(handler)
    devsync_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # Prevent propagation to root logger
    devsync_logger.propagate = False
    return handler
