"""Network-stream console session.

This module provides:
- UDPLogReceiver: Background thread forwarding UDP log datagrams to output
- UDPLogConsole: Console session for networked devices
- discover_local_address: Local address the device can send logs to

Architecture:
    Device ─udp─► UDPLogReceiver ─► stdout
       ▲
       └── Config.Set debug.udp_log_addr (on every start)

The receiver lives for the whole process. Stopping the session does not
touch it: the transport reserved during remote actions is the command
channel, and log datagrams are independent network traffic. Stopping only
waits for a pending log destination update, which does use the command
channel.
"""

from __future__ import annotations

import contextlib
import logging
import socket
import sys
import threading
from typing import IO, TYPE_CHECKING

from devsync.console.base import ConsoleSession
from devsync.core.types import DevSyncError

if TYPE_CHECKING:
    from devsync.core.config import DevConfig
    from devsync.device.client import DeviceClient

logger = logging.getLogger(__name__)

MAX_DATAGRAM_SIZE = 65535


def discover_local_address(remote_host: str | None) -> str:
    """Get the local address that routes to the device.

    Args:
        remote_host: Device host name or address.

    Returns:
        Local IP address, or 127.0.0.1 if no route is found.
    """
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            s.connect((remote_host or "8.8.8.8", 9))
            return str(s.getsockname()[0])
        finally:
            s.close()
    except OSError:
        return "127.0.0.1"


class UDPLogReceiver:
    """Receives UDP log datagrams and forwards them to an output stream.

    The socket is re-bound whenever it fails or is closed underneath the
    receiver, so log output survives network hiccups without intervention.

    Usage:
        receiver = UDPLogReceiver(port=1993)
        receiver.start()
        # Device log lines appear on stdout
        # ...
        receiver.stop()
    """

    def __init__(
        self,
        port: int,
        bind_host: str = "0.0.0.0",
        output: IO[bytes] | None = None,
        rebind_delay: float = 1.0,
        poll_interval: float = 1.0,
    ) -> None:
        """Initialize the receiver.

        Args:
            port: Local UDP port to bind.
            bind_host: Local interface to bind.
            output: Binary stream receiving datagrams (default: stdout).
            rebind_delay: Delay before re-binding after a socket failure.
            poll_interval: Receive timeout used to check for shutdown.
        """
        self._port = port
        self._bind_host = bind_host
        self._output = output if output is not None else sys.stdout.buffer
        self._rebind_delay = rebind_delay
        self._poll_interval = poll_interval

        self._sock: socket.socket | None = None
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._bound = threading.Event()

    @property
    def port(self) -> int:
        """Get the local UDP port."""
        return self._port

    @property
    def is_alive(self) -> bool:
        """Check if the receiver thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def wait_bound(self, timeout: float | None = None) -> bool:
        """Wait until the socket is bound."""
        return self._bound.wait(timeout)

    def start(self) -> None:
        """Start the receiver in a background thread."""
        if self.is_alive:
            logger.warning("UDPLogReceiver already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="UDPLogReceiver",
            daemon=True,
        )
        self._thread.start()
        logger.debug("UDPLogReceiver started on port %d", self._port)

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the receiver and wait for the thread to exit."""
        self._stop_event.set()
        self._close_socket()
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None

    def _run_loop(self) -> None:
        """Bind, receive and re-bind until stopped."""
        while not self._stop_event.is_set():
            try:
                self._bind()
                self._receive()
            except OSError as e:
                if self._stop_event.is_set():
                    break
                logger.debug("UDP log socket error: %s", e)

            self._close_socket()
            # Interruptible sleep before re-binding
            if self._stop_event.wait(self._rebind_delay):
                break

    def _bind(self) -> None:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.settimeout(self._poll_interval)
        try:
            sock.bind((self._bind_host, self._port))
        except OSError:
            sock.close()
            raise
        self._sock = sock
        self._bound.set()

    def _receive(self) -> None:
        while not self._stop_event.is_set():
            sock = self._sock
            if sock is None:
                return
            try:
                data, _addr = sock.recvfrom(MAX_DATAGRAM_SIZE)
            except TimeoutError:
                continue
            self._output.write(data)
            self._output.flush()

    def _close_socket(self) -> None:
        self._bound.clear()
        sock, self._sock = self._sock, None
        if sock is not None:
            with contextlib.suppress(OSError):
                sock.close()


class UDPLogConsole(ConsoleSession):
    """Console session for devices that push their logs over UDP.

    Every ``start()`` re-points the device at this host, since the device
    forgets the destination across reboots and firmware updates.
    """

    def __init__(
        self,
        config: DevConfig,
        client: DeviceClient,
        receiver: UDPLogReceiver | None = None,
    ) -> None:
        self._config = config
        self._client = client
        self._receiver = receiver
        self._announcer: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Check if the log receiver is alive."""
        return self._receiver is not None and self._receiver.is_alive

    @property
    def receiver(self) -> UDPLogReceiver | None:
        """Get the log receiver."""
        return self._receiver

    @property
    def log_address(self) -> str:
        """Get the ``host:port`` the device is told to send logs to."""
        host = discover_local_address(self._config.connection.host)
        return f"{host}:{self._config.udp_port}"

    def start(self, wait: bool = False) -> None:
        """Ensure the receiver runs, then point the device at it.

        A pending announcement is waited for first, so at most one
        announcer talks to the device at a time.

        Args:
            wait: Wait for the device to acknowledge the log destination.
        """
        if self._receiver is None:
            self._receiver = UDPLogReceiver(self._config.udp_port)
        if not self._receiver.is_alive:
            self._receiver.start()

        self.join_announcer()
        address = self.log_address
        if wait:
            self._client.set_log_destination(address)
            return

        self._announcer = threading.Thread(
            target=self._announce,
            args=(address,),
            name="UDPLogAnnounce",
            daemon=True,
        )
        self._announcer.start()

    def stop(self) -> None:
        """Release the command channel; the receiver keeps running.

        Waits for a pending log destination update, since it is a remote
        call of its own.
        """
        self.join_announcer()

    def join_announcer(self, timeout: float | None = None) -> None:
        """Wait for a pending log destination update."""
        announcer = self._announcer
        if announcer is None:
            return
        announcer.join(timeout)
        if not announcer.is_alive():
            self._announcer = None

    def _announce(self, address: str) -> None:
        try:
            self._client.set_log_destination(address)
            logger.debug("Device logs directed to %s", address)
        except DevSyncError as e:
            logger.warning("Could not direct device logs to %s: %s", address, e)
