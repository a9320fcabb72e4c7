"""Remote action client for the device.

This module provides:
- DeviceClient: JSON RPC calls to the device (info, config, files, reboot)
- format_status: Human-readable device status summary

Two transports sit behind the same client:
- Tool transport: runs ``<tool> --port <conn> call <Method> <json>``
- HTTP transport: POSTs JSON to ``<url>/rpc/<Method>`` (http/https ports)
"""

from __future__ import annotations

import base64
import json
import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from devsync.core.types import DeviceUnreachableError, RemoteCallError

if TYPE_CHECKING:
    from devsync.core.config import DevConfig

logger = logging.getLogger(__name__)

# Raw bytes per FS.Put request on the HTTP transport
PUT_CHUNK_SIZE = 1024

# Keys shown in the startup status summary, in display order
STATUS_KEYS = ("id", "app", "fw_version", "fw_id", "arch", "mac")


class DeviceClient:
    """Performs remote actions on the device.

    Usage:
        client = DeviceClient(config)
        info = client.get_info()
        client.download_config(config.paths.config_mirror)
        client.put_file(Path("fs/init.js"), "init.js")
    """

    def __init__(self, config: DevConfig) -> None:
        """Initialize the client.

        Args:
            config: Session configuration.
        """
        self._config = config
        self._http: httpx.Client | None = None
        if config.connection.is_http:
            base_url = config.connection.raw.rstrip("/")
            if base_url.endswith("/rpc"):
                base_url = base_url[: -len("/rpc")]
            self._http = httpx.Client(base_url=base_url, timeout=config.http_timeout)

    def close(self) -> None:
        """Close the HTTP client, if any."""
        if self._http:
            self._http.close()
            self._http = None

    def __enter__(self) -> DeviceClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    # === Transport ===

    def call(self, method: str, args: dict[str, Any] | None = None) -> Any:
        """Invoke an RPC method and return its parsed result.

        Args:
            method: RPC method name, e.g. "Sys.GetInfo".
            args: Optional JSON arguments.

        Returns:
            Parsed JSON result (None for an empty reply).

        Raises:
            RemoteCallError: On transport failure or a non-JSON reply.
        """
        logger.debug("RPC %s %s", method, args)
        if self._http is not None:
            return self._call_http(self._http, method, args)
        return self._call_tool(method, args)

    def _call_tool(self, method: str, args: dict[str, Any] | None) -> Any:
        command = self._config.tool_command("call", method)
        if args is not None:
            command.append(json.dumps(args))

        try:
            result = subprocess.run(command, capture_output=True, text=True, check=False)
        except OSError as e:
            raise RemoteCallError(method, f"cannot run {self._config.tool}: {e}") from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise RemoteCallError(method, detail)

        return _parse_reply(method, result.stdout)

    def _call_http(self, http: httpx.Client, method: str, args: dict[str, Any] | None) -> Any:
        try:
            response = http.post(f"/rpc/{method}", json=args or {})
        except httpx.RequestError as e:
            raise RemoteCallError(method, str(e)) from e

        if response.status_code >= 400:
            raise RemoteCallError(method, f"HTTP {response.status_code}: {response.text.strip()}")

        return _parse_reply(method, response.text)

    # === System ===

    def get_info(self) -> dict[str, Any]:
        """Get device information (Sys.GetInfo)."""
        info = self.call("Sys.GetInfo")
        if not isinstance(info, dict):
            raise RemoteCallError("Sys.GetInfo", "expected a JSON object")
        return info

    def reboot(self) -> None:
        """Reboot the device."""
        self.call("Sys.Reboot")

    # === Config ===

    def get_config(self) -> Any:
        """Get the device configuration (Config.Get)."""
        return self.call("Config.Get")

    def set_config(self, config: dict[str, Any], save: bool = True, reboot: bool = False) -> None:
        """Apply a configuration to the device.

        Args:
            config: Full or partial configuration object.
            save: Persist the configuration on the device.
            reboot: Reboot after saving.
        """
        self.call("Config.Set", {"config": config})
        if save:
            self.call("Config.Save", {"reboot": reboot})

    def download_config(self, dest: Path) -> dict[str, Any]:
        """Download the device config into a local JSON file.

        The file is replaced atomically so a watcher sees a single change.

        Args:
            dest: Destination path.

        Returns:
            The downloaded configuration.

        Raises:
            DeviceUnreachableError: If the device did not return a JSON object.
        """
        try:
            config = self.get_config()
        except RemoteCallError as e:
            raise DeviceUnreachableError(f"Cannot fetch config from {self._config.connection}: {e}") from e

        if not isinstance(config, dict):
            raise DeviceUnreachableError(
                f"Device at {self._config.connection} did not return a config object"
            )

        dest.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=2, sort_keys=True)
                f.write("\n")
            os.replace(tmp_name, dest)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Config written to %s", dest)
        return config

    def set_log_destination(self, address: str) -> None:
        """Direct the device's UDP log stream to ``host:port``."""
        self.set_config({"debug": {"udp_log_addr": address}}, save=True, reboot=False)

    # === Filesystem ===

    def put_file(self, local_path: Path, remote_name: str) -> None:
        """Upload a local file to the device filesystem.

        Args:
            local_path: File to upload.
            remote_name: Destination file name on the device.
        """
        if self._http is None:
            self._run_tool("put", str(local_path), remote_name)
            return

        data = local_path.read_bytes()
        offset = 0
        while True:
            chunk = data[offset : offset + PUT_CHUNK_SIZE]
            self.call(
                "FS.Put",
                {
                    "filename": remote_name,
                    "data": base64.b64encode(chunk).decode("ascii"),
                    "append": offset > 0,
                },
            )
            offset += PUT_CHUNK_SIZE
            if offset >= len(data):
                break

    def remove_file(self, remote_name: str) -> None:
        """Remove a file from the device filesystem."""
        self.call("FS.Remove", {"filename": remote_name})

    def _run_tool(self, *args: str) -> None:
        command = self._config.tool_command(*args)
        try:
            result = subprocess.run(command, capture_output=True, text=True, check=False)
        except OSError as e:
            raise RemoteCallError(args[0], f"cannot run {self._config.tool}: {e}") from e
        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise RemoteCallError(args[0], detail)


def _parse_reply(method: str, text: str) -> Any:
    """Parse an RPC reply body as JSON."""
    text = text.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise RemoteCallError(method, f"invalid JSON reply: {text[:100]}") from e


def format_status(info: dict[str, Any], connection: object) -> str:
    """Render a device status summary.

    Args:
        info: Sys.GetInfo result.
        connection: Connection the device was reached through.

    Returns:
        Multi-line summary.
    """
    lines = [f"Device at {connection}:"]
    for key in STATUS_KEYS:
        if info.get(key) is not None:
            lines.append(f"  {key}: {info[key]}")

    wifi = info.get("wifi")
    if isinstance(wifi, dict) and wifi.get("sta_ip"):
        lines.append(f"  ip: {wifi['sta_ip']}")

    return "\n".join(lines)
