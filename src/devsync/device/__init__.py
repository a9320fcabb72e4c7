"""Device module - Remote actions, builds and firmware updates.

Components:
- **DeviceClient**: JSON RPC to the device over the device tool or HTTP
- **Toolchain**: Firmware build and flash/OTA invocations
"""

from devsync.device.client import DeviceClient, format_status
from devsync.device.toolchain import BuildOptions, Toolchain

__all__ = [
    "BuildOptions",
    "DeviceClient",
    "Toolchain",
    "format_status",
]
