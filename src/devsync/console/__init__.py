"""Console sessions surfacing device output.

Variants:
- **SerialConsole**: subordinate console process on a point-to-point port
- **UDPLogConsole**: background UDP receiver for networked devices

Use create_console_session() to pick the variant for a connection.
"""

from devsync.console.base import ConsoleSession, create_console_session
from devsync.console.serial import SerialConsole
from devsync.console.udp import UDPLogConsole, UDPLogReceiver, discover_local_address

__all__ = [
    "ConsoleSession",
    "SerialConsole",
    "UDPLogConsole",
    "UDPLogReceiver",
    "create_console_session",
    "discover_local_address",
]
