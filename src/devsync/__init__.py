"""devsync - development loop orchestrator for embedded devices."""

__version__ = "0.1.0"
