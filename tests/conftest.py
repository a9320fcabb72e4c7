"""Shared fixtures for devsync tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from devsync.core.config import DevConfig


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a workspace with an fs/ tree."""
    root = tmp_path / "app"
    (root / "fs").mkdir(parents=True)
    return root.resolve()


@pytest.fixture
def serial_config(workspace: Path) -> DevConfig:
    """Config for a device on a local serial port."""
    return DevConfig.create(port="/dev/ttyUSB0", workspace=workspace)


@pytest.fixture
def network_config(workspace: Path) -> DevConfig:
    """Config for a device reached over the network."""
    return DevConfig.create(port="ws://192.168.1.4/rpc", workspace=workspace, udp_port=0)


@pytest.fixture
def http_config(workspace: Path) -> DevConfig:
    """Config for a device spoken to over HTTP RPC."""
    return DevConfig.create(port="http://192.168.1.4/rpc", workspace=workspace)


@pytest.fixture(autouse=True)
def reset_devsync_logger():  # type: ignore[no-untyped-def]
    """Undo CLI logging setup so caplog keeps seeing devsync records."""
    yield
    devsync_logger = logging.getLogger("devsync")
    for handler in devsync_logger.handlers[:]:
        devsync_logger.removeHandler(handler)
    devsync_logger.setLevel(logging.NOTSET)
    devsync_logger.propagate = True
