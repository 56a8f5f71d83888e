"""Shared fixtures for transport and remote tests."""

from __future__ import annotations

import time

import pytest

from placeholder import PostsRemote
from retrofire import HttpTransport
from retrofire.settings import TransportConfig


@pytest.fixture
def transport():
    with HttpTransport(TransportConfig(timeout_seconds=5, max_workers=2)) as instance:
        yield instance


@pytest.fixture
def remote(transport):
    return PostsRemote(transport)


@pytest.fixture
def eventually():
    """Poll `check` until it returns truthy or the deadline passes."""

    def _wait(check, timeout=5.0, interval=0.01):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if check():
                return True
            time.sleep(interval)
        return bool(check())

    return _wait
