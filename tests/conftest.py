"""Shared fixtures: a fake remote client and environment helpers."""

import logging
import sys

import pytest

sys.path.insert(0, "src")

from mirth_exporter.api_clients import (
    CHANNEL_STATISTICS_API,
    CHANNEL_STATUSES_API,
    SERVER_VERSION_API,
)
from mirth_exporter.config import get_settings
from mirth_exporter.errors import TransportError
from payloads import STATISTICS_XML, STATUSES_XML


class FakeMirthClient:
    """Stand-in for MirthClient that serves canned bodies per path.

    A value that is an exception instance is raised instead of returned, and
    a path with no entry fails like an unreachable server.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def fetch(self, path: str) -> bytes:
        self.calls.append(path)
        response = self.responses.get(path)
        if response is None:
            raise TransportError("ConnectError: connection refused", path=path)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def healthy_client():
    """Fake client answering all three endpoints."""
    return FakeMirthClient(
        {
            CHANNEL_STATUSES_API: STATUSES_XML,
            CHANNEL_STATISTICS_API: STATISTICS_XML,
            SERVER_VERSION_API: b"  3.9.0\n",
        }
    )


@pytest.fixture
def mirth_env(monkeypatch):
    """Minimal environment for Settings()."""
    monkeypatch.setenv("MIRTH_ENDPOINT", "https://mirth.test:8443")
    monkeypatch.setenv("MIRTH_USERNAME", "admin")
    monkeypatch.setenv("MIRTH_PASSWORD", "s3cret")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def restore_root_logger():
    """Undo configure_logging() side effects on the root logger."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
