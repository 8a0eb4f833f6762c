"""Module with fixtures shared by the file system, remote and server tests."""

import io
from unittest import mock

import pytest

from davproxy.filesystem.common import FileInfo
from davproxy.remote.storage import RemoteStorage


def remote_file(name, size=0):
    return FileInfo.remote(name, size, False, 1000.0)


def remote_dir(name):
    return FileInfo.remote(name, 0, True, 1000.0)


def ranged_reader(data):
    """Create a read_range() side effect that serves ranges of the given bytes."""

    def read_range(path, offset, length=-1):
        end = len(data) if length < 0 else offset + length
        return io.BytesIO(data[offset:end])

    return read_range


@pytest.fixture
def remote():
    return mock.Mock(spec=RemoteStorage)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove environment variables that provide defaults for command-line options."""
    for name in [
        "PORT",
        "LOCAL_PATH",
        "AUTH_ENABLED",
        "AUTH_USER",
        "AUTH_PASS",
        "WEBDAV_URL",
        "WEBDAV_USER",
        "WEBDAV_PASS",
    ]:
        monkeypatch.delenv(name, raising=False)
