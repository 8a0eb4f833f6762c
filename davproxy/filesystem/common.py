"""Data structures and errors used by multiple file system components."""

from __future__ import annotations

from dataclasses import dataclass
import errno
import os
import stat
from typing import Optional


@dataclass
class FileInfo:
    """
    Snapshot of the metadata of a single file system entry.

    Entries are produced by both the local cache directory and the remote server. They
    are never refreshed after creation, so a FileInfo describes the entry at the moment
    it was retrieved.
    """

    name: str
    size: int
    mode: int
    mtime: float

    @property
    def is_dir(self) -> bool:
        """Return whether the entry is a directory."""
        return stat.S_ISDIR(self.mode)

    @staticmethod
    def from_stat(name: str, st: os.stat_result) -> FileInfo:
        """Instantiate from the attributes contained within an os.stat_result object."""
        return FileInfo(
            name=name, size=st.st_size, mode=st.st_mode, mtime=st.st_mtime,
        )

    @staticmethod
    def remote(name: str, size: int, is_dir: bool, mtime: float) -> FileInfo:
        """Instantiate for a remote entry, which carries no permission information."""
        mode = stat.S_IFDIR | 0o755 if is_dir else stat.S_IFREG | 0o644

        return FileInfo(name=name, size=0 if is_dir else size, mode=mode, mtime=mtime)


class RemoteError(OSError):
    """Failure reported by (or while talking to) the remote server."""


class RemoteWriteError(OSError):
    """Attempt to write to a file that only exists on the remote server."""

    def __init__(self, path: str) -> None:
        """Instantiate for the remote file at the given path."""
        super().__init__(errno.EROFS, "remote writes not supported", path)


class CombinedError(OSError):
    """
    Failure of both the local and the remote side of a mutating operation.

    The exception is chained from the local failure, but the remote failure is kept as
    well so that neither cause gets lost.
    """

    def __init__(
        self, operation: str, local_error: OSError, remote_error: OSError
    ) -> None:
        """Instantiate from the failures of both sides."""
        super().__init__(
            f"failed to {operation} locally and remotely: "
            f"{local_error} (remote: {remote_error})"
        )

        self.operation = operation
        self.local_error = local_error
        self.remote_error = remote_error


def invalid_operation(message: Optional[str] = None) -> OSError:
    """Create the error for an operation that makes no sense for a handle."""
    return OSError(errno.EINVAL, message or os.strerror(errno.EINVAL))


def not_found(path: str) -> FileNotFoundError:
    """Create the error for a path that doesn't exist in any of the sources."""
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
