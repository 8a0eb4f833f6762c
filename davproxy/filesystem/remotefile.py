"""Module that implements read-only handles for files that only exist remotely."""

from __future__ import annotations

import io
import os
import threading
from typing import List, Tuple

from davproxy.filesystem.common import (
    FileInfo,
    invalid_operation,
    RemoteWriteError,
)
from davproxy.logger import log
from davproxy.remote.storage import RemoteStorage


class RemoteFile(io.RawIOBase):
    """
    Seekable, read-only file object backed by ranged reads of a remote file.

    The size of the file is determined once when the handle is opened and is never
    refreshed. Every readinto() call results in exactly one new ranged read on the
    remote storage that is closed before the call returns. No data is cached in between
    calls, so reading the same range twice also fetches it twice.

    The offset is guarded by a lock that belongs to this handle only. Two handles for
    the same path don't share anything.
    """

    def __init__(self, remote: RemoteStorage, path: str, info: FileInfo) -> None:
        """Instantiate handle for the remote path with previously retrieved metadata."""
        super().__init__()

        self._remote = remote
        self._path = path
        self._info = info

        self._size = info.size
        self._is_dir = info.is_dir
        self._offset = 0

        self._lock = threading.Lock()

    @staticmethod
    def open(remote: RemoteStorage, path: str) -> RemoteFile:
        """Open a handle for the remote path, failing if it does not exist."""
        info = remote.stat(path)

        log.debug(
            f"opened remote file {path} (size: {info.size}, directory: {info.is_dir})"
        )

        return RemoteFile(remote, path, info)

    @property
    def path(self) -> str:
        """Return the remote path of the file."""
        return self._path

    @property
    def size(self) -> int:
        """Return the size of the file as it was when the handle was opened."""
        return self._size

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def seekable(self) -> bool:
        return not self._is_dir

    def readinto(self, b) -> int:
        """
        Read up to len(b) bytes at the current offset into b.

        Returns 0 once the offset has reached the end of the file.
        """
        with self._lock:
            if self._is_dir:
                raise invalid_operation("cannot read from a directory")

            if len(b) == 0:
                return 0

            if self._offset >= self._size:
                log.debug(f"end of remote file {self._path} ({self._size} bytes)")
                return 0

            to_read = min(len(b), self._size - self._offset)

            log.debug(
                f"reading {to_read} bytes at offset {self._offset} of {self._path}"
            )

            stream = self._remote.read_range(self._path, self._offset, to_read)

            try:
                data = stream.read(to_read)
            finally:
                stream.close()

            n = len(data)
            b[:n] = data

            self._offset += n

            return n

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """
        Move the offset without doing any I/O.

        Positions beyond the end of the file are clamped to the size of the file, while
        negative positions are rejected and leave the offset unchanged.
        """
        with self._lock:
            if self._is_dir:
                raise invalid_operation("cannot seek in a directory")

            if whence == os.SEEK_SET:
                new_offset = offset
            elif whence == os.SEEK_CUR:
                new_offset = self._offset + offset
            elif whence == os.SEEK_END:
                new_offset = self._size + offset
            else:
                raise invalid_operation(f"invalid whence ({whence})")

            if new_offset < 0:
                raise invalid_operation(f"negative seek position {new_offset}")

            self._offset = min(new_offset, self._size)

            return self._offset

    def write(self, b) -> int:
        log.error(f"refusing to write to remote file {self._path}")
        raise RemoteWriteError(self._path)

    def truncate(self, size=None) -> int:
        raise RemoteWriteError(self._path)

    def stat(self) -> FileInfo:
        """Return the metadata of the file as it was when the handle was opened."""
        return self._info

    def readdir(self, count: int = 0) -> Tuple[List[FileInfo], bool]:
        """
        List the remote directory in a single call.

        At most count entries are returned if count is positive. Unlike the directory
        handles of the proxy file system this listing is not paginated, so the end
        marker is always set.
        """
        if not self._is_dir:
            raise invalid_operation("not a directory")

        entries = self._remote.readdir(self._path)

        if count > 0:
            entries = entries[:count]

        return entries, True
