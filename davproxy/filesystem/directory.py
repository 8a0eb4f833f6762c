"""Module that implements directory handles with paginated listing."""

from typing import Callable, List, Optional, Tuple

from davproxy.filesystem.common import FileInfo, invalid_operation


class DirectoryListing:
    """
    Handle for an opened directory whose entries are served in batches.

    The entries are retrieved through the lister on the first call to readdir() and
    never again for the lifetime of the handle. Every readdir() call continues where the
    previous one left off, similar to readdir(3).

    Byte-level operations like read(), seek() and write() are not meaningful for a
    directory and always fail with EINVAL.
    """

    def __init__(
        self, path: str, lister: Callable[[str], List[FileInfo]], info: FileInfo
    ) -> None:
        """Instantiate directory handle for the path with the given lister."""
        self._path = path
        self._lister = lister
        self._info = info

        self._entries: Optional[List[FileInfo]] = None
        self._cursor = 0
        self._exhausted = False

    @property
    def path(self) -> str:
        """Return the path of the directory."""
        return self._path

    def readdir(self, count: int = 0) -> Tuple[List[FileInfo], bool]:
        """
        Return the next batch of directory entries.

        If count is zero or negative then all remaining entries are returned, otherwise
        at most count entries are. The second element of the returned tuple is set once
        the end of the listing has been reached. It is set on the same call that returns
        the last entries, and on every call after that.

        Errors from the lister are passed on as-is and the listing is attempted again
        on the next call.
        """
        if self._entries is None:
            self._entries = list(self._lister(self._path))
            self._cursor = 0

        if self._exhausted:
            return [], True

        if count <= 0:
            batch = self._entries[self._cursor :]
            self._cursor = len(self._entries)
            self._exhausted = True

            return batch, False

        end = min(self._cursor + count, len(self._entries))

        batch = self._entries[self._cursor : end]
        self._cursor = end

        if end >= len(self._entries):
            self._exhausted = True

        return batch, self._exhausted

    def stat(self) -> FileInfo:
        """Return the metadata of the directory as it was when it was opened."""
        return self._info

    def read(self, size: int = -1) -> bytes:
        raise invalid_operation("cannot read from a directory")

    def readinto(self, b: bytearray) -> int:
        raise invalid_operation("cannot read from a directory")

    def write(self, b: bytes) -> int:
        raise invalid_operation("cannot write to a directory")

    def seek(self, offset: int, whence: int = 0) -> int:
        raise invalid_operation("cannot seek in a directory")

    def close(self) -> None:
        """Close the handle, which has no resources to release."""

    def __enter__(self) -> "DirectoryListing":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
