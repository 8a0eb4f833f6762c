"""Module that implements handles for files in the local cache directory."""

import io
import os
from typing import List, Tuple

from davproxy.filesystem.common import FileInfo


def _mode_from_flags(flags: int) -> str:
    """Derive the io.FileIO mode string for a descriptor opened with os.open() flags."""
    access = flags & os.O_ACCMODE
    append = flags & os.O_APPEND

    if access == os.O_RDONLY:
        return "r"
    elif access == os.O_WRONLY:
        return "a" if append else "w"
    else:
        return "a+" if append else "r+"


class LocalFile(io.FileIO):
    """
    Raw file object for a file in the cache directory.

    Reads, writes and seeks have their regular local semantics. This class only adds the
    stat() and readdir() calls that all handles of the proxy file system provide.
    """

    def __init__(self, fd: int, flags: int, path: str) -> None:
        """Take ownership of a descriptor opened with os.open() using the given flags."""
        super().__init__(fd, _mode_from_flags(flags), closefd=True)

        self._path = path

    @property
    def path(self) -> str:
        """Return the "/"-rooted path of the file within the proxy file system."""
        return self._path

    def stat(self) -> FileInfo:
        """Retrieve the current metadata of the file."""
        return FileInfo.from_stat(os.path.basename(self._path), os.fstat(self.fileno()))

    def readdir(self, count: int = 0) -> Tuple[List[FileInfo], bool]:
        raise NotADirectoryError(self._path)
