"""Module defining the narrow set of operations through which remote storage is used."""

from abc import ABC, abstractmethod
from typing import BinaryIO, List

from davproxy.filesystem.common import FileInfo


class RemoteStorage(ABC):
    """
    Capability to access a remote file hierarchy.

    Paths are always absolute and "/"-rooted. Failures are reported as OSError (or one
    of its subclasses like FileNotFoundError) so that callers can handle local and
    remote failures in the same way.

    Implementations must be safe to use concurrently for distinct paths.
    """

    @abstractmethod
    def stat(self, path: str) -> FileInfo:
        """Retrieve the metadata of the entry at the given path."""

    @abstractmethod
    def readdir(self, path: str) -> List[FileInfo]:
        """List the entries of the directory at the given path."""

    @abstractmethod
    def read_range(self, path: str, offset: int, length: int = -1) -> BinaryIO:
        """
        Open a stream with the bytes [offset, offset + length) of a file.

        A length of -1 (or any other length below 1) requests everything from the offset
        up to the end of the file.
        The caller is responsible for closing the stream.
        """

    @abstractmethod
    def makedirs(self, path: str, mode: int) -> None:
        """Create a directory along with any missing parents."""

    @abstractmethod
    def remove_all(self, path: str) -> None:
        """Remove an entry and everything below it, succeeding if it doesn't exist."""

    @abstractmethod
    def rename(self, old: str, new: str, overwrite: bool) -> None:
        """Move an entry to a new path."""
