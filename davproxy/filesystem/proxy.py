"""
Module that implements the file system that combines the cache directory with a remote.

It is designed to be served by davproxy.server, but can be used by any protocol server
that works with paths and file handles.
"""

import os
import posixpath
import shutil
import stat
from typing import Callable, List, Optional, Set, Union

from davproxy.filesystem.common import CombinedError, FileInfo, not_found
from davproxy.filesystem.directory import DirectoryListing
from davproxy.filesystem.localfile import LocalFile
from davproxy.filesystem.remotefile import RemoteFile
from davproxy.logger import log, summarize
from davproxy.remote.storage import RemoteStorage

Handle = Union[LocalFile, RemoteFile, DirectoryListing]


class ProxyFileSystem:
    """
    File system that merges a local cache directory with remote storage.

    The cache directory mirrors the remote hierarchy path for path. Whenever a path
    exists in the cache directory, the local entry wins and the remote storage is not
    consulted at all. The only exception is the root, whose metadata always comes from
    the remote storage because the cache directory itself always exists.

    * Metadata and file contents are looked up locally first and fall back to the
      remote storage if the path is not available locally.
    * Directory listings are the union of the local and remote listing, with local
      entries taking precedence if both contain an entry with the same name.
    * Files that only exist remotely can only be opened for reading.
    * Creating directories, removing and renaming are applied to both sides. These
      succeed if at least one of the sides succeeds.

    There is no state shared between calls, so all operations can safely be invoked
    concurrently.
    """

    def __init__(self, local_path: str, remote: RemoteStorage) -> None:
        """Instantiate file system with the cache directory and the remote storage."""
        self._local_path = local_path
        self._remote = remote

    @staticmethod
    def clean_path(path: str) -> str:
        """Normalize a path into an absolute "/"-rooted path without . or .. parts."""
        relative = posixpath.normpath("/" + path).lstrip("/")

        return "/" + relative

    def local_file_path(self, path: str) -> str:
        """Return the location of the path within the cache directory."""
        relative = self.clean_path(path).lstrip("/")

        if not relative:
            return os.path.normpath(self._local_path)

        return os.path.join(self._local_path, *relative.split("/"))

    #
    # Metadata access
    #

    def stat(self, path: str) -> FileInfo:
        """Retrieve metadata from the cache directory or from the remote storage."""
        path = self.clean_path(path)
        local_path = self.local_file_path(path)

        if path != "/":
            try:
                st = os.stat(local_path)
            except OSError:
                pass
            else:
                log.debug(f"stat (local): {path}")
                return FileInfo.from_stat(posixpath.basename(path), st)

        log.debug(f"stat (remote): {path}")
        return self._remote.stat(path)

    def readdir(self, path: str) -> List[FileInfo]:
        """
        List the combined entries of the local and remote directory.

        A directory that doesn't exist locally is treated as empty, but any other local
        failure is raised. Remote failures are only logged since the local entries can
        still be served.

        The local entries come first (sorted by name), followed by the remote entries in
        the order in which the remote storage returned them.
        """
        path = self.clean_path(path)
        local_path = self.local_file_path(path)

        log.debug(f"readdir: {path} (local: {local_path})")

        entries = self._local_entries(local_path)
        local_names: Set[str] = {entry.name for entry in entries}

        try:
            remote_entries = self._remote.readdir(path)
        except OSError as e:
            log.warning(f"failed to read remote dir {path}: {summarize(e)}")
        else:
            log.debug(f"found {len(remote_entries)} remote entries in {path}")

            entries.extend(
                entry for entry in remote_entries if entry.name not in local_names
            )

        log.debug(f"readdir result for {path}: {len(entries)} entries")

        return entries

    @staticmethod
    def _local_entries(local_path: str) -> List[FileInfo]:
        try:
            with os.scandir(local_path) as it:
                dir_entries = sorted(it, key=lambda e: e.name)
        except FileNotFoundError:
            return []

        entries = []

        for dir_entry in dir_entries:
            try:
                st = dir_entry.stat()
            except FileNotFoundError:
                # Dangling symlink, or removed in between listing and stat
                continue

            entries.append(FileInfo.from_stat(dir_entry.name, st))

        return entries

    #
    # File operations
    #

    def open(self, path: str, flags: int = os.O_RDONLY, mode: int = 0o644) -> Handle:
        """
        Open a handle for the path.

        Local files are opened as-is with the given flags. Local directories are opened
        as a DirectoryListing of the combined listing. If the path cannot be opened
        locally then it is opened on the remote storage, but only for reading.
        """
        path = self.clean_path(path)
        local_path = self.local_file_path(path)

        try:
            fd = os.open(local_path, flags, mode)
        except OSError as e:
            if flags & os.O_ACCMODE == os.O_RDONLY:
                log.debug(f"opening remote file: {path}")
                return RemoteFile.open(self._remote, path)

            log.error(f"cannot write to remote file: {path}")
            raise not_found(path) from e

        try:
            st = os.fstat(fd)
        except OSError:
            os.close(fd)
            raise

        if stat.S_ISDIR(st.st_mode):
            os.close(fd)

            log.debug(f"opening directory as proxy: {path}")
            return DirectoryListing(
                path, self.readdir, FileInfo.from_stat(posixpath.basename(path), st)
            )

        log.debug(f"opened local file: {path}")
        return LocalFile(fd, flags, path)

    #
    # File system structure
    #

    def mkdir(self, path: str, mode: int = 0o755) -> None:
        """Create a directory (and any missing parents) both locally and remotely."""
        path = self.clean_path(path)
        local_path = self.local_file_path(path)

        self._apply_both(
            "create directory",
            path,
            lambda: os.makedirs(local_path, mode, exist_ok=True),
            lambda: self._remote.makedirs(path, mode),
        )

    def remove_all(self, path: str) -> None:
        """Remove an entry and everything below it both locally and remotely."""
        path = self.clean_path(path)
        local_path = self.local_file_path(path)

        self._apply_both(
            "remove",
            path,
            lambda: self._remove_local(local_path),
            lambda: self._remote.remove_all(path),
        )

    def rename(self, old: str, new: str) -> None:
        """Move an entry both locally and remotely, replacing any existing target."""
        old = self.clean_path(old)
        new = self.clean_path(new)

        old_local_path = self.local_file_path(old)
        new_local_path = self.local_file_path(new)

        self._apply_both(
            "rename",
            f"{old} -> {new}",
            lambda: os.rename(old_local_path, new_local_path),
            lambda: self._remote.rename(old, new, True),
        )

    @staticmethod
    def _remove_local(local_path: str) -> None:
        """Remove a local entry recursively, succeeding if it doesn't exist."""
        try:
            st = os.lstat(local_path)
        except FileNotFoundError:
            return

        if stat.S_ISDIR(st.st_mode):
            shutil.rmtree(local_path)
        else:
            os.remove(local_path)

    @staticmethod
    def _apply_both(
        operation: str,
        description: str,
        local_op: Callable[[], None],
        remote_op: Callable[[], None],
    ) -> None:
        """
        Run an operation on both sides and fail only if both sides failed.

        Both sides are always attempted, regardless of the outcome of the other side.
        Nothing is rolled back if only one of the sides fails.
        """
        local_error: Optional[OSError] = None
        remote_error: Optional[OSError] = None

        try:
            local_op()
        except OSError as e:
            local_error = e

        try:
            remote_op()
        except OSError as e:
            remote_error = e

        if local_error is not None and remote_error is not None:
            raise CombinedError(operation, local_error, remote_error) from local_error
        elif local_error is not None:
            log.warning(f"failed to {operation} {description} locally: {local_error}")
        elif remote_error is not None:
            log.warning(f"failed to {operation} {description} remotely: {remote_error}")
