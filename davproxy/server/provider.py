"""Module that exposes the proxy file system as a WsgiDAV resource provider."""

import os
import shutil
from typing import List, Optional

from wsgidav import util
from wsgidav.dav_error import DAVError, HTTP_CONFLICT
from wsgidav.dav_provider import DAVCollection, DAVNonCollection, DAVProvider

from davproxy.filesystem import FileInfo, ProxyFileSystem
from davproxy.logger import log

# Flags used by the WebDAV handler to (over)write a file in the cache directory
WRITE_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC


def _open_for_write(fs: ProxyFileSystem, path: str):
    """Open a file in the cache directory for (over)writing."""
    try:
        return fs.open(path, WRITE_FLAGS, 0o644)
    except FileNotFoundError:
        raise DAVError(HTTP_CONFLICT, "parent collection is not cached locally")


class _ProxyResource:
    """Behavior shared by files and collections of the proxy file system."""

    _fs: ProxyFileSystem
    _info: FileInfo
    path: str

    def get_display_name(self) -> str:
        return self._info.name or "/"

    def get_creation_date(self) -> Optional[float]:
        return None

    def get_last_modified(self) -> Optional[float]:
        return self._info.mtime or None

    def get_etag(self) -> Optional[str]:
        return None

    def support_etag(self) -> bool:
        return False

    def handle_delete(self) -> bool:
        """Remove the entry from both the cache directory and the remote storage."""
        self._fs.remove_all(self.path)
        return True

    def handle_move(self, dest_path: str) -> bool:
        """Move the entry within both the cache directory and the remote storage."""
        self._fs.rename(self.path, dest_path)
        return True

    def delete(self) -> None:
        self._fs.remove_all(self.path)


class ProxyFile(_ProxyResource, DAVNonCollection):
    """Non-collection resource backed by a local or remote file."""

    def __init__(
        self, path: str, environ: dict, fs: ProxyFileSystem, info: FileInfo
    ) -> None:
        """Instantiate resource with metadata that was already retrieved."""
        super().__init__(path, environ)

        self._fs = fs
        self._info = info

    def get_content_length(self) -> int:
        return self._info.size

    def get_content_type(self) -> str:
        return util.guess_mime_type(self.path)

    def support_ranges(self) -> bool:
        return True

    def get_content(self):
        """Open the file for reading, which may be a ranged remote file."""
        return self._fs.open(self.path, os.O_RDONLY)

    def begin_write(self, *, content_type=None):
        """Open the file in the cache directory for writing."""
        return _open_for_write(self._fs, self.path)

    def copy_move_single(self, dest_path: str, is_move: bool) -> None:
        """Copy the (local or remote) contents into a file in the cache directory."""
        if is_move:
            self._fs.rename(self.path, dest_path)
            return

        with self._fs.open(self.path, os.O_RDONLY) as src:
            with _open_for_write(self._fs, dest_path) as dst:
                shutil.copyfileobj(src, dst)


class ProxyCollection(_ProxyResource, DAVCollection):
    """Collection resource backed by the combined local and remote directory."""

    def __init__(
        self, path: str, environ: dict, fs: ProxyFileSystem, info: FileInfo
    ) -> None:
        """Instantiate resource with metadata that was already retrieved."""
        super().__init__(path, environ)

        self._fs = fs
        self._info = info

    def _list(self) -> List[FileInfo]:
        """Read all entries by opening the collection as a directory handle."""
        entries: List[FileInfo] = []

        with self._fs.open(self.path, os.O_RDONLY) as handle:
            at_end = False

            while not at_end:
                batch, at_end = handle.readdir(0)
                entries.extend(batch)

        return entries

    def _member_path(self, name: str) -> str:
        return util.join_uri(self.path, name)

    def _make_member(self, info: FileInfo):
        path = self._member_path(info.name)

        if info.is_dir:
            return ProxyCollection(path, self.environ, self._fs, info)

        return ProxyFile(path, self.environ, self._fs, info)

    def get_member_names(self) -> List[str]:
        return [info.name for info in self._list()]

    def get_member_list(self) -> list:
        # Avoids a stat() round trip to the remote storage per member
        return [self._make_member(info) for info in self._list()]

    def create_empty_resource(self, name: str) -> ProxyFile:
        """Create an empty file in the cache directory."""
        path = self._member_path(name)

        _open_for_write(self._fs, path).close()

        return ProxyFile(path, self.environ, self._fs, self._fs.stat(path))

    def create_collection(self, name: str) -> None:
        self._fs.mkdir(self._member_path(name))

    def copy_move_single(self, dest_path: str, is_move: bool) -> None:
        """Create the collection at the destination, members are copied one by one."""
        if is_move:
            self._fs.rename(self.path, dest_path)
        else:
            self._fs.mkdir(dest_path)


class ProxyProvider(DAVProvider):
    """WsgiDAV provider that resolves all paths through a proxy file system."""

    def __init__(self, fs: ProxyFileSystem) -> None:
        """Instantiate provider for the file system."""
        super().__init__()

        self._fs = fs

    def is_readonly(self) -> bool:
        return False

    def get_resource_inst(self, path: str, environ: dict):
        """Return the resource for a path or None if it doesn't exist anywhere."""
        try:
            info = self._fs.stat(path)
        except FileNotFoundError:
            log.debug(f"no resource at {path}")
            return None

        if info.is_dir:
            return ProxyCollection(path, environ, self._fs, info)

        return ProxyFile(path, environ, self._fs, info)
