"""
Modules that implement the file system exposed by the proxy.

The proxy combines two sources into a single file hierarchy: a local cache directory
and remote storage. The cache directory is always consulted first and wins whenever it
contains a path. Everything else is retrieved from the remote storage.

Files that only exist remotely are exposed as read-only file objects that translate
every read into a ranged request (see RemoteFile), so that clients can seek around in
large files without ever downloading them completely. Directories are exposed as
handles that serve the combined listing in batches (see DirectoryListing).
"""

from .common import CombinedError, FileInfo, RemoteError, RemoteWriteError
from .directory import DirectoryListing
from .localfile import LocalFile
from .proxy import ProxyFileSystem
from .remotefile import RemoteFile

__all__ = [
    "CombinedError",
    "DirectoryListing",
    "FileInfo",
    "LocalFile",
    "ProxyFileSystem",
    "RemoteError",
    "RemoteFile",
    "RemoteWriteError",
]
