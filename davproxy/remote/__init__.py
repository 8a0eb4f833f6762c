"""
Modules that give access to the remote storage behind the proxy.

The proxy only needs a handful of operations from the remote side: retrieving metadata,
listing directories, reading byte ranges of files, and creating, removing and renaming
entries. These are described by RemoteStorage so that the proxy file system doesn't
depend on a specific protocol. WebDAVClient implements them for WebDAV servers.
"""

from .client import WebDAVClient
from .storage import RemoteStorage

__all__ = [
    "RemoteStorage",
    "WebDAVClient",
]
