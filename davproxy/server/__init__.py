"""
Modules that serve the proxy file system to clients over WebDAV.

The WebDAV protocol handling (PROPFIND, GET with ranges, PUT, MKCOL, MOVE, DELETE,
locking and authentication) is left to WsgiDAV. This package only provides a resource
provider that resolves every request through the proxy file system, and the glue to
serve it with the cheroot HTTP server.
"""

from .app import build_app, serve
from .provider import ProxyProvider

__all__ = [
    "build_app",
    "ProxyProvider",
    "serve",
]
