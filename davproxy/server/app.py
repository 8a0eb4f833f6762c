"""Module that builds the WebDAV application and serves it over HTTP."""

from typing import Any, Dict

from cheroot import wsgi
from wsgidav.wsgidav_app import WsgiDAVApp

from davproxy.config import AuthConfig, ServerConfig
from davproxy.filesystem import ProxyFileSystem
from davproxy.logger import log
from davproxy.server.provider import ProxyProvider


def build_config(fs: ProxyFileSystem, auth: AuthConfig, debug: bool) -> Dict[str, Any]:
    """
    Build the WsgiDAV configuration for serving the file system at the root.

    Clients have to authenticate with HTTP basic authentication if authentication is
    enabled, and are allowed to connect anonymously otherwise.
    """
    if auth.enabled:
        user_mapping: Any = {auth.username: {"password": auth.password}}
    else:
        user_mapping = True

    return {
        "provider_mapping": {"/": ProxyProvider(fs)},
        "http_authenticator": {
            "domain_controller": None,
            "accept_basic": True,
            "accept_digest": False,
            "default_to_digest": False,
        },
        "simple_dc": {"user_mapping": {"*": user_mapping}},
        "lock_storage": True,
        # Request logging goes through davproxy.logger
        "logging": {"enable": False},
        "verbose": 4 if debug else 2,
    }


def build_app(fs: ProxyFileSystem, auth: AuthConfig, debug: bool = False) -> WsgiDAVApp:
    """Create the WSGI application that serves the file system over WebDAV."""
    return WsgiDAVApp(build_config(fs, auth, debug))


def serve(
    fs: ProxyFileSystem, server: ServerConfig, auth: AuthConfig, debug: bool = False
) -> None:
    """Serve the file system until interrupted."""
    app = build_app(fs, auth, debug)

    http_server = wsgi.Server((server.host, server.port), app)

    log.info(f"WebDAV server listening on {server.host}:{server.port}")

    try:
        http_server.start()
    finally:
        http_server.stop()
