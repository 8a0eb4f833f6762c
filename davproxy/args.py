"""Module defining the command-line arguments and providing a parser for them."""

from __future__ import annotations

import argparse
import dataclasses
import os
from typing import List, Optional

from davproxy.config import Config
from davproxy.constants import VERSION


class Arguments(argparse.Namespace):
    """
    Parsed command-line arguments.

    Options that are not specified on the command line fall back to their environment
    variable (e.g. PORT or WEBDAV_URL) and are otherwise None, which means that the value
    from the config file is used.
    """

    config: str

    host: Optional[str]
    port: Optional[int]
    local_path: Optional[str]

    webdav_url: Optional[str]
    webdav_user: Optional[str]
    webdav_pass: Optional[str]
    timeout: Optional[float]

    auth: Optional[bool]
    auth_user: Optional[str]
    auth_pass: Optional[str]

    debug: bool

    @classmethod
    def parse(cls, args: Optional[List[str]] = None) -> Arguments:
        """
        Parse command-line arguments from the given list of strings.

        Defaults to sys.argv if none are specified.
        """
        return cls._get_parser().parse_args(args, namespace=cls())

    @classmethod
    def _get_parser(cls) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Serve a local cache directory merged with a remote WebDAV "
            "server over WebDAV.",
            usage="davproxy [option...]",
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {VERSION}",
            help="show the program version",
        )

        # Path to (optional) config file
        parser.add_argument(
            "--config",
            type=str,
            help="path to config file (default is ~/.davproxy/config)",
            default="~/.davproxy/config",
        )

        # WebDAV server of the proxy
        parser.add_argument("--host", type=str, help="address to listen on")
        parser.add_argument(
            "--port",
            type=cls._parse_port,
            help="port to listen on",
            default=cls._env_value("PORT", cls._parse_port),
        )
        parser.add_argument(
            "--local-path",
            type=str,
            help="path to the cache directory",
            default=_env("LOCAL_PATH"),
        )

        # Remote WebDAV server
        parser.add_argument(
            "--webdav-url",
            type=str,
            help="URL of the remote WebDAV server",
            default=_env("WEBDAV_URL"),
        )
        parser.add_argument(
            "--webdav-user",
            type=str,
            help="user for the remote WebDAV server",
            default=_env("WEBDAV_USER"),
        )
        parser.add_argument(
            "--webdav-pass",
            type=str,
            help="password for the remote WebDAV server",
            default=_env("WEBDAV_PASS"),
        )
        parser.add_argument(
            "--timeout",
            type=cls._parse_timeout,
            help="timeout for requests to the remote WebDAV server in seconds",
        )

        # Authentication of clients
        parser.add_argument(
            "--auth",
            action="store_true",
            help="require clients to authenticate",
            default=cls._env_value("AUTH_ENABLED", cls._parse_bool),
        )
        parser.add_argument(
            "--auth-user",
            type=str,
            help="user that clients authenticate as",
            default=_env("AUTH_USER"),
        )
        parser.add_argument(
            "--auth-pass",
            type=str,
            help="password that clients authenticate with",
            default=_env("AUTH_PASS"),
        )

        # Enable debug output for development
        parser.add_argument(
            "--debug", action="store_true", help="enable debug information"
        )

        return parser

    def apply(self, config: Config) -> Config:
        """Override the variables of a loaded config with the specified arguments."""
        cache = config.cache
        remote = config.remote
        server = config.server
        auth = config.auth

        if self.local_path is not None:
            cache = dataclasses.replace(cache, path=os.path.expanduser(self.local_path))

        if self.webdav_url is not None:
            remote = dataclasses.replace(remote, url=self.webdav_url)
        if self.webdav_user is not None:
            remote = dataclasses.replace(remote, username=self.webdav_user)
        if self.webdav_pass is not None:
            remote = dataclasses.replace(remote, password=self.webdav_pass)
        if self.timeout is not None:
            remote = dataclasses.replace(remote, timeout=self.timeout)

        if self.host is not None:
            server = dataclasses.replace(server, host=self.host)
        if self.port is not None:
            server = dataclasses.replace(server, port=self.port)

        if self.auth is not None:
            auth = dataclasses.replace(auth, enabled=self.auth)
        if self.auth_user is not None:
            auth = dataclasses.replace(auth, username=self.auth_user)
        if self.auth_pass is not None:
            auth = dataclasses.replace(auth, password=self.auth_pass)

        return Config(cache=cache, remote=remote, server=server, auth=auth)

    @staticmethod
    def _env_value(name: str, parse):
        value = _env(name)

        if value is None:
            return None

        try:
            return parse(value)
        except argparse.ArgumentTypeError as e:
            raise SystemExit(f"invalid value for {name}: {e}")

    @staticmethod
    def _parse_port(arg: str) -> int:
        try:
            val = int(arg)
            assert 0 < val < 65536
            return val
        except (ValueError, AssertionError):
            raise argparse.ArgumentTypeError("expected port number between 1 and 65535")

    @staticmethod
    def _parse_timeout(arg: str) -> float:
        try:
            val = float(arg)
            assert val > 0
            return val
        except (ValueError, AssertionError):
            raise argparse.ArgumentTypeError("expected number > 0")

    @staticmethod
    def _parse_bool(arg: str) -> bool:
        if arg.lower() in ("1", "true", "yes", "on"):
            return True
        elif arg.lower() in ("0", "false", "no", "off", ""):
            return False
        else:
            raise argparse.ArgumentTypeError("expected boolean")


def _env(name: str) -> Optional[str]:
    return os.environ.get(name)
