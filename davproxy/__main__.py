"""
Module implementing the command-line interface and starting the WebDAV proxy.

davproxy serves a local cache directory and a remote WebDAV server as a single WebDAV
share. Files that have been placed in the cache directory are served locally, while
everything else is streamed from the remote server on demand.
"""

import os
import signal
import sys
from typing import List, NoReturn, Optional

import davproxy.constants as constants
from davproxy.config import Config
from davproxy.filesystem import ProxyFileSystem
import davproxy.logger as logger
from davproxy.logger import log
from davproxy.remote import WebDAVClient
import davproxy.server as server
from .args import Arguments


def main(arguments: Optional[List[str]] = None) -> NoReturn:
    """
    Run the WebDAV proxy with the given arguments.

    Defaults to parsing command-line arguments from sys.argv if none are specified.
    """
    # Parse command-line arguments.
    args = Arguments.parse(arguments)

    # Configure debug logging.
    logger.configure(args.debug)

    config = args.apply(Config.load(os.path.expanduser(args.config)))

    if not config.auth.is_valid():
        log.error("auth user or pass is empty")
        sys.exit(constants.CONFIG_ERROR_CODE)

    # Check if the remote server is reachable before accepting any clients.
    client = WebDAVClient(
        config.remote.url,
        config.remote.username,
        config.remote.password,
        timeout=config.remote.timeout,
    )

    try:
        client.connect()
    except OSError as e:
        log.error(f"webdav error: {e}")
        sys.exit(constants.REMOTE_ERROR_CODE)

    os.makedirs(config.cache.path, 0o755, exist_ok=True)

    fs = ProxyFileSystem(config.cache.path, client)

    try:
        server.serve(fs, config.server, config.auth, args.debug)
        exit_code = 0
    except KeyboardInterrupt:
        exit_code = 128 + signal.SIGINT

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
