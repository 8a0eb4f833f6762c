"""Module containing utilities for logging, along with a standard logger."""

import logging
from typing import Any

# WsgiDAV logs every handled request under this logger
REQUEST_LOGGER = "wsgidav"

_handler = logging.StreamHandler()
_handler.setFormatter(
    logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
)


def _get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    if _handler not in logger.handlers:
        logger.addHandler(_handler)

    return logger


def configure(debug: bool) -> None:
    """
    Set the log levels for a run of the proxy.

    The proxy logs at INFO level unless debug is set. WebDAV requests handled by
    WsgiDAV are written to the same output, but only warnings and errors are shown
    unless debug is set, since every single request would be logged otherwise.
    """
    log.setLevel(logging.DEBUG if debug else logging.INFO)

    request_log = _get_logger(REQUEST_LOGGER)
    request_log.setLevel(logging.DEBUG if debug else logging.WARNING)
    request_log.propagate = False


def summarize(obj: Any, max_length: int = 255) -> str:
    """Return a stringified representation of the object up to the given length."""
    stringified_obj = str(obj)

    if len(stringified_obj) <= max_length:
        return stringified_obj
    else:
        return stringified_obj[: max_length - 3] + "..."


# Default logger
log = _get_logger("davproxy")
