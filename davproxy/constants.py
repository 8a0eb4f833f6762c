"""Module defining various global constants."""

# davproxy version
VERSION = "1.0.0"

# Exit code for invalid configuration, like enabled authentication without credentials.
CONFIG_ERROR_CODE = 1

# Exit code for when the remote WebDAV server cannot be reached at startup.
REMOTE_ERROR_CODE = 2

# Default remote WebDAV server
DEFAULT_REMOTE_URL = "https://dav.mypikpak.com"
