"""WebDAV proxy that merges a local cache directory with a remote WebDAV server."""
