"""Module for building PROPFIND requests and parsing their multistatus responses."""

from email.utils import parsedate_to_datetime
import posixpath
from typing import List, Optional, Tuple
from urllib.parse import unquote, urlparse
from xml.etree import ElementTree

from davproxy.filesystem.common import FileInfo

DAV_NAMESPACE = "DAV:"

# Only request the properties that end up in a FileInfo.
PROPFIND_BODY = (
    b'<?xml version="1.0" encoding="utf-8"?>'
    b'<d:propfind xmlns:d="DAV:">'
    b"<d:prop>"
    b"<d:displayname/>"
    b"<d:resourcetype/>"
    b"<d:getcontentlength/>"
    b"<d:getlastmodified/>"
    b"</d:prop>"
    b"</d:propfind>"
)


def _tag(name: str) -> str:
    return f"{{{DAV_NAMESPACE}}}{name}"


def href_path(href: str) -> str:
    """Turn an href (absolute URL or path) into a decoded path without trailing slash."""
    return "/" + unquote(urlparse(href).path).strip("/")


def parse_http_date(value: Optional[str]) -> float:
    """Parse an RFC 1123 date like in getlastmodified into a timestamp (0 if invalid)."""
    if not value:
        return 0.0

    try:
        return parsedate_to_datetime(value).timestamp()
    except (TypeError, ValueError):
        return 0.0


def _is_ok(propstat: ElementTree.Element) -> bool:
    status = propstat.findtext(_tag("status"))

    # A missing status is accepted to deal with lenient servers
    return status is None or " 200 " in f"{status} "


def _parse_response(response: ElementTree.Element) -> Optional[Tuple[str, FileInfo]]:
    href = response.findtext(_tag("href"))

    if href is None:
        return None

    path = href_path(href)

    display_name = None
    is_dir = False
    size = 0
    mtime = 0.0

    for propstat in response.findall(_tag("propstat")):
        if not _is_ok(propstat):
            continue

        for prop in propstat.findall(_tag("prop")):
            resource_type = prop.find(_tag("resourcetype"))
            if resource_type is not None:
                is_dir = resource_type.find(_tag("collection")) is not None

            content_length = prop.findtext(_tag("getcontentlength"))
            if content_length:
                size = int(content_length.strip())

            last_modified = prop.findtext(_tag("getlastmodified"))
            if last_modified:
                mtime = parse_http_date(last_modified.strip())

            display_name = prop.findtext(_tag("displayname")) or display_name

    name = posixpath.basename(path) or display_name or ""

    return path, FileInfo.remote(name, size, is_dir, mtime)


def parse_multistatus(data: bytes) -> List[Tuple[str, FileInfo]]:
    """
    Parse a 207 Multi-Status PROPFIND response.

    Returns the path of every response element along with its metadata, in the order
    in which the server listed them.
    """
    root = ElementTree.fromstring(data)

    entries = []

    for response in root.findall(_tag("response")):
        entry = _parse_response(response)

        if entry is not None:
            entries.append(entry)

    return entries
