"""Module implementing remote storage on top of a WebDAV server."""

import errno
import io
import os
import posixpath
from typing import BinaryIO, Iterable, List, Optional
from urllib.parse import quote, urlparse
from xml.etree import ElementTree

import requests
from urllib3.exceptions import HTTPError

from davproxy.filesystem.common import FileInfo, RemoteError
from davproxy.logger import log, summarize
from davproxy.remote.propfind import href_path, parse_multistatus, PROPFIND_BODY
from davproxy.remote.storage import RemoteStorage


class ResponseStream(io.RawIOBase):
    """
    Readable stream over the body of a streamed HTTP response.

    At most limit bytes are returned if limit is not negative. Closing the stream
    releases the underlying connection.
    """

    def __init__(self, response: requests.Response, limit: int = -1) -> None:
        """Wrap a response that was requested with stream=True."""
        super().__init__()

        self._response = response
        self._remaining = limit

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        size = len(b) if self._remaining < 0 else min(len(b), self._remaining)

        if size == 0:
            return 0

        data = self._read_raw(size)

        n = len(data)
        b[:n] = data

        if self._remaining >= 0:
            self._remaining -= n

        return n

    def skip(self, count: int, chunk_size: int = 64 * 1024) -> None:
        """Discard the next count bytes of the body."""
        while count > 0:
            data = self._read_raw(min(count, chunk_size))

            if not data:
                break

            count -= len(data)

    def _read_raw(self, size: int) -> bytes:
        try:
            return self._response.raw.read(size)
        except HTTPError as e:
            raise RemoteError(
                errno.EIO, f"failed to read response body: {summarize(e)}"
            ) from e

    def close(self) -> None:
        if not self.closed:
            self._response.close()

        super().close()


class WebDAVClient(RemoteStorage):
    """
    Remote storage that talks to a WebDAV server using HTTP requests.

    The client uses a single requests session, which pools connections and can be used
    from multiple threads for independent requests.

    HTTP errors are translated into the closest matching OSError subclass, so that a
    missing remote file results in the same FileNotFoundError as a missing local file.
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Instantiate client for the WebDAV server at the given URL."""
        self._url = url.rstrip("/")
        self._base_path = urlparse(self._url).path.rstrip("/")
        self._timeout = timeout

        self._session = session or requests.Session()

        if username:
            self._session.auth = (username, password or "")

    def connect(self) -> None:
        """Check that the server is reachable and accepts the credentials."""
        info = self.stat("/")

        if not info.is_dir:
            raise RemoteError(errno.ENOTDIR, "remote root is not a collection", "/")

        log.info(f"connected to {self._url}")

    #
    # Metadata access
    #

    def stat(self, path: str) -> FileInfo:
        response = self._request(
            "PROPFIND", path, (207,), headers=self._propfind_headers(0)
        )

        entries = self._parse_multistatus(path, response)

        if not entries:
            raise RemoteError(errno.EIO, "empty PROPFIND response", path)

        return entries[0][1]

    def readdir(self, path: str) -> List[FileInfo]:
        response = self._request(
            "PROPFIND", path, (207,), headers=self._propfind_headers(1)
        )

        own_path = href_path(self._base_path + self._quoted(path))

        return [
            info
            for entry_path, info in self._parse_multistatus(path, response)
            if entry_path != own_path
        ]

    #
    # File operations
    #

    def read_range(self, path: str, offset: int, length: int = -1) -> BinaryIO:
        if length <= 0:
            length = -1
            byte_range = f"bytes={offset}-"
        else:
            byte_range = f"bytes={offset}-{offset + length - 1}"

        response = self._request(
            "GET",
            path,
            (200, 206),
            headers={"Range": byte_range, "Accept-Encoding": "identity"},
            stream=True,
        )

        stream = ResponseStream(response, length)

        # Server ignored the range and sent the whole file
        if response.status_code == 200 and offset > 0:
            log.debug(f"server ignored range request for {path}, skipping {offset}")

            try:
                stream.skip(offset)
            except Exception:
                stream.close()
                raise

        return stream  # type: ignore

    #
    # File system structure
    #

    def makedirs(self, path: str, mode: int) -> None:
        response = self._request("MKCOL", path, (201, 405, 409))

        if response.status_code == 409:
            parent = posixpath.dirname(path.rstrip("/"))

            if parent in ("", "/"):
                self._raise_for_status("MKCOL", path, response)

            self.makedirs(parent, mode)
            self._request("MKCOL", path, (201, 405))

    def remove_all(self, path: str) -> None:
        self._request("DELETE", path, (200, 202, 204, 404))

    def rename(self, old: str, new: str, overwrite: bool) -> None:
        headers = {
            "Destination": self._url + self._quoted(new),
            "Overwrite": "T" if overwrite else "F",
        }

        response = self._request("MOVE", old, (201, 204, 409), headers=headers)

        if response.status_code == 409:
            # Destination parent doesn't exist yet
            self.makedirs(posixpath.dirname(new.rstrip("/")), 0o755)
            self._request("MOVE", old, (201, 204), headers=headers)

    #
    # Helpers
    #

    @staticmethod
    def _quoted(path: str) -> str:
        return quote("/" + path.lstrip("/"))

    @staticmethod
    def _parse_multistatus(path: str, response: requests.Response) -> list:
        try:
            return parse_multistatus(response.content)
        except (ElementTree.ParseError, ValueError) as e:
            raise RemoteError(
                errno.EIO, f"invalid PROPFIND response: {summarize(e)}", path
            ) from e

    @staticmethod
    def _propfind_headers(depth: int) -> dict:
        return {"Depth": str(depth), "Content-Type": "application/xml; charset=utf-8"}

    def _request(
        self, method: str, path: str, expected: Iterable[int], **kwargs
    ) -> requests.Response:
        if method == "PROPFIND":
            kwargs.setdefault("data", PROPFIND_BODY)

        url = self._url + self._quoted(path)

        try:
            response = self._session.request(
                method, url, timeout=self._timeout, **kwargs
            )
        except requests.RequestException as e:
            raise RemoteError(
                errno.EIO, f"{method} failed: {summarize(e)}", path
            ) from e

        if response.status_code not in expected:
            try:
                self._raise_for_status(method, path, response)
            finally:
                response.close()

        return response

    @staticmethod
    def _raise_for_status(method: str, path: str, response: requests.Response) -> None:
        status = response.status_code

        log.debug(f"{method} {path} returned HTTP {status}")

        if status in (404, 410):
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
        elif status in (401, 403):
            raise PermissionError(errno.EACCES, f"{method} denied (HTTP {status})", path)
        elif status == 409:
            raise FileNotFoundError(errno.ENOENT, "missing parent collection", path)
        elif status == 412:
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), path)
        else:
            raise RemoteError(
                errno.EIO, f"{method} failed (HTTP {status}): {response.reason}", path
            )
