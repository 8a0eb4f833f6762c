import calendar

from davproxy.remote.propfind import (
    href_path,
    parse_http_date,
    parse_multistatus,
)

MULTISTATUS = b"""<?xml version="1.0" encoding="utf-8"?>
<d:multistatus xmlns:d="DAV:">
  <d:response>
    <d:href>/dav/Movies/</d:href>
    <d:propstat>
      <d:prop>
        <d:displayname>Movies</d:displayname>
        <d:resourcetype><d:collection/></d:resourcetype>
        <d:getlastmodified>Mon, 02 Jan 2023 03:04:05 GMT</d:getlastmodified>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>https://example.com/dav/Movies/My%20Film.mkv</d:href>
    <d:propstat>
      <d:prop>
        <d:resourcetype/>
        <d:getcontentlength>1048576</d:getcontentlength>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
    <d:propstat>
      <d:prop>
        <d:getlastmodified/>
      </d:prop>
      <d:status>HTTP/1.1 404 Not Found</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/dav/Movies/Extras/</d:href>
    <d:propstat>
      <d:prop>
        <d:resourcetype><d:collection/></d:resourcetype>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>
"""


def test_href_path():
    assert href_path("/dav/Movies/") == "/dav/Movies"
    assert href_path("https://example.com/a%20b") == "/a b"
    assert href_path("/") == "/"
    assert href_path("") == "/"


def test_parse_http_date():
    expected = calendar.timegm((2023, 1, 2, 3, 4, 5))

    assert parse_http_date("Mon, 02 Jan 2023 03:04:05 GMT") == expected
    assert parse_http_date(None) == 0.0
    assert parse_http_date("garbage") == 0.0


def test_parse_multistatus():
    entries = parse_multistatus(MULTISTATUS)

    assert [path for path, _ in entries] == [
        "/dav/Movies",
        "/dav/Movies/My Film.mkv",
        "/dav/Movies/Extras",
    ]

    movies = entries[0][1]
    assert movies.name == "Movies"
    assert movies.is_dir
    assert movies.mtime == calendar.timegm((2023, 1, 2, 3, 4, 5))

    film = entries[1][1]
    assert film.name == "My Film.mkv"
    assert not film.is_dir
    assert film.size == 1048576
    assert film.mtime == 0.0

    assert entries[2][1].is_dir


def test_parse_multistatus_root():
    data = b"""<?xml version="1.0"?>
    <multistatus xmlns="DAV:">
      <response>
        <href>/</href>
        <propstat>
          <prop><displayname>root</displayname><resourcetype><collection/></resourcetype></prop>
          <status>HTTP/1.1 200 OK</status>
        </propstat>
      </response>
    </multistatus>
    """

    [(path, info)] = parse_multistatus(data)

    assert path == "/"
    assert info.name == "root"
    assert info.is_dir


def test_parse_multistatus_empty():
    assert parse_multistatus(b'<multistatus xmlns="DAV:"/>') == []
