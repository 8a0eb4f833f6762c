import errno
from unittest import mock

import pytest

from davproxy.filesystem.directory import DirectoryListing
from davproxy.tests.conftest import remote_dir, remote_file


def create_listing(entries):
    lister = mock.Mock(return_value=entries)
    return DirectoryListing("/dir", lister, remote_dir("dir")), lister


def test_readdir_all():
    entries = [remote_file("a"), remote_file("b"), remote_file("c")]
    listing, lister = create_listing(entries)

    assert listing.readdir(0) == (entries, False)
    lister.assert_called_once_with("/dir")


def test_readdir_negative_count():
    entries = [remote_file("a"), remote_file("b")]
    listing, _ = create_listing(entries)

    batch, _ = listing.readdir(-1)

    assert batch == entries


def test_readdir_all_then_exhausted():
    listing, _ = create_listing([remote_file("a")])

    listing.readdir(0)

    assert listing.readdir(0) == ([], True)
    assert listing.readdir(5) == ([], True)


def test_readdir_batches():
    entries = [remote_file("a"), remote_file("b"), remote_file("c")]
    listing, _ = create_listing(entries)

    assert listing.readdir(2) == (entries[:2], False)
    assert listing.readdir(2) == (entries[2:], True)
    assert listing.readdir(2) == ([], True)


def test_readdir_exact_batch_signals_end():
    entries = [remote_file("a"), remote_file("b"), remote_file("c"), remote_file("d")]
    listing, _ = create_listing(entries)

    assert listing.readdir(2) == (entries[:2], False)
    assert listing.readdir(2) == (entries[2:], True)
    assert listing.readdir(2) == ([], True)
    assert listing.readdir(2) == ([], True)


def test_readdir_empty_directory():
    listing, _ = create_listing([])

    assert listing.readdir(10) == ([], True)


def test_readdir_lists_once():
    listing, lister = create_listing([remote_file("a"), remote_file("b")])

    listing.readdir(1)
    listing.readdir(1)
    listing.readdir(1)

    assert lister.call_count == 1


def test_readdir_remaining_after_batch():
    entries = [remote_file("a"), remote_file("b"), remote_file("c")]
    listing, _ = create_listing(entries)

    listing.readdir(1)

    assert listing.readdir(0) == (entries[1:], False)


def test_readdir_error_is_not_cached():
    lister = mock.Mock(side_effect=[OSError("read error"), [remote_file("a")]])
    listing = DirectoryListing("/dir", lister, remote_dir("dir"))

    with pytest.raises(OSError, match="read error"):
        listing.readdir(10)

    assert listing.readdir(10) == ([remote_file("a")], True)


def test_byte_operations_invalid():
    listing, lister = create_listing([])

    with pytest.raises(OSError) as e:
        listing.read(10)
    assert e.value.errno == errno.EINVAL

    with pytest.raises(OSError) as e:
        listing.write(b"test")
    assert e.value.errno == errno.EINVAL

    with pytest.raises(OSError) as e:
        listing.seek(0)
    assert e.value.errno == errno.EINVAL

    assert not lister.called


def test_stat():
    info = remote_dir("dir")
    listing = DirectoryListing("/dir", mock.Mock(), info)

    assert listing.stat() is info


def test_close():
    listing, _ = create_listing([])

    with listing:
        pass

    listing.close()
