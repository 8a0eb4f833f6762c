import os

import pytest

from davproxy.filesystem.localfile import LocalFile


def open_local(path, flags, mode=0o644):
    return LocalFile(os.open(path, flags, mode), flags, "/" + os.path.basename(path))


def test_read_and_seek(tmp_path):
    (tmp_path / "file").write_bytes(b"abcdef")

    with open_local(tmp_path / "file", os.O_RDONLY) as f:
        assert f.readable()
        assert not f.writable()

        f.seek(2)
        assert f.read(2) == b"cd"
        assert f.seek(-1, os.SEEK_END) == 5


def test_write(tmp_path):
    with open_local(tmp_path / "file", os.O_WRONLY | os.O_CREAT | os.O_TRUNC) as f:
        assert f.writable()
        assert not f.readable()

        f.write(b"abc")

    assert (tmp_path / "file").read_bytes() == b"abc"


def test_read_write(tmp_path):
    (tmp_path / "file").write_bytes(b"abc")

    with open_local(tmp_path / "file", os.O_RDWR) as f:
        f.seek(1)
        f.write(b"X")
        f.seek(0)
        assert f.read() == b"aXc"


def test_append(tmp_path):
    (tmp_path / "file").write_bytes(b"abc")

    with open_local(tmp_path / "file", os.O_WRONLY | os.O_APPEND) as f:
        f.write(b"def")

    assert (tmp_path / "file").read_bytes() == b"abcdef"


def test_stat(tmp_path):
    (tmp_path / "file").write_bytes(b"abcdef")

    with open_local(tmp_path / "file", os.O_RDONLY) as f:
        info = f.stat()

    assert info.name == "file"
    assert info.size == 6
    assert not info.is_dir


def test_readdir(tmp_path):
    (tmp_path / "file").write_bytes(b"")

    with open_local(tmp_path / "file", os.O_RDONLY) as f:
        with pytest.raises(NotADirectoryError):
            f.readdir(0)
