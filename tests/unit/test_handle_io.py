"""Behaviour of MemoryFileHandle and TextHandle obtained from MemoryObject.open().

Focus is on cursor handling and per-mode restrictions. Which node a mode
creates or truncates is covered in test_memory_object.py.
"""

import io

import pytest
from mountfs import DestinationExists, MemoryFileHandle, TextHandle


@pytest.fixture
def f(memfs):
    obj = memfs.mkfile("/test.bin")
    with obj.open("wb") as fh:
        fh.write(b"hello world")
    return obj


# ---------------------------------------------------------------------------
# binary handle
# ---------------------------------------------------------------------------


def test_binary_mode_returns_binary_handle(f):
    with f.open("rb") as fh:
        assert isinstance(fh, MemoryFileHandle)
        assert fh.name == "/test.bin"
        assert fh.mode == "rb"


def test_read_partial(f):
    with f.open("rb") as fh:
        assert fh.read(5) == b"hello"
        assert fh.read(6) == b" world"
        assert fh.read() == b""


def test_seek_whence(f):
    with f.open("rb") as fh:
        fh.read(3)
        fh.seek(3, 1)
        assert fh.read() == b"world"
        assert fh.seek(-5, 2) == 6
        assert fh.tell() == 6


def test_seek_negative_raises(f):
    with f.open("rb") as fh:
        with pytest.raises(ValueError):
            fh.seek(-1)
        with pytest.raises(ValueError):
            fh.seek(0, 3)


def test_readline(memfs):
    obj = memfs.mkfile("/lines")
    with obj.open("wb") as fh:
        fh.write(b"one\ntwo\nthree")
    with obj.open("rb") as fh:
        assert fh.readline() == b"one\n"
        assert fh.readline(2) == b"tw"
        assert fh.readline() == b"o\n"
        assert fh.readline() == b"three"
        assert fh.readline() == b""


def test_read_only_handle_rejects_write(f):
    with f.open("rb") as fh:
        with pytest.raises(io.UnsupportedOperation):
            fh.write(b"x")
        with pytest.raises(io.UnsupportedOperation):
            fh.truncate(0)


def test_write_only_handle_rejects_read(f):
    with f.open("ab") as fh:
        with pytest.raises(io.UnsupportedOperation):
            fh.read()


def test_write_mode_truncates(f):
    with f.open("wb") as fh:
        fh.write(b"hi")
    assert f.get_property("size") == 2


def test_append_always_writes_at_end(f):
    with f.open("a+b") as fh:
        fh.seek(0)
        fh.write(b"!")
        fh.seek(0)
        assert fh.read() == b"hello world!"


def test_read_plus_overwrites_in_place(f):
    with f.open("r+b") as fh:
        fh.write(b"J")
        fh.seek(0)
        assert fh.read() == b"Jello world"


def test_write_past_end_zero_fills(f):
    with f.open("r+b") as fh:
        fh.seek(13)
        fh.write(b"!")
    with f.open("rb") as fh:
        assert fh.read() == b"hello world\x00\x00!"


def test_truncate(f):
    with f.open("r+b") as fh:
        fh.seek(5)
        assert fh.truncate() == 5
        assert fh.truncate(7) == 7
    with f.open("rb") as fh:
        assert fh.read() == b"hello\x00\x00"


def test_exclusive_mode(memfs):
    obj = memfs.mkfile("/exists")
    with pytest.raises(DestinationExists):
        obj.open("xb")
    obj.remove()
    with obj.open("xb") as fh:
        fh.write(b"new")
    assert obj.has_content()


def test_open_missing_in_write_mode_creates(memfs):
    obj = memfs.mkfile("/d/new.txt")
    obj.remove()
    with obj.open("wb") as fh:
        fh.write(b"back")
    assert memfs.lookup("/d/new.txt").content() == "back"


def test_open_container_raises(memfs):
    with pytest.raises(IsADirectoryError):
        memfs.mkdir("/d").open("r")


@pytest.mark.parametrize("mode", ["", "rw", "z", "rbt", "rr", "b"])
def test_invalid_mode(f, mode):
    with pytest.raises(ValueError):
        f.open(mode)


def test_closed_handle_rejects_io(f):
    fh = f.open("rb")
    fh.close()
    assert fh.closed
    with pytest.raises(ValueError):
        fh.read()
    with pytest.raises(ValueError):
        fh.tell()


def test_unclosed_handle_warns(f):
    fh = f.open("rb")
    with pytest.warns(ResourceWarning):
        fh.__del__()


def test_handles_share_node(f):
    with f.open("rb") as reader, f.open("ab") as writer:
        writer.write(b"!")
        assert reader.read() == b"hello world!"


def test_write_bumps_generation(f):
    before = f.get_property("generation")
    with f.open("ab") as fh:
        fh.write(b"x")
        fh.write(b"")
    assert f.get_property("generation") == before + 1


# ---------------------------------------------------------------------------
# text handle
# ---------------------------------------------------------------------------


def test_text_mode_returns_text_handle(f):
    with f.open("r") as fh:
        assert isinstance(fh, TextHandle)
        assert fh.encoding == "utf-8"
        assert isinstance(fh.buffer, MemoryFileHandle)


def test_text_write_returns_characters(memfs):
    obj = memfs.mkfile("/t.txt")
    with obj.open("w") as fh:
        assert fh.write("héllo") == 5
    assert obj.get_property("size") == 6


def test_text_writelines_and_iterate(memfs):
    obj = memfs.mkfile("/t.txt")
    with obj.open("w") as fh:
        fh.writelines(["a\n", "b\n", "c"])
    with obj.open("r") as fh:
        assert list(fh) == ["a\n", "b\n", "c"]
    with obj.open("r") as fh:
        assert fh.readlines() == ["a\n", "b\n", "c"]


def test_text_close_closes_buffer(f):
    fh = f.open("r")
    fh.close()
    assert fh.closed
    assert fh.buffer.closed


def test_text_seek_tell(f):
    with f.open("r+") as fh:
        fh.seek(6)
        assert fh.tell() == 6
        assert fh.read() == "world"
        assert fh.readable() and fh.writable() and fh.seekable()
