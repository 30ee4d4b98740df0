"""RealObject against a temporary directory."""

import os

import pytest
from mountfs import (
    ContainerNotEmpty,
    DestinationExists,
    InvalidObjectError,
    PathError,
    RealObject,
    UnknownProperty,
)
from tests.helpers.asserts import assert_paths


def test_root_must_exist(tmp_path):
    with pytest.raises(FileNotFoundError):
        RealObject(str(tmp_path / "missing"))


def test_root_must_be_directory(tmp_path):
    (tmp_path / "file").write_text("x")
    with pytest.raises(NotADirectoryError):
        RealObject(str(tmp_path / "file"))


def test_root_identity(real_root, tmp_path):
    assert real_root.path == "/"
    assert real_root.fullpath == str(tmp_path)
    assert real_root.is_container()


def test_mkfile_writes_to_disk(real_root, tmp_path):
    f = real_root.mkfile("/a/b.txt")
    assert f.fullpath == str(tmp_path / "a" / "b.txt")
    assert (tmp_path / "a" / "b.txt").is_file()
    assert f.has_content()


def test_mkfile_truncates(real_root, tmp_path):
    (tmp_path / "f").write_text("data")
    real_root.mkfile("/f")
    assert (tmp_path / "f").read_text() == ""


def test_mkfile_on_directory_raises(real_root):
    real_root.mkdir("/d")
    with pytest.raises(DestinationExists):
        real_root.mkfile("/d")


def test_mkdir_on_file_raises(real_root):
    real_root.mkfile("/f")
    with pytest.raises(DestinationExists):
        real_root.mkdir("/f")


def test_dotdot_never_leaves_root(real_root, tmp_path):
    obj = real_root.mkdir("/../../escape")
    assert obj.path == "/escape"
    assert (tmp_path / "escape").is_dir()


def test_lookup_and_children_sorted(real_root, tmp_path):
    for name in ["c", "a", "b"]:
        (tmp_path / name).write_text(name)
    assert real_root.children_paths() == [".", "..", "a", "b", "c"]
    assert_paths(real_root.children(), ["/a", "/b", "/c"])
    assert real_root.lookup("/b").content() == "b"
    assert real_root.lookup("/z") is None


def test_glob_and_find(real_root):
    for path in ["/pkg/mod.py", "/pkg/data.json", "/pkg/.cache", "/README"]:
        real_root.mkfile(path)
    assert_paths(real_root.glob("pkg/*"), ["/pkg/data.json", "/pkg/mod.py"])
    found = real_root.find(lambda obj: obj.has_content())
    assert_paths(found, ["/README", "/pkg/.cache", "/pkg/data.json", "/pkg/mod.py"])


def test_stat_properties(real_root):
    f = real_root.mkfile("/f")
    with f.open("w") as fh:
        fh.write("12345")
    assert f.get_property("size") == 5
    assert "mtime" in f.properties()
    with pytest.raises(UnknownProperty):
        f.get_property("colour")


def test_set_mtime(real_root, tmp_path):
    f = real_root.mkfile("/f")
    f.set_property("mtime", 1_000_000)
    assert os.stat(tmp_path / "f").st_mtime == 1_000_000


def test_set_unknown_property(real_root):
    f = real_root.mkfile("/f")
    with pytest.raises(UnknownProperty):
        f.set_property("size", 0)


def test_rename(real_root, tmp_path):
    f = real_root.mkfile("/old")
    f.rename("new")
    assert f.path == "/new"
    assert (tmp_path / "new").exists()
    assert not (tmp_path / "old").exists()


def test_rename_onto_existing_raises(real_root):
    real_root.mkfile("/a")
    real_root.mkfile("/b")
    with pytest.raises(DestinationExists):
        real_root.lookup("/a").rename("b")


def test_rename_root_raises(real_root):
    with pytest.raises(PathError):
        real_root.rename("x")


def test_remove(real_root, tmp_path):
    real_root.mkfile("/d/f")
    d = real_root.lookup("/d")
    with pytest.raises(ContainerNotEmpty):
        d.remove()
    d.remove(force=True)
    assert not (tmp_path / "d").exists()
    assert not d.is_valid()
    with pytest.raises(InvalidObjectError):
        d.remove()


def test_remove_empty_directory(real_root, tmp_path):
    real_root.mkdir("/empty").remove()
    assert not (tmp_path / "empty").exists()


def test_binary_open(real_root):
    f = real_root.mkfile("/bin")
    with f.open("wb") as fh:
        fh.write(b"\x00\x01")
    with f.open("rb") as fh:
        assert fh.read() == b"\x00\x01"
