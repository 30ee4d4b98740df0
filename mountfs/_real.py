from __future__ import annotations

import os
import shutil
from typing import IO, Any

from ._exceptions import ContainerNotEmpty, DestinationExists, InvalidObjectError, PathError, UnknownProperty
from ._object import FileSystemObject
from ._path import ROOT, basename, canonicalize, dirname, join_path, validate_name

_STAT_FIELDS = (
    "dev",
    "ino",
    "mode",
    "nlink",
    "uid",
    "gid",
    "rdev",
    "size",
    "atime",
    "mtime",
    "ctime",
    "blksize",
    "blocks",
)


class RealObject(FileSystemObject):
    """A path below a directory of the real file system.

    ``RealObject(root)`` returns the object for *root* itself; every path
    handed out by it is relative to that directory and ``..`` never leaves it.
    """

    _PROPERTIES = ("basename", "dirname", "path") + _STAT_FIELDS
    _SETTABLE = ("mode", "uid", "gid", "atime", "mtime")

    def __init__(self, root: str = ".", *, path: str = ROOT) -> None:
        fs_root = os.path.normpath(os.path.abspath(os.fspath(root)))
        if not os.path.exists(fs_root):
            raise FileNotFoundError(f"Root {fs_root} does not exist.")
        if not os.path.isdir(fs_root):
            raise NotADirectoryError(f"Root {fs_root} is not a directory.")
        self._fs_root = fs_root
        self._path = path

    def _spawn(self, path: str) -> RealObject:
        return RealObject(self._fs_root, path=path)

    def _real(self, path: str) -> str:
        """Location on disk of the canonical *path*."""
        if path == ROOT:
            return self._fs_root
        return os.path.join(self._fs_root, *path.lstrip("/").split("/"))

    @property
    def fullpath(self) -> str:
        return self._real(self._path)

    @property
    def backend(self) -> str:
        return self._fs_root

    def is_valid(self) -> bool:
        return os.path.lexists(self.fullpath)

    def _assert_valid(self) -> None:
        if not self.is_valid():
            raise InvalidObjectError(f"No such file or directory: '{self._path}'")

    def root(self) -> RealObject:
        return self._spawn(ROOT)

    def exists(self, path: str) -> bool:
        return os.path.lexists(self._real(self.canonicalize(path)))

    def lookup(self, path: str) -> RealObject | None:
        abspath = self.canonicalize(path)
        if not os.path.lexists(self._real(abspath)):
            return None
        return self._spawn(abspath)

    # -- properties --

    def properties(self) -> tuple[str, ...]:
        return self._PROPERTIES

    def settable_properties(self) -> tuple[str, ...]:
        return self._SETTABLE

    def get_property(self, key: str) -> Any:
        if key == "path":
            return self._path
        if key == "basename":
            return basename(self._path)
        if key == "dirname":
            return dirname(self._path)
        if key not in _STAT_FIELDS:
            raise UnknownProperty(key)
        return getattr(os.stat(self.fullpath), "st_" + key, None)

    def set_property(self, key: str, value: Any) -> None:
        if key not in self._SETTABLE:
            raise UnknownProperty(key)
        st = os.stat(self.fullpath)
        if key == "mode":
            os.chmod(self.fullpath, value)
        elif key == "uid":
            os.chown(self.fullpath, value, st.st_gid)
        elif key == "gid":
            os.chown(self.fullpath, st.st_uid, value)
        elif key == "atime":
            os.utime(self.fullpath, (value, st.st_mtime))
        else:
            os.utime(self.fullpath, (st.st_atime, value))

    # -- classification --

    def is_container(self) -> bool:
        return os.path.isdir(self.fullpath)

    def has_content(self) -> bool:
        return os.path.isfile(self.fullpath)

    def is_readable(self) -> bool:
        return self.has_content()

    def is_writable(self) -> bool:
        return self.has_content()

    def is_seekable(self) -> bool:
        return self.has_content()

    def is_appendable(self) -> bool:
        return self.has_content()

    def open(self, mode: str = "r") -> IO[Any]:
        return open(self.fullpath, mode)

    # -- containers --

    def children_paths(self) -> list[str]:
        return [".", ".."] + sorted(os.listdir(self.fullpath))

    def children(self) -> list[RealObject]:
        self._assert_valid()
        if not self.is_container():
            return []
        return [self._spawn(join_path(self._path, n)) for n in sorted(os.listdir(self.fullpath))]

    def child(self, name: str) -> RealObject | None:
        validate_name(name)
        path = join_path(self._path, name)
        if not self.is_container() or not os.path.lexists(self._real(path)):
            return None
        return self._spawn(path)

    def mkdir(self, path: str) -> RealObject:
        abspath = self.canonicalize(path)
        fullpath = self._real(abspath)
        if os.path.lexists(fullpath) and not os.path.isdir(fullpath):
            raise DestinationExists(f"A content node exists at '{abspath}'")
        os.makedirs(fullpath, exist_ok=True)
        return self._spawn(abspath)

    def mkfile(self, path: str) -> RealObject:
        abspath = self.canonicalize(path)
        fullpath = self._real(abspath)
        if os.path.isdir(fullpath):
            raise DestinationExists(f"A container exists at '{abspath}'")
        os.makedirs(self._real(dirname(abspath)), exist_ok=True)
        with open(fullpath, "wb"):
            pass
        return self._spawn(abspath)

    # -- mutation --

    def rename(self, name: str) -> RealObject:
        validate_name(name)
        if self.is_root():
            raise PathError("Cannot rename the root container.")
        self._assert_valid()
        if name == self.basename:
            return self
        abspath = canonicalize(join_path(self.dirname, name))
        if os.path.lexists(self._real(abspath)):
            raise DestinationExists(f"Destination already exists: '{abspath}'")
        os.rename(self.fullpath, self._real(abspath))
        self._path = abspath
        return self

    def move(self, target: FileSystemObject, force: bool = False) -> RealObject:
        self._assert_valid()
        self._check_transfer(target, force, "move")
        abspath = join_path(target.path, self.basename)
        shutil.move(self.fullpath, self._real(abspath))
        self._path = abspath
        return self

    def copy(self, target: FileSystemObject, force: bool = False) -> RealObject:
        self._assert_valid()
        self._check_transfer(target, force, "copy")
        abspath = join_path(target.path, self.basename)
        if self.is_container():
            shutil.copytree(self.fullpath, self._real(abspath), symlinks=True)
        else:
            shutil.copy2(self.fullpath, self._real(abspath))
        return self._spawn(abspath)

    def remove(self, force: bool = False) -> None:
        if self.is_root():
            raise PathError("Cannot remove the root container.")
        self._assert_valid()
        if os.path.isdir(self.fullpath) and not os.path.islink(self.fullpath):
            if force:
                shutil.rmtree(self.fullpath)
            elif os.listdir(self.fullpath):
                raise ContainerNotEmpty(
                    f"Cannot remove container '{self._path}' with children unless force is true."
                )
            else:
                os.rmdir(self.fullpath)
        else:
            os.unlink(self.fullpath)
