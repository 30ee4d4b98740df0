"""Mount table: several backends composed into one namespace.

Rules, familiar from Unix mounting:

* The root mount point (``/``) is static: it is mounted first and can
  never be unmounted.
* A mount point can only be mounted once.
* A backend can only be mounted on an existing container. Children of that
  container are hidden until the backend is unmounted.
* A mount point cannot be placed above an existing mount point, and a
  mount point cannot be removed while another one exists below it.

The order of mounting therefore matters, and the root must come first::

    root = MountTable({
        "/": ("real", {"root": "/home/foo"}),
        "/tmp": ("memory",),
    })
    root.mkfile("/tmp/dude")
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterator, Mapping
from typing import IO, Any

from ._exceptions import (
    AlreadyMounted,
    CrossBackendError,
    InvalidObjectError,
    MountPointMissing,
    MountPointNotContainer,
    MountShadowWarning,
    MountTableError,
    NestedMountConflict,
    NotMounted,
    PathError,
    RootAlreadyMounted,
    RootUnmountable,
)
from ._object import FileSystemObject
from ._path import (
    ROOT,
    basename,
    canonicalize,
    dirname,
    is_strictly_under,
    is_under,
    join_path,
    strip_prefix,
    validate_name,
)
from ._registry import build_backend
from ._typing import BackendSpec, MountSpec

logger = logging.getLogger(__name__)


class MountMap:
    """Ordered mapping of canonical mount point to backend.

    One instance is shared by every :class:`MountTable` object spawned from
    the same table, so a mount or unmount is seen by all of them at once.
    """

    def __init__(self) -> None:
        self._entries: dict[str, FileSystemObject] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __getitem__(self, path: str) -> FileSystemObject:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, path: str, backend: FileSystemObject) -> None:
        self._entries[path] = backend

    def pop(self, path: str) -> FileSystemObject:
        return self._entries.pop(path)

    def snapshot(self) -> dict[str, FileSystemObject]:
        return dict(self._entries)

    def longest_prefix(self, path: str) -> str | None:
        best: str | None = None
        for mount_point in self._entries:
            if is_under(path, mount_point) and (best is None or len(mount_point) > len(best)):
                best = mount_point
        return best

    def below(self, path: str) -> list[str]:
        """Mount points strictly below *path*."""
        return [mp for mp in self._entries if is_strictly_under(mp, path)]


class MountTable(FileSystemObject):
    """A path in a namespace built from mounted backends.

    ``MountTable(mounts)`` takes an ordered mapping (or sequence of pairs)
    of mount point to backend spec, root first, and returns the root.
    Every operation resolves this object's path to the backend owning it
    and delegates there.
    """

    def __init__(
        self,
        mounts: MountSpec = (),
        *,
        mount_map: MountMap | None = None,
        path: str = ROOT,
    ) -> None:
        self._path = path
        if mount_map is not None:
            self._mounts = mount_map
            return
        self._mounts = MountMap()
        items = list(mounts.items()) if isinstance(mounts, Mapping) else list(mounts)
        if not items or canonicalize(items[0][0]) != ROOT:
            first = items[0][0] if items else None
            raise MountTableError(
                f"The first mount point given must always be the root (/), but found {first!r} instead."
            )
        for mount_point, spec in items:
            self.mount(mount_point, spec)

    def _spawn(self, path: str) -> MountTable:
        return MountTable(mount_map=self._mounts, path=path)

    # -- mount table --

    def mount(self, path: str, backend: BackendSpec) -> None:
        """Mount *backend* (an object or a registry spec) at *path*."""
        if ROOT in self._mounts:
            path = self.canonicalize(path)
        else:
            path = canonicalize(path)

        if path == ROOT:
            if ROOT in self._mounts:
                raise RootAlreadyMounted("The root mount point cannot be overridden.")
            fs = build_backend(backend)
        else:
            if path in self._mounts:
                raise AlreadyMounted(f"A file system is already mounted at '{path}'.")
            target = self.lookup(path)
            if target is None:
                raise MountPointMissing(f"The mount point '{path}' does not exist.")
            if not target.is_container():
                raise MountPointNotContainer(f"The mount point '{path}' is not a container.")
            inner = self._mounts.below(path)
            if inner:
                raise NestedMountConflict(
                    f"The mount point '{inner[0]}' must be unmounted before mount point '{path}' may be used."
                )
            fs = build_backend(backend)
            if target.has_children():
                warnings.warn(
                    f"Mounting on mount point '{path}' will hide some files.",
                    MountShadowWarning,
                    stacklevel=2,
                )
        self._mounts.add(path, fs)
        logger.info("Mounted %r at %s", fs, path)

    def unmount(self, path: str) -> FileSystemObject:
        """Remove the mount at *path* and return its backend."""
        path = self.canonicalize(path)
        if path == ROOT:
            raise RootUnmountable("The root mount point cannot be unmounted.")
        if path not in self._mounts:
            raise NotMounted(f"No file system is mounted at '{path}'. Therefore it cannot be unmounted.")
        inner = self._mounts.below(path)
        if inner:
            raise NestedMountConflict(f"Mount point '{inner[0]}' must be unmounted before '{path}'.")
        fs = self._mounts.pop(path)
        logger.info("Unmounted %r from %s", fs, path)
        return fs

    def mount_table(self) -> list[str]:
        return list(self._mounts)

    def mounts(self) -> dict[str, FileSystemObject]:
        return self._mounts.snapshot()

    def resolve(self, path: str) -> tuple[FileSystemObject, str]:
        """The backend owning *path* and the path within that backend."""
        return self._resolve_abs(self.canonicalize(path))

    def _resolve_abs(self, abspath: str) -> tuple[FileSystemObject, str]:
        mount_point = self._mounts.longest_prefix(abspath)
        if mount_point is None:
            raise MountTableError("No file system is mounted at the root.")
        return self._mounts[mount_point], strip_prefix(abspath, mount_point)

    def _inner(self) -> FileSystemObject | None:
        if ROOT not in self._mounts:
            return None
        fs, rel = self._resolve_abs(self._path)
        return fs.lookup(rel)

    def _require_inner(self) -> FileSystemObject:
        inner = self._inner()
        if inner is None:
            raise InvalidObjectError(f"No such file or directory: '{self._path}'")
        return inner

    def _check_no_mounts(self, verb: str) -> None:
        if self._path == ROOT:
            raise PathError(f"Cannot {verb} the root container.")
        if self._path in self._mounts or self._mounts.below(self._path):
            raise NestedMountConflict(
                f"Cannot {verb} '{self._path}': a file system is mounted at or below it."
            )

    def _check_same_backend(self, target: FileSystemObject, verb: str) -> FileSystemObject:
        if not isinstance(target, MountTable) or target._mounts is not self._mounts:
            raise CrossBackendError(f"Cannot {verb} '{self}' to '{target}': it belongs to another table.")
        fs, _ = self._resolve_abs(self._path)
        target_fs, _ = self._resolve_abs(target._path)
        if fs is not target_fs:
            raise CrossBackendError(
                f"Cannot {verb} '{self}' to '{target}': crossing a mount point is not supported."
            )
        return target._require_inner()

    # -- identity --

    @property
    def backend(self) -> MountMap:
        return self._mounts

    def is_valid(self) -> bool:
        return self._inner() is not None

    def root(self) -> MountTable:
        return self._spawn(ROOT)

    def exists(self, path: str) -> bool:
        fs, rel = self.resolve(path)
        return fs.exists(rel)

    def lookup(self, path: str) -> MountTable | None:
        abspath = self.canonicalize(path)
        fs, rel = self._resolve_abs(abspath)
        if fs.lookup(rel) is None:
            return None
        return self._spawn(abspath)

    # -- properties --

    def properties(self) -> tuple[str, ...]:
        return self._require_inner().properties()

    def settable_properties(self) -> tuple[str, ...]:
        return self._require_inner().settable_properties()

    def get_property(self, key: str) -> Any:
        if key == "path":
            return self._path
        if key == "basename":
            return basename(self._path)
        if key == "dirname":
            return dirname(self._path)
        return self._require_inner().get_property(key)

    def set_property(self, key: str, value: Any) -> None:
        self._require_inner().set_property(key, value)

    # -- classification --

    def is_container(self) -> bool:
        inner = self._inner()
        return inner is not None and inner.is_container()

    def has_content(self) -> bool:
        inner = self._inner()
        return inner is not None and inner.has_content()

    def is_readable(self) -> bool:
        inner = self._inner()
        return inner is not None and inner.is_readable()

    def is_writable(self) -> bool:
        inner = self._inner()
        return inner is not None and inner.is_writable()

    def is_seekable(self) -> bool:
        inner = self._inner()
        return inner is not None and inner.is_seekable()

    def is_appendable(self) -> bool:
        inner = self._inner()
        return inner is not None and inner.is_appendable()

    # -- content --

    def open(self, mode: str = "r") -> IO[Any]:
        return self._require_inner().open(mode)

    def content(self, lines: bool = False) -> str | list[str]:
        return self._require_inner().content(lines)

    # -- containers --

    def has_children(self) -> bool:
        return self._require_inner().has_children()

    def children(self) -> list[MountTable]:
        return [
            self._spawn(join_path(self._path, c.basename))
            for c in self._require_inner().children()
        ]

    def child(self, name: str) -> MountTable | None:
        validate_name(name)
        if self._require_inner().child(name) is None:
            return None
        return self._spawn(join_path(self._path, name))

    def mkdir(self, path: str) -> MountTable:
        abspath = self.canonicalize(path)
        fs, rel = self._resolve_abs(abspath)
        fs.mkdir(rel)
        return self._spawn(abspath)

    def mkfile(self, path: str) -> MountTable:
        abspath = self.canonicalize(path)
        fs, rel = self._resolve_abs(abspath)
        fs.mkfile(rel)
        return self._spawn(abspath)

    # -- mutation --

    def rename(self, name: str) -> MountTable:
        validate_name(name)
        inner = self._require_inner()
        self._check_no_mounts("rename")
        inner.rename(name)
        self._path = join_path(dirname(self._path), name)
        return self

    def move(self, target: FileSystemObject, force: bool = False) -> MountTable:
        inner = self._require_inner()
        target_inner = self._check_same_backend(target, "move")
        self._check_no_mounts("move")
        inner.move(target_inner, force)
        self._path = join_path(target.path, basename(self._path))
        return self

    def copy(self, target: FileSystemObject, force: bool = False) -> MountTable:
        inner = self._require_inner()
        target_inner = self._check_same_backend(target, "copy")
        inner.copy(target_inner, force)
        return self._spawn(join_path(target.path, basename(self._path)))

    def remove(self, force: bool = False) -> None:
        inner = self._require_inner()
        self._check_no_mounts("remove")
        inner.remove(force)
