"""The file system object interface shared by every backend."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from collections import deque
from typing import IO, Any

from ._exceptions import (
    ContainerRequiresForce,
    CrossBackendError,
    DestinationExists,
    NotAContainer,
    PathError,
)
from ._glob import compile_glob, glob_filter, match_glob
from ._path import ROOT, SEP, canonicalize, is_under, split_path
from ._typing import FindDecision, FindPredicate


class FileSystemObject(ABC):
    """One path within one backend.

    Paths given to any method may be absolute or relative. A relative path
    is taken relative to this object when it is a container, otherwise
    relative to its parent.

    Backends implement the abstract methods; everything else has a
    default built on top of them.
    """

    # -- identity ------------------------------------------------------------

    @property
    @abstractmethod
    def backend(self) -> object:
        """Token identifying the storage this object belongs to.

        Two objects may only be moved or copied into one another when
        their tokens compare equal.
        """

    @property
    def path(self) -> str:
        return self.get_property("path")

    @property
    def basename(self) -> str:
        return self.get_property("basename")

    @property
    def dirname(self) -> str:
        return self.get_property("dirname")

    def is_root(self) -> bool:
        return self.path == ROOT

    @abstractmethod
    def is_valid(self) -> bool:
        """False once the node this object refers to has been removed."""

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileSystemObject) or type(other) is not type(self):
            return NotImplemented
        return self.backend == other.backend and self.path == other.path

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.path))

    # -- lookup --------------------------------------------------------------

    @abstractmethod
    def root(self) -> FileSystemObject: ...

    def canonicalize(self, path: str) -> str:
        """Canonical absolute form of *path* with this object as context."""
        return canonicalize(path, self.path, self.is_container())

    def parent(self) -> FileSystemObject | None:
        """The containing object; the root is its own parent."""
        return self.lookup(self.dirname)

    def exists(self, path: str) -> bool:
        return self.lookup(path) is not None

    def lookup(self, path: str) -> FileSystemObject | None:
        """Return the object at *path*, or ``None`` when there is none."""
        abspath = self.canonicalize(path)
        if not self.is_root():
            return self.root().lookup(abspath)
        result: FileSystemObject | None = self
        for component in split_path(abspath):
            if not result.is_container():
                return None
            result = result.child(component)
            if result is None:
                return None
        return result

    def glob(self, pattern: str) -> list[FileSystemObject]:
        """Objects whose path matches the slash separated glob *pattern*.

        Each component of the pattern is matched against basenames only;
        see :mod:`mountfs._glob` for the pattern language. A relative
        pattern starts from this object's children, so on a content node
        it matches nothing.
        """
        components = [p for p in pattern.split(SEP) if p]
        compiled = [compile_glob(c) for c in components]
        if not components:
            return []
        if pattern.startswith(SEP):
            start = self.root()
        elif self.is_container():
            start = self
        else:
            # a content node has no children to match against
            return []

        candidates = start.children()
        last = len(components) - 1
        for i, (component, nodes) in enumerate(zip(components, compiled)):
            if not candidates:
                return []
            names = dict.fromkeys(c.basename for c in candidates)
            keep = set(match_glob(nodes, component, names))
            matched = [c for c in candidates if c.basename in keep]
            if i == last:
                return matched
            candidates = [
                child
                for c in matched
                if c.is_container()
                for child in c.children()
            ]
        return []

    def match_glob(self, glob: str, names: list[str]) -> list[str]:
        return glob_filter(glob, names)

    def find(
        self, want: FindPredicate, *paths: str | FileSystemObject
    ) -> list[FileSystemObject]:
        """Depth first search below *paths* (default: this object).

        *want* is called once per visited object and returns a
        :class:`FindDecision` (or a bool meaning "include, do not prune").
        Children are visited right after their parent unless the parent's
        decision prunes its subtree.
        """
        pending: deque[FileSystemObject] = deque()
        for item in paths or (self,):
            obj = self.lookup(item) if isinstance(item, str) else item
            if obj is not None:
                pending.append(obj)

        found: list[FileSystemObject] = []
        while pending:
            obj = pending.popleft()
            decision = want(obj)
            if not isinstance(decision, FindDecision):
                decision = FindDecision(bool(decision))
            if decision.include:
                found.append(obj)
            if not decision.prune_subtree and obj.is_container():
                pending.extendleft(reversed(obj.children()))
        return found

    # -- properties ----------------------------------------------------------

    @abstractmethod
    def properties(self) -> tuple[str, ...]: ...

    @abstractmethod
    def settable_properties(self) -> tuple[str, ...]: ...

    @abstractmethod
    def get_property(self, key: str) -> Any:
        """Raises :class:`UnknownProperty` for a key not in :meth:`properties`."""

    @abstractmethod
    def set_property(self, key: str, value: Any) -> None:
        """Raises :class:`UnknownProperty` for a key not in :meth:`settable_properties`."""

    # -- classification ------------------------------------------------------

    @abstractmethod
    def is_container(self) -> bool: ...

    @abstractmethod
    def has_content(self) -> bool: ...

    # -- content -------------------------------------------------------------

    @abstractmethod
    def is_readable(self) -> bool: ...

    @abstractmethod
    def is_writable(self) -> bool: ...

    @abstractmethod
    def is_seekable(self) -> bool: ...

    @abstractmethod
    def is_appendable(self) -> bool: ...

    @abstractmethod
    def open(self, mode: str = "r") -> IO[Any]: ...

    def content(self, lines: bool = False) -> str | list[str]:
        """The whole content as one string, or as line terminated strings."""
        with self.open("r") as fh:
            data = fh.read()
        if lines:
            return io.StringIO(data, newline="").readlines()
        return data

    # -- containers ----------------------------------------------------------

    @abstractmethod
    def children(self) -> list[FileSystemObject]: ...

    @abstractmethod
    def child(self, name: str) -> FileSystemObject | None: ...

    def children_paths(self) -> list[str]:
        return [".", ".."] + [c.basename for c in self.children()]

    def has_children(self) -> bool:
        return len(self.children_paths()) > 2

    @abstractmethod
    def mkdir(self, path: str) -> FileSystemObject: ...

    @abstractmethod
    def mkfile(self, path: str) -> FileSystemObject: ...

    # -- mutation ------------------------------------------------------------

    @abstractmethod
    def rename(self, name: str) -> FileSystemObject: ...

    @abstractmethod
    def move(self, target: FileSystemObject, force: bool = False) -> FileSystemObject: ...

    @abstractmethod
    def copy(self, target: FileSystemObject, force: bool = False) -> FileSystemObject: ...

    @abstractmethod
    def remove(self, force: bool = False) -> None: ...

    def _check_transfer(self, target: FileSystemObject, force: bool, verb: str) -> None:
        """Validate a move/copy of this object into *target* before touching storage."""
        if not isinstance(target, FileSystemObject) or target.backend != self.backend:
            raise CrossBackendError(
                f"Cannot {verb} '{self}' to '{target}': it belongs to another backend."
            )
        if not target.is_valid() or not target.is_container():
            raise NotAContainer(f"Cannot {verb} '{self}': '{target}' is not a container.")
        if self.is_container() and not force:
            raise ContainerRequiresForce(
                f"Cannot {verb} container '{self}' unless force is true."
            )
        if target.child(self.basename) is not None:
            raise DestinationExists(
                f"Cannot {verb} '{self}': '{target.canonicalize(self.basename)}' already exists."
            )
        if self.is_container() and is_under(target.path, self.path):
            raise PathError(f"Cannot {verb} container '{self}' into itself.")
