from __future__ import annotations

import codecs
import time
from typing import Any

from ._exceptions import (
    ContainerNotEmpty,
    DestinationExists,
    InvalidObjectError,
    NodeLimitExceeded,
    PathError,
    UnknownProperty,
)
from ._handle import MemoryFileHandle
from ._object import FileSystemObject
from ._path import ROOT, basename, dirname, join_path, split_path, validate_name
from ._text import TextHandle
from ._typing import MemoryStatResult

# ---------------------------------------------------------------------------
#  Directory Index Layer
# ---------------------------------------------------------------------------


class DirNode:
    __slots__ = ("node_id", "children", "created_at", "modified_at")

    def __init__(self, node_id: int) -> None:
        self.node_id: int = node_id
        self.children: dict[str, int] = {}
        now = time.time()
        self.created_at: float = now
        self.modified_at: float = now


class FileNode:
    __slots__ = ("node_id", "data", "generation", "created_at", "modified_at")

    def __init__(self, node_id: int) -> None:
        self.node_id: int = node_id
        self.data: bytearray = bytearray()
        self.generation: int = 0
        now = time.time()
        self.created_at: float = now
        self.modified_at: float = now


Node = DirNode | FileNode


class MemoryStore:
    """Node table shared by every :class:`MemoryObject` of one tree."""

    def __init__(self, max_nodes: int | None = None, encoding: str = "utf-8") -> None:
        if max_nodes is not None and max_nodes < 1:
            raise ValueError(f"Invalid max_nodes value: {max_nodes!r}. Expected None or >= 1.")
        try:
            codecs.lookup(encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding: {encoding!r}") from None
        self.max_nodes: int | None = max_nodes
        self.encoding: str = encoding
        self._nodes: dict[int, Node] = {}
        self._next_node_id: int = 0
        self.root_node = self._alloc_dir()

    # -- node allocation helpers --

    def _check_limit(self) -> None:
        if self.max_nodes is not None and len(self._nodes) >= self.max_nodes:
            raise NodeLimitExceeded(len(self._nodes), self.max_nodes)

    def _alloc_dir(self) -> DirNode:
        self._check_limit()
        nid = self._next_node_id
        self._next_node_id += 1
        node = DirNode(nid)
        self._nodes[nid] = node
        return node

    def _alloc_file(self) -> FileNode:
        self._check_limit()
        nid = self._next_node_id
        self._next_node_id += 1
        node = FileNode(nid)
        self._nodes[nid] = node
        return node

    def node_count(self) -> int:
        return len(self._nodes)

    # -- path helpers --

    def resolve(self, npath: str) -> Node | None:
        current: Node = self.root_node
        for part in split_path(npath):
            if not isinstance(current, DirNode):
                return None
            child_id = current.children.get(part)
            if child_id is None:
                return None
            current = self._nodes[child_id]
        return current

    def resolve_parent_and_name(self, npath: str) -> tuple[DirNode, str] | None:
        parent_node = self.resolve(dirname(npath))
        if not isinstance(parent_node, DirNode):
            return None
        return parent_node, basename(npath)

    def child_node(self, parent: DirNode, name: str) -> Node | None:
        child_id = parent.children.get(name)
        return None if child_id is None else self._nodes[child_id]

    # -- mutation --

    def attach(self, parent: DirNode, name: str, node: Node) -> None:
        parent.children[name] = node.node_id
        parent.modified_at = time.time()

    def detach(self, parent: DirNode, name: str) -> None:
        del parent.children[name]
        parent.modified_at = time.time()

    def makedirs(self, npath: str) -> DirNode:
        """Create *npath* and any missing parents.

        Parents created before a failure are left in place.
        """
        current = self.root_node
        current_path = ROOT
        for part in split_path(npath):
            current_path = join_path(current_path, part)
            child = self.child_node(current, part)
            if child is None:
                new_dir = self._alloc_dir()
                self.attach(current, part, new_dir)
                current = new_dir
            elif isinstance(child, DirNode):
                current = child
            else:
                raise DestinationExists(f"A content node exists at '{current_path}'")
        return current

    def create_file(self, npath: str) -> FileNode:
        parent = self.makedirs(dirname(npath))
        fnode = self._alloc_file()
        self.attach(parent, basename(npath), fnode)
        return fnode

    def remove_subtree(self, node: Node) -> None:
        if isinstance(node, DirNode):
            for child_id in list(node.children.values()):
                self.remove_subtree(self._nodes[child_id])
            node.children.clear()
        self._nodes.pop(node.node_id, None)

    def deep_copy(self, node: Node) -> Node:
        """Copy a subtree; on failure every node created so far is dropped."""
        created_node_ids: list[int] = []
        try:
            return self._deep_copy_subtree(node, created_node_ids)
        except Exception:
            for nid in reversed(created_node_ids):
                self._nodes.pop(nid, None)
            raise

    def _deep_copy_subtree(self, node: Node, created_node_ids: list[int]) -> Node:
        if isinstance(node, FileNode):
            new_fnode = self._alloc_file()
            created_node_ids.append(new_fnode.node_id)
            new_fnode.data = bytearray(node.data)
            return new_fnode
        new_dir = self._alloc_dir()
        created_node_ids.append(new_dir.node_id)
        for name, child_id in node.children.items():
            new_child = self._deep_copy_subtree(self._nodes[child_id], created_node_ids)
            new_dir.children[name] = new_child.node_id
        return new_dir


# ---------------------------------------------------------------------------
#  MemoryObject
# ---------------------------------------------------------------------------


def _parse_mode(mode: str) -> tuple[str, bool, bool]:
    kinds = [c for c in mode if c in "rwax"]
    if (
        len(kinds) != 1
        or set(mode) - set("rwax+bt")
        or len(set(mode)) != len(mode)
        or ("b" in mode and "t" in mode)
    ):
        raise ValueError(f"Invalid mode: {mode!r}")
    return kinds[0], "+" in mode, "b" in mode


class MemoryObject(FileSystemObject):
    """A path within an in-memory tree.

    ``MemoryObject()`` creates a new, empty tree and returns its root.
    Further objects are obtained by navigation and share the tree.
    """

    _PROPERTIES = (
        "basename",
        "dirname",
        "path",
        "size",
        "created_at",
        "modified_at",
        "generation",
        "is_dir",
    )
    _SETTABLE = ("created_at", "modified_at")

    def __init__(
        self,
        max_nodes: int | None = None,
        encoding: str = "utf-8",
        *,
        store: MemoryStore | None = None,
        path: str = ROOT,
    ) -> None:
        self._store = store if store is not None else MemoryStore(max_nodes, encoding)
        self._path = path

    def _spawn(self, path: str) -> MemoryObject:
        return MemoryObject(store=self._store, path=path)

    def _node(self) -> Node:
        node = self._store.resolve(self._path)
        if node is None:
            raise InvalidObjectError(f"No such file or directory: '{self._path}'")
        return node

    @property
    def backend(self) -> MemoryStore:
        return self._store

    def is_valid(self) -> bool:
        return self._store.resolve(self._path) is not None

    def root(self) -> MemoryObject:
        return self._spawn(ROOT)

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
        if key not in self._PROPERTIES:
            raise UnknownProperty(key)
        return self.stat()[key]  # type: ignore[literal-required]

    def set_property(self, key: str, value: Any) -> None:
        if key not in self._SETTABLE:
            raise UnknownProperty(key)
        setattr(self._node(), key, float(value))

    def stat(self) -> MemoryStatResult:
        node = self._node()
        if isinstance(node, DirNode):
            return MemoryStatResult(
                size=0,
                created_at=node.created_at,
                modified_at=node.modified_at,
                generation=0,
                is_dir=True,
            )
        return MemoryStatResult(
            size=len(node.data),
            created_at=node.created_at,
            modified_at=node.modified_at,
            generation=node.generation,
            is_dir=False,
        )

    # -- classification --

    def is_container(self) -> bool:
        return isinstance(self._store.resolve(self._path), DirNode)

    def has_content(self) -> bool:
        return isinstance(self._store.resolve(self._path), FileNode)

    def is_readable(self) -> bool:
        return self.has_content()

    def is_writable(self) -> bool:
        return self.has_content()

    def is_seekable(self) -> bool:
        return self.has_content()

    def is_appendable(self) -> bool:
        return self.has_content()

    # -- content --

    def open(self, mode: str = "r") -> MemoryFileHandle | TextHandle:
        kind, plus, binary = _parse_mode(mode)
        node = self._store.resolve(self._path)
        if isinstance(node, DirNode):
            raise IsADirectoryError(f"Is a directory: '{self._path}'")
        if kind == "r":
            if node is None:
                raise InvalidObjectError(f"No such file: '{self._path}'")
        elif kind == "x":
            if node is not None:
                raise DestinationExists(f"File exists: '{self._path}'")
            node = self._create_file()
        elif node is None:
            node = self._create_file()
        elif kind == "w":
            node.data.clear()
            node.generation += 1
            node.modified_at = time.time()

        handle = MemoryFileHandle(
            node,
            self._path,
            mode,
            readable=kind == "r" or plus,
            writable=kind != "r" or plus,
            is_append=kind == "a",
        )
        if binary:
            return handle
        return TextHandle(handle, encoding=self._store.encoding)

    def _create_file(self) -> FileNode:
        pinfo = self._store.resolve_parent_and_name(self._path)
        if pinfo is None:
            raise InvalidObjectError(f"Parent directory does not exist: '{self.dirname}'")
        parent, name = pinfo
        fnode = self._store._alloc_file()
        self._store.attach(parent, name, fnode)
        return fnode

    # -- containers --

    def children(self) -> list[MemoryObject]:
        node = self._node()
        if not isinstance(node, DirNode):
            return []
        return [self._spawn(join_path(self._path, name)) for name in node.children]

    def child(self, name: str) -> MemoryObject | None:
        validate_name(name)
        node = self._node()
        if not isinstance(node, DirNode) or name not in node.children:
            return None
        return self._spawn(join_path(self._path, name))

    def mkdir(self, path: str) -> MemoryObject:
        npath = self.canonicalize(path)
        self._store.makedirs(npath)
        return self._spawn(npath)

    def mkfile(self, path: str) -> MemoryObject:
        npath = self.canonicalize(path)
        node = self._store.resolve(npath)
        if isinstance(node, DirNode):
            raise DestinationExists(f"A container exists at '{npath}'")
        if isinstance(node, FileNode):
            node.data.clear()
            node.generation += 1
            node.modified_at = time.time()
        else:
            self._store.create_file(npath)
        return self._spawn(npath)

    # -- mutation --

    def rename(self, name: str) -> MemoryObject:
        validate_name(name)
        if self.is_root():
            raise PathError("Cannot rename the root container.")
        node = self._node()
        parent, old_name = self._store.resolve_parent_and_name(self._path)  # type: ignore[misc]
        if name == old_name:
            return self
        if name in parent.children:
            raise DestinationExists(f"Destination already exists: '{join_path(self.dirname, name)}'")
        self._store.detach(parent, old_name)
        self._store.attach(parent, name, node)
        self._path = join_path(self.dirname, name)
        return self

    def move(self, target: FileSystemObject, force: bool = False) -> MemoryObject:
        node = self._node()
        self._check_transfer(target, force, "move")
        dst = self._store.resolve(target.path)
        assert isinstance(dst, DirNode)
        parent, name = self._store.resolve_parent_and_name(self._path)  # type: ignore[misc]
        self._store.detach(parent, name)
        self._store.attach(dst, name, node)
        self._path = join_path(target.path, name)
        return self

    def copy(self, target: FileSystemObject, force: bool = False) -> MemoryObject:
        node = self._node()
        self._check_transfer(target, force, "copy")
        dst = self._store.resolve(target.path)
        assert isinstance(dst, DirNode)
        new_node = self._store.deep_copy(node)
        self._store.attach(dst, self.basename, new_node)
        return self._spawn(join_path(target.path, self.basename))

    def remove(self, force: bool = False) -> None:
        if self.is_root():
            raise PathError("Cannot remove the root container.")
        node = self._node()
        if isinstance(node, DirNode) and node.children and not force:
            raise ContainerNotEmpty(
                f"Cannot remove container '{self._path}' with children unless force is true."
            )
        parent, name = self._store.resolve_parent_and_name(self._path)  # type: ignore[misc]
        self._store.detach(parent, name)
        self._store.remove_subtree(node)
