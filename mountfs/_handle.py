from __future__ import annotations

import io
import time
import warnings
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._memory import FileNode


class MemoryFileHandle:
    """Binary stream over the content of one memory node.

    Reads and writes go straight to the node, so other handles on the same
    node see every change immediately.
    """

    def __init__(
        self,
        fnode: FileNode,
        path: str,
        mode: str,
        readable: bool,
        writable: bool,
        is_append: bool = False,
    ) -> None:
        self._fnode = fnode
        self._path = path
        self._mode = mode
        self._readable = readable
        self._writable = writable
        self._cursor: int = len(fnode.data) if is_append else 0
        self._is_closed: bool = False
        self._is_append: bool = is_append

    @property
    def name(self) -> str:
        return self._path

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def closed(self) -> bool:
        return self._is_closed

    def _assert_readable(self) -> None:
        if not self._readable:
            raise io.UnsupportedOperation(f"not readable in mode '{self._mode}'")

    def _assert_writable(self) -> None:
        if not self._writable:
            raise io.UnsupportedOperation(f"not writable in mode '{self._mode}'")

    def _assert_open(self) -> None:
        if self._is_closed:
            raise ValueError("I/O operation on closed file.")

    def _touch(self) -> None:
        self._fnode.generation += 1
        self._fnode.modified_at = time.time()

    def read(self, size: int = -1) -> bytes:
        self._assert_open()
        self._assert_readable()
        data = self._fnode.data
        if self._cursor >= len(data):
            return b""
        if size < 0:
            end = len(data)
        else:
            end = min(self._cursor + size, len(data))
        chunk = bytes(data[self._cursor:end])
        self._cursor = end
        return chunk

    def readline(self, limit: int = -1) -> bytes:
        self._assert_open()
        self._assert_readable()
        data = self._fnode.data
        if self._cursor >= len(data):
            return b""
        end = data.find(b"\n", self._cursor)
        end = len(data) if end < 0 else end + 1
        if limit >= 0:
            end = min(end, self._cursor + limit)
        chunk = bytes(data[self._cursor:end])
        self._cursor = end
        return chunk

    def write(self, data: bytes) -> int:
        self._assert_open()
        self._assert_writable()
        buf = self._fnode.data
        if self._is_append:
            self._cursor = len(buf)
        if self._cursor > len(buf):
            buf.extend(bytes(self._cursor - len(buf)))
        n = len(data)
        buf[self._cursor:self._cursor + n] = data
        self._cursor += n
        if n > 0:
            self._touch()
        return n

    def seek(self, offset: int, whence: int = 0) -> int:
        self._assert_open()
        if whence == 0:
            if offset < 0:
                raise ValueError("seek offset must be >= 0 for SEEK_SET")
            new_pos = offset
        elif whence == 1:
            new_pos = self._cursor + offset
        elif whence == 2:
            new_pos = len(self._fnode.data) + offset
        else:
            raise ValueError(f"Invalid whence value: {whence}. Must be 0, 1, or 2.")
        if new_pos < 0:
            raise ValueError(f"Resulting cursor position {new_pos} is negative.")
        self._cursor = new_pos
        return self._cursor

    def tell(self) -> int:
        self._assert_open()
        return self._cursor

    def truncate(self, size: int | None = None) -> int:
        self._assert_open()
        self._assert_writable()
        target = self._cursor if size is None else size
        if target < 0:
            raise ValueError("truncate size must be >= 0")
        buf = self._fnode.data
        before = len(buf)
        if target < before:
            del buf[target:]
        else:
            buf.extend(bytes(target - before))
        if before != target:
            self._touch()
        return target

    def flush(self) -> None:
        self._assert_open()

    def readable(self) -> bool:
        self._assert_open()
        return self._readable

    def writable(self) -> bool:
        self._assert_open()
        return self._writable

    def seekable(self) -> bool:
        self._assert_open()
        return True

    def close(self) -> None:
        self._is_closed = True

    def __enter__(self) -> MemoryFileHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __del__(self) -> None:
        if not self._is_closed:
            warnings.warn(
                f"MemoryFileHandle for '{self._path}' was not closed properly. "
                "Always use 'with obj.open(...) as f:' to ensure cleanup.",
                ResourceWarning,
                stacklevel=1,
            )
            self._is_closed = True
