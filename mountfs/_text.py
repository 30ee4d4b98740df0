"""TextHandle: bufferless text I/O over a :class:`MemoryFileHandle`.

Used for text-mode ``open`` on memory objects instead of
``io.TextIOWrapper``, so every write lands in the node immediately.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._handle import MemoryFileHandle


class TextHandle:
    """Text wrapper that owns a binary memory handle.

    Parameters
    ----------
    handle:
        Binary handle obtained from ``MemoryObject.open(..."b")``.
    encoding:
        Text encoding (default ``"utf-8"``).
    errors:
        Decode error handling (default ``"strict"``).

    Closing the text handle closes the binary handle.
    """

    def __init__(
        self,
        handle: MemoryFileHandle,
        encoding: str = "utf-8",
        errors: str = "strict",
    ) -> None:
        self._handle = handle
        self._encoding = encoding
        self._errors = errors

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def errors(self) -> str:
        return self._errors

    @property
    def name(self) -> str:
        return self._handle.name

    @property
    def mode(self) -> str:
        return self._handle.mode

    @property
    def closed(self) -> bool:
        return self._handle.closed

    @property
    def buffer(self) -> MemoryFileHandle:
        return self._handle

    def write(self, text: str) -> int:
        """Encode *text* and write it.

        Returns
        -------
        int
            Number of characters written (not bytes).
        """
        self._handle.write(text.encode(self._encoding, self._errors))
        return len(text)

    def writelines(self, lines: list[str]) -> None:
        for line in lines:
            self.write(line)

    def read(self, size: int = -1) -> str:
        """Read and decode.

        Parameters
        ----------
        size:
            Maximum number of bytes to read. ``-1`` reads everything.
        """
        return self._handle.read(size).decode(self._encoding, self._errors)

    def readline(self, limit: int = -1) -> str:
        """Read one ``\\n`` terminated line, terminator included."""
        return self._handle.readline(limit).decode(self._encoding, self._errors)

    def readlines(self) -> list[str]:
        return list(self)

    def readable(self) -> bool:
        return self._handle.readable()

    def writable(self) -> bool:
        return self._handle.writable()

    def seekable(self) -> bool:
        return self._handle.seekable()

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._handle.seek(offset, whence)

    def tell(self) -> int:
        return self._handle.tell()

    def flush(self) -> None:
        self._handle.flush()

    def close(self) -> None:
        self._handle.close()

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        line = self.readline()
        if not line:
            raise StopIteration
        return line

    def __enter__(self) -> TextHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
