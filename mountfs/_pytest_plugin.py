"""pytest fixture plugin.

Usage::

    # conftest.py
    pytest_plugins = ["mountfs._pytest_plugin"]

This makes the ``memfs`` and ``mount_table`` fixtures available::

    def test_something(memfs):
        memfs.mkfile("/a.txt")
"""

import pytest

from ._memory import MemoryObject
from ._table import MountTable


@pytest.fixture
def memfs() -> MemoryObject:
    """Root of an empty in-memory tree, independent per test."""
    return MemoryObject()


@pytest.fixture
def mount_table() -> MountTable:
    """A table with an in-memory root and a second in-memory tree at ``/mnt``.

    ``/mnt`` exists in the root tree before mounting, as every mount point must.
    """
    base = MemoryObject()
    base.mkdir("/mnt")
    return MountTable({"/": base, "/mnt": MemoryObject()})
