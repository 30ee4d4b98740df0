import pytest
from mountfs import MemoryObject, RealObject

pytest_plugins = ["mountfs._pytest_plugin"]


@pytest.fixture
def tree(memfs) -> MemoryObject:
    """メモリツリー: / -> [/a -> [/a/x], /b]"""
    memfs.mkfile("/a/x")
    memfs.mkfile("/b")
    return memfs


@pytest.fixture
def real_root(tmp_path) -> RealObject:
    """tmp_path をルートにした RealObject。"""
    return RealObject(str(tmp_path))
