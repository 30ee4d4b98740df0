"""Restricted environment use case: a bounded memory tree as a sandbox."""
import pytest
from mountfs import FindDecision, MemoryObject, NodeLimitExceeded


@pytest.fixture
def sandbox():
    return MemoryObject(max_nodes=20)


def test_node_limit_enforced(sandbox):
    """Writing too many files hits the node limit."""
    with pytest.raises(NodeLimitExceeded):
        for i in range(100):
            sandbox.mkfile(f"/f{i}")
    assert sandbox.backend.node_count() == 20


def test_cleanup_frees_nodes(sandbox):
    """Removing a subtree makes room for new files."""
    for i in range(10):
        sandbox.mkfile(f"/cache/{i}")
    with pytest.raises(NodeLimitExceeded):
        for i in range(10):
            sandbox.mkfile(f"/more/{i}")
    sandbox.lookup("/cache").remove(force=True)
    sandbox.mkfile("/more/9")
    assert sandbox.exists("/more/9")


def test_prune_hidden_directories(sandbox):
    """find can skip whole subtrees, like a .git directory."""
    for path in ["/.git/HEAD", "/.git/objects/ab", "/app.py", "/lib/core.py"]:
        sandbox.mkfile(path)

    def visible_files(obj):
        hidden = obj.basename.startswith(".") and not obj.is_root()
        return FindDecision(include=obj.has_content() and not hidden, prune_subtree=hidden)

    assert [o.path for o in sandbox.find(visible_files)] == ["/app.py", "/lib/core.py"]
