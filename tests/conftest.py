from pathlib import Path

import pytest

from ignoretree.models import NodeType
from ignoretree.patterns import parse_lines
from ignoretree.session import IgnoreSession
from ignoretree.tree import build_tree, iter_nodes


class FakeMatcher:
    """Glob matcher stand-in: a fixed set of locked paths, whatever the patterns."""
    def __init__(self, locked=()):
        self.locked = set(locked)
        self.calls = []

    def matches(self, patterns, relative_path):
        self.calls.append((tuple(patterns), relative_path))
        return relative_path in self.locked


@pytest.fixture
def make_tree():
    """
    Build a skeleton tree from paths; a trailing '/' makes an (empty) directory.
    """
    def _make(*paths):
        entries = []
        for p in paths:
            if p.endswith("/"):
                entries.append((p.rstrip("/"), NodeType.DIRECTORY))
            else:
                entries.append((p, NodeType.FILE))
        root, warnings = build_tree(entries)
        assert warnings == []
        return root
    return _make


@pytest.fixture
def make_session(make_tree, tmp_path: Path):
    def _make(paths, lines=(), matcher=None):
        return IgnoreSession(tmp_path, make_tree(*paths), parse_lines(lines), matcher)
    return _make


@pytest.fixture
def write_files():
    def _write(base: Path, *paths: str):
        for rel in paths:
            p = base / rel
            if rel.endswith("/"):
                p.mkdir(parents=True, exist_ok=True)
                continue
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(f"contents of {rel}\n", encoding="utf-8")
    return _write


@pytest.fixture
def marks_of():
    """(path, mark) pairs for every node, in tree order."""
    def _marks(root):
        return [(node.path, node.mark) for node in iter_nodes(root)]
    return _marks


@pytest.fixture
def fake_matcher():
    return FakeMatcher
