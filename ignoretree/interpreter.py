"""
Rule interpreter: turns an ordered pattern list into per-node marks.

Classic and exception entries are applied by path prefix with last-match-wins
ordering; wildcard lines go to the glob matcher and lock the files they match.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from ignoretree.gitignore import PathspecMatcher
from ignoretree.models import FileNode, Mark, PatternEntry, PatternKind, PatternLine
from ignoretree.patterns import normalize_path

# (position in the file, kind) of the entry currently deciding a node
Decision = Tuple[int, PatternKind]


class GlobMatcher(Protocol):
    def matches(self, patterns: Sequence[str], relative_path: str) -> bool:
        ...


class RuleSet:
    """Compiled view of a pattern list, shared by interpret() and is_ignored()."""

    def __init__(self, entries: Iterable[PatternEntry], matcher: Optional[GlobMatcher] = None):
        self.matcher = matcher or PathspecMatcher()
        self.generic: List[str] = []
        self._exact: Dict[Tuple[str, ...], Decision] = {}
        self._contents: Dict[Tuple[str, ...], Decision] = {}
        for index, entry in enumerate(entries):
            if entry.kind == PatternKind.GENERIC:
                self.generic.append(entry.raw)
                continue
            table = self._contents if entry.contents_only else self._exact
            table[entry.segments] = (index, entry.kind)

    @classmethod
    def from_lines(cls, lines: Iterable[PatternLine], matcher: Optional[GlobMatcher] = None) -> "RuleSet":
        return cls((line.entry for line in lines if line.entry is not None), matcher)

    def is_locked(self, parts: Sequence[str]) -> bool:
        return bool(self.generic) and self.matcher.matches(self.generic, "/".join(parts))

    def resolve(self, parts: Tuple[str, ...], inherited: Optional[Decision]) -> Optional[Decision]:
        """Latest entry deciding ``parts``, given the decision inherited from its parent."""
        # for the root, parts[:-1] is the root again: that is how `/*` marks the root itself
        candidates = [inherited, self._exact.get(parts), self._contents.get(parts[:-1])]
        return max((c for c in candidates if c is not None), default=None)

    @staticmethod
    def mark_for(decision: Optional[Decision]) -> Mark:
        if decision is not None and decision[1] == PatternKind.CLASSIC:
            return Mark.IGNORED
        return Mark.INCLUDED

    def is_ignored(self, relative_path: str) -> bool:
        """Answer for a single file path, the same way interpret() would mark it."""
        parts = normalize_path(relative_path)
        if parts and self.is_locked(parts):
            return True
        decision = self.resolve((), None)
        for depth in range(1, len(parts) + 1):
            decision = self.resolve(parts[:depth], decision)
        return self.mark_for(decision) == Mark.IGNORED


def interpret(root: FileNode, rules: RuleSet) -> FileNode:
    """Set the mark of every node under ``root`` from ``rules``; returns ``root``."""

    def visit(node: FileNode, inherited: Optional[Decision]) -> None:
        decision = rules.resolve(node.parts, inherited)
        if not node.is_dir and rules.is_locked(node.parts):
            node.mark = Mark.LOCKED
        else:
            node.mark = rules.mark_for(decision)
        for child in node.iter_children():
            visit(child, decision)

    visit(root, None)
    return root


def covers(entry: PatternEntry, root: FileNode) -> bool:
    """Whether ``entry`` reaches at least one node of the tree under ``root``."""
    if entry.kind == PatternKind.GENERIC:
        return True
    node = root
    for name in entry.segments:
        node = (node.children or {}).get(name)
        if node is None:
            return False
    if entry.contents_only and entry.segments:
        return bool(node.children)
    return True
