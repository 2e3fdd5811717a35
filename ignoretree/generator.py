"""
Pattern generator: the inverse of the interpreter.

Walks the tree top-down and emits the classic/exception entries that make
interpret() reproduce every node's mark, then merges them with the lines of
the original file that the tree does not own.
"""

from __future__ import annotations
from typing import Callable, List, Sequence

from ignoretree.models import Aggregate, FileNode, Mark, PatternEntry, PatternKind, PatternLine
from ignoretree.patterns import format_entry
from ignoretree.tree import summary


def _entry(node: FileNode, mark: Mark, contents_only: bool = False) -> PatternEntry:
    kind = PatternKind.CLASSIC if mark == Mark.IGNORED else PatternKind.EXCEPTION
    entry = PatternEntry(kind=kind, segments=node.parts, contents_only=contents_only)
    return entry.model_copy(update={"raw": format_entry(entry)})


def _as_mark(state: Aggregate) -> Mark:
    return Mark.IGNORED if state == Aggregate.IGNORED else Mark.INCLUDED


def _contents_default(node: FileNode) -> Mark:
    """Majority state of the non-locked children; ties go to Ignored."""
    ignored = included = 0
    for child in node.iter_children():
        if child.mark == Mark.LOCKED:
            continue
        state = summary(child)
        vote = _as_mark(state) if state != Aggregate.MIXED else child.mark
        if vote == Mark.IGNORED:
            ignored += 1
        else:
            included += 1
    return Mark.IGNORED if ignored >= included else Mark.INCLUDED


def _emit(node: FileNode, inherited: Mark, out: List[PatternEntry]) -> None:
    if node.mark == Mark.LOCKED:
        return

    state = summary(node)
    if state != Aggregate.MIXED:
        mark = _as_mark(state)
        if mark != inherited:
            out.append(_entry(node, mark))
        return

    current = inherited
    if node.mark != current:
        out.append(_entry(node, node.mark))
        current = node.mark
    default = _contents_default(node)
    if default != current:
        out.append(_entry(node, default, contents_only=True))
    for child in node.iter_children():
        _emit(child, default, out)


def generate(root: FileNode) -> List[PatternEntry]:
    """Ordered classic/exception entries reproducing the marks of the tree."""
    out: List[PatternEntry] = []
    posture = Mark.IGNORED if root.mark == Mark.IGNORED else Mark.INCLUDED
    if posture == Mark.IGNORED:
        out.append(_entry(root, Mark.IGNORED, contents_only=True))
    for child in root.iter_children():
        _emit(child, posture, out)
    return out


def merge_lines(
    original: Sequence[PatternLine],
    generated: Sequence[PatternEntry],
    is_preserved: Callable[[PatternLine], bool],
) -> List[str]:
    """Lay out the new file: leading comment block, generated entries, then
    every other preserved original line in its original order.
    """
    header_end = 0
    while header_end < len(original) and original[header_end].entry is None:
        header_end += 1

    lines = [line.text for line in original[:header_end]]
    lines.extend(format_entry(entry) for entry in generated)
    lines.extend(line.text for line in original[header_end:] if is_preserved(line))
    return lines
