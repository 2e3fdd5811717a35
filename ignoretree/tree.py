"""
The file tree: building it from scanned paths, lookups and the tri-state summary.
"""
from __future__ import annotations
import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from ignoretree.models import Aggregate, FileNode, Mark, NodeType
from ignoretree.patterns import split_scanned_path

logger = logging.getLogger(__name__)


def build_tree(entries: Iterable[Tuple[str, NodeType]], name: str = ".") -> Tuple[FileNode, List[str]]:
    """Build the skeleton tree (every mark Included) from scanned ``(path, kind)`` pairs.

    Missing parent directories are created on the way. Paths that cannot be
    used are skipped and reported in the returned warnings list.
    """
    root = FileNode(name=name, parts=(), node_type=NodeType.DIRECTORY, children={})
    warnings: List[str] = []

    for rel_path, node_type in entries:
        parts = split_scanned_path(rel_path)
        if parts is None:
            warnings.append(f"Skipping unusable path {rel_path!r}")
            continue

        parent = root
        for depth, segment in enumerate(parts[:-1], start=1):
            child = parent.children.get(segment)
            if child is None:
                child = FileNode(name=segment, parts=parts[:depth], node_type=NodeType.DIRECTORY, children={})
                parent.children[segment] = child
            elif not child.is_dir:
                warnings.append(f"Skipping {rel_path!r}: {child.path!r} is not a directory")
                break
            parent = child
        else:
            existing = parent.children.get(parts[-1])
            if existing is None:
                is_dir = node_type == NodeType.DIRECTORY
                parent.children[parts[-1]] = FileNode(
                    name=parts[-1],
                    parts=parts,
                    node_type=node_type,
                    children={} if is_dir else None,
                )
            elif existing.node_type != node_type:
                warnings.append(f"Skipping {rel_path!r}: already present as a {existing.node_type}")

    _sort_children(root)
    for warning in warnings:
        logger.warning(warning)
    return root, warnings


def _sort_children(node: FileNode) -> None:
    if node.children is None:
        return
    node.children = dict(sorted(node.children.items()))
    for child in node.children.values():
        _sort_children(child)


def node_stack(root: FileNode, parts: Sequence[str]) -> List[FileNode]:
    """Return the chain of nodes from the root down to ``parts`` (inclusive).

    Raises KeyError when the path is not in the tree.
    """
    stack = [root]
    for name in parts:
        children = stack[-1].children or {}
        if name not in children:
            raise KeyError("/".join(parts))
        stack.append(children[name])
    return stack


def find_node(root: FileNode, parts: Sequence[str]) -> Optional[FileNode]:
    try:
        return node_stack(root, parts)[-1]
    except KeyError:
        return None


def iter_nodes(node: FileNode) -> Iterator[FileNode]:
    """Pre-order walk over ``node`` and everything below it."""
    yield node
    for child in node.iter_children():
        yield from iter_nodes(child)


def _state(mark: Mark) -> Aggregate:
    return Aggregate.IGNORED if mark == Mark.IGNORED else Aggregate.INCLUDED


def _combine(states: Iterable[Aggregate]) -> Optional[Aggregate]:
    result = None
    for state in states:
        if state == Aggregate.MIXED:
            return Aggregate.MIXED
        if result is None:
            result = state
        elif result != state:
            return Aggregate.MIXED
    return result


def aggregate(node: FileNode) -> Aggregate:
    """Uniform/Mixed state of a directory's non-locked children.

    Locked files never count; a directory without any other children is
    Uniform Included.
    """
    states = (summary(child) for child in node.iter_children() if child.mark != Mark.LOCKED)
    return _combine(states) or Aggregate.INCLUDED


def summary(node: FileNode) -> Aggregate:
    """Like aggregate(), but folds in the node's own mark."""
    own = _state(node.mark)
    if not node.is_dir:
        return own
    states = [own]
    states.extend(summary(child) for child in node.iter_children() if child.mark != Mark.LOCKED)
    return _combine(states)
