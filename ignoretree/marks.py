"""
Mark propagation for toggles.
"""
from __future__ import annotations
import logging
from typing import Sequence

from ignoretree.models import Aggregate, FileNode, Mark
from ignoretree.tree import node_stack, summary

logger = logging.getLogger(__name__)


def set_subtree_mark(node: FileNode, mark: Mark) -> None:
    """Apply ``mark`` to ``node`` and every descendant, leaving locked files alone."""
    if node.mark == Mark.LOCKED:
        return
    node.mark = mark
    for child in node.iter_children():
        set_subtree_mark(child, mark)


def toggle(root: FileNode, parts: Sequence[str]) -> None:
    """Flip the node at ``parts`` between Included and Ignored.

    The node counts as Ignored only when it and everything below it already
    is, so toggling a mixed directory ignores all of it. Re-including a node
    also re-admits its ignored ancestors (never the root, whose mark is the
    posture): content below an excluded directory cannot be re-included.
    Locked files are a no-op. Raises KeyError for an unknown path.
    """
    stack = node_stack(root, parts)
    node = stack[-1]
    if node.mark == Mark.LOCKED:
        logger.debug(f"Ignoring toggle of locked path {node.path!r}")
        return

    target = Mark.INCLUDED if summary(node) == Aggregate.IGNORED else Mark.IGNORED
    set_subtree_mark(node, target)
    if target == Mark.INCLUDED:
        for ancestor in stack[1:-1]:
            if ancestor.mark == Mark.IGNORED:
                ancestor.mark = Mark.INCLUDED
    logger.debug(f"Toggled {node.path or '.'!r} to {target.value}")
