from typing import List
from rich.text import Text

from ignoretree.models import Aggregate, FileNode, Mark
from ignoretree.tree import summary

BOX_LOCKED = "[X]"
BOX_IGNORED = "[x]"
BOX_MIXED = "[/]"
BOX_INCLUDED = "[ ]"


def mark_box(node: FileNode) -> str:
    """Checkbox for a node: locked, ignored, partially ignored or included."""
    if node.mark == Mark.LOCKED:
        return BOX_LOCKED
    state = summary(node)
    if state == Aggregate.IGNORED:
        return BOX_IGNORED
    if state == Aggregate.MIXED:
        return BOX_MIXED
    return BOX_INCLUDED


def format_label(node: FileNode) -> Text:
    """Styled label used by the interactive editor."""
    suffix = "/" if node.is_dir and node.parts else ""
    label = f"{mark_box(node)} {node.name}{suffix}"
    if node.mark == Mark.LOCKED:
        return Text(label, style="dim")
    if node.is_dir:
        return Text(label, style="bold blue")
    return Text(label)


class Renderer:
    """
    Renderer takes the root FileNode and produces a plain-text view:
      - render_tree(): the directory/file hierarchy in ASCII form, each entry
        prefixed by its ignore checkbox
    """
    def __init__(self, root: FileNode):
        self.root = root

    def render_tree(self) -> str:
        """Return an ASCII tree of the FileNode hierarchy."""
        lines = [self._format_node(self.root)]
        lines.extend(self._format_children(list(self.root.iter_children()), prefix=""))
        return "\n".join(lines)

    def _format_node(self, node: FileNode) -> str:
        suffix = "/" if node.is_dir and node.parts else ""
        return f"{mark_box(node)} {node.name}{suffix}"

    def _format_children(self, nodes: List[FileNode], prefix: str) -> List[str]:
        """Recursively format child nodes with ASCII connectors."""
        formatted = []
        count = len(nodes)
        for index, node in enumerate(nodes):
            is_last = (index == count - 1)
            connector = "└── " if is_last else "├── "
            formatted.append(f"{prefix}{connector}{self._format_node(node)}")

            if node.children:
                next_prefix = prefix + ("    " if is_last else "│   ")
                formatted.extend(self._format_children(list(node.iter_children()), next_prefix))
        return formatted
