from ignoretree.models import FileNode
from ignoretree.picker.base import Picker
from ignoretree.renderer import format_label
from ignoretree.session import IgnoreSession
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Tree, Button, Header, Footer
from textual.widgets.tree import TreeNode
from textual.containers import Horizontal

class TextualPicker(Picker):
    """
    Uses Textual to display a navigable tree of the session's FileNodes with ignore checkboxes.
    """
    def pick(self, session: IgnoreSession) -> bool:
        app = _EditorApp(session)
        app.run()
        return app.saved

class _EditorApp(App):  # pylint: disable=too-many-public-methods
    CSS = """
    #ignore-tree {
        height: 1fr;
        border: solid gray;
        padding: 1;
    }
    /* this is the focused row highlight */
    #ignore-tree .cursor-line {
        background: blue;
        color: white;
    }
    Button {
        margin: 1 2;
    }
    """

    # priority so the Tree widget does not swallow space/left/right first
    BINDINGS = [ Binding("space", "toggle_mark", "Toggle ignored", priority=True),
                 Binding("s", "save", "Save", priority=True),
                 Binding("q", "quit_without_saving", "Quit", priority=True),
                 Binding("left", "collapse_or_parent", "Collapse / go to parent", priority=True),
                 Binding("right", "expand_or_child", "Expand / go to first child", priority=True),
              ]

    def __init__(self, session: IgnoreSession, **kwargs):
        super().__init__(**kwargs)
        self.session = session
        self.saved = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        root = self.session.root
        tree = Tree(format_label(root), data=root, id="ignore-tree")
        tree.auto_expand = False
        # build only root level
        self._populate(tree.root)
        yield tree
        with Horizontal():
            yield Button("Save", id="save", variant="success")
            yield Button("Quit", id="quit", variant="error")
        yield Footer()

    async def on_mount(self) -> None:
        tree = self.query_one(Tree)
        tree.focus()
        tree.root.expand()   # show top-level entries immediately

    def _populate(self, node: TreeNode) -> None:
        """Add the UI children of a directory the first time it is opened."""
        file_node: FileNode = node.data
        if file_node is None or node.children or not file_node.children:
            return
        for child in file_node.iter_children():
            node.add(format_label(child), data=child, allow_expand=bool(child.children))

    async def on_tree_node_expanded(self, event: Tree.NodeExpanded) -> None:
        """Lazy-load children on expand."""
        self._populate(event.node)

    def _refresh_labels(self, node: TreeNode) -> None:
        """Relabel every loaded UI node; aggregates are recomputed on each read."""
        if node.data is not None:
            node.set_label(format_label(node.data))
        for child in node.children:
            self._refresh_labels(child)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            await self.action_save()
        elif event.button.id == "quit":
            await self.action_quit_without_saving()

    async def action_toggle_mark(self) -> None:
        tree = self.query_one(Tree)
        node = tree.cursor_node
        if not node or node.data is None:
            return
        self.session.toggle(node.data.parts)
        self._refresh_labels(tree.root)
        tree.refresh(layout=True)

    async def action_save(self) -> None:
        self.saved = True
        self.exit(True)

    async def action_quit_without_saving(self) -> None:
        self.saved = False
        self.exit(False)

    async def action_expand_or_child(self) -> None:
        tree = self.query_one(Tree)
        node = tree.cursor_node
        if not node:
            return
        # If this row can expand and is currently collapsed, expand it (works for root and folders)
        if node.allow_expand and not node.is_expanded:
            self._populate(node)
            node.expand()
            tree.refresh(layout=True)
            return
        # Already expanded: move into first child if any
        if node.children:
            tree.select_node(node.children[0])

    async def action_collapse_or_parent(self) -> None:
        tree = self.query_one(Tree)
        node = tree.cursor_node
        if not node:
            return
        if node.is_expanded:
            node.collapse()
            tree.refresh(layout=True)
            return
        if node.parent:
            tree.select_node(node.parent)
