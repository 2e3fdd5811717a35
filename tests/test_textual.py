import pytest
from unittest.mock import patch
from textual.widgets import Tree
from ignoretree.gitignore import PathspecMatcher
from ignoretree.models import Mark
from ignoretree.picker.textuals import TextualPicker, _EditorApp
from ignoretree.tree import find_node

# --- Fixtures ---

@pytest.fixture
def session(make_session):
    """
    Creates a session over:
    .
    ├── folder/
    │   ├── file1.py
    │   └── file2.py
    ├── root_file.txt
    └── server.log   (locked)
    """
    return make_session(["folder/file1.py", "folder/file2.py", "root_file.txt", "server.log"],
                        ["*.log"], PathspecMatcher())


# --- Unit Tests for TextualPicker Wrapper ---

def test_textual_picker_pick_calls_app(session):
    """Test that the wrapper class initializes the App and reports the save choice."""
    picker = TextualPicker()

    with patch("ignoretree.picker.textuals._EditorApp") as MockApp:
        mock_app_instance = MockApp.return_value
        mock_app_instance.run.return_value = None
        mock_app_instance.saved = True

        assert picker.pick(session) is True
        MockApp.assert_called_once_with(session)
        mock_app_instance.run.assert_called_once()


# --- Integration Tests for _EditorApp using Pilot ---

@pytest.mark.asyncio
async def test_app_initialization(session):
    """Test that the app loads the tree and expands the root."""
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        assert tree.root.is_expanded
        assert "." in str(tree.root.label)
        assert len(tree.root.children) == 3
        assert str(tree.root.children[2].label) == "[X] server.log"


@pytest.mark.asyncio
async def test_lazy_loading_children(session):
    """Test that expanding a node lazy-loads its children."""
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        folder_node = tree.root.children[0]
        assert len(folder_node.children) == 0

        folder_node.expand()
        await pilot.pause()

        assert len(folder_node.children) == 2
        assert "file1.py" in str(folder_node.children[0].label)


@pytest.mark.asyncio
async def test_toggle_file_with_space(session):
    """Space toggles the ignored mark of the file under the cursor."""
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        await pilot.pause()
        target_node = tree.root.children[1]
        tree.select_node(target_node)

        await pilot.press("space")
        assert str(target_node.label) == "[x] root_file.txt"
        assert find_node(session.root, ("root_file.txt",)).mark == Mark.IGNORED

        await pilot.press("space")
        assert str(target_node.label) == "[ ] root_file.txt"
        assert find_node(session.root, ("root_file.txt",)).mark == Mark.INCLUDED


@pytest.mark.asyncio
async def test_toggle_folder_marks_descendants(session):
    """Toggling a folder ignores all descendants and updates loaded labels."""
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        folder_ui_node = tree.root.children[0]
        folder_ui_node.expand()
        await pilot.pause()
        tree.select_node(folder_ui_node)

        await pilot.press("space")

        assert str(folder_ui_node.label) == "[x] folder/"
        assert str(folder_ui_node.children[0].label) == "[x] file1.py"
        assert find_node(session.root, ("folder", "file2.py")).mark == Mark.IGNORED
        assert str(tree.root.label) == "[/] ."


@pytest.mark.asyncio
async def test_partial_selection_visuals(session):
    """Parent gets '[/]' while only some children are ignored."""
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        folder_ui_node = tree.root.children[0]
        folder_ui_node.expand()
        await pilot.pause()

        tree.select_node(folder_ui_node.children[0])
        await pilot.press("space")
        assert str(folder_ui_node.label) == "[/] folder/"

        tree.select_node(folder_ui_node.children[1])
        await pilot.press("space")
        assert str(folder_ui_node.label) == "[x] folder/"


@pytest.mark.asyncio
async def test_locked_file_cannot_be_toggled(session):
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        await pilot.pause()
        locked_node = tree.root.children[2]
        tree.select_node(locked_node)

        await pilot.press("space")
        assert str(locked_node.label) == "[X] server.log"
        assert find_node(session.root, ("server.log",)).mark == Mark.LOCKED


@pytest.mark.asyncio
async def test_keyboard_navigation_custom_actions(session):
    """Test custom Left/Right navigation bindings."""
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        await pilot.pause()
        folder_node = tree.root.children[0]
        tree.select_node(folder_node)

        # RIGHT -> Expand
        await pilot.press("right")
        assert folder_node.is_expanded
        await pilot.pause()

        # RIGHT -> Go to child
        await pilot.press("right")
        assert tree.cursor_node == folder_node.children[0]

        # LEFT -> Go to parent
        await pilot.press("left")
        assert tree.cursor_node == folder_node

        # LEFT -> Collapse
        await pilot.press("left")
        assert not folder_node.is_expanded


@pytest.mark.asyncio
async def test_save_key_exits_with_save(session):
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        await pilot.press("s")
    assert app.saved is True
    assert app.return_value is True


@pytest.mark.asyncio
async def test_quit_key_exits_without_save(session):
    """Test 'q' quits the app without saving."""
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        await pilot.press("q")
    assert app.saved is False
    assert app.return_value is False


@pytest.mark.asyncio
async def test_toggle_safe_guard(session):
    """Ensure toggle doesn't crash if node data is None."""
    app = _EditorApp(session)
    async with app.run_test() as pilot:
        tree = app.query_one(Tree)
        tree.root.add("Ghost Node", data=None)
        await pilot.pause()
        tree.select_node(tree.root.children[-1])

        await pilot.press("space")
        assert app.is_running
