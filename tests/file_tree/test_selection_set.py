import pytest

from select2text.file_tree import SelectionEngine, SelectionSet, TreeModel
from select2text.host import HostEntry
from select2text.types import NodeKind


def d(name):
    return HostEntry(name, NodeKind.DIRECTORY)


def f(name):
    return HostEntry(name, NodeKind.FILE, 1)


@pytest.fixture
def model():
    model = TreeModel()
    model.build_root("p", [d("src"), f("README.md"), f("LICENSE")])
    model.attach_children("src", [f("main.py"), f("util.py")])
    return model


def test_basic_set_operations():
    selection = SelectionSet(["b.py", "a.py"])
    assert len(selection) == 2
    assert "a.py" in selection
    assert list(selection) == ["a.py", "b.py"]
    selection.add("c.py")
    selection.discard("a.py")
    selection.discard("missing.py")
    assert selection.paths() == ["b.py", "c.py"]
    selection.clear()
    assert len(selection) == 0


def test_apply_tracks_only_files(model):
    selection = SelectionSet()
    deltas = SelectionEngine(model).set_selected("src", True)
    selection.apply(model, deltas)
    assert selection.paths() == ["src/main.py", "src/util.py"]

    deltas = SelectionEngine(model).set_selected("src/util.py", False)
    selection.apply(model, deltas)
    assert selection.paths() == ["src/main.py"]


def test_refresh_from_matches_tree(model):
    engine = SelectionEngine(model)
    engine.set_selected("README.md", True)
    engine.set_selected("src/util.py", True)
    selection = SelectionSet(["stale.txt"])
    selection.refresh_from(model)
    assert selection.paths() == ["README.md", "src/util.py"]


def test_restore_into_rebuilt_tree(model):
    selection = SelectionSet(["README.md", "src/main.py", "deleted.txt"])
    model.build_root("p", [d("src"), f("README.md")])
    model.attach_children("src", [f("main.py"), f("util.py")])

    deltas = selection.restore_into(model)
    assert model.find_by_path("README.md").selected
    assert model.find_by_path("src/main.py").selected
    assert model.find_by_path("src").indeterminate
    assert ("README.md", True, False) in deltas
    # Paths missing from the new tree are forgotten
    assert selection.paths() == ["README.md", "src/main.py"]


def test_restore_into_unloaded_branch_drops_path(model):
    selection = SelectionSet(["src/main.py"])
    model.build_root("p", [d("src")])
    assert selection.restore_into(model) == []
    assert len(selection) == 0
