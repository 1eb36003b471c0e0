"""Set of selected file paths kept alongside a TreeModel."""

from typing import Iterable, Iterator, List, Set

from select2text.file_tree.selection_engine import SelectionEngine
from select2text.file_tree.tree_model import TreeModel
from select2text.file_tree.tree_node import SelectionDelta


class SelectionSet:
    """Authoritative list of selected file paths.

    The set is maintained incrementally from the deltas reported by the
    selection engine and the tree model, and can be rebuilt from the tree at
    any time. After :meth:`refresh_from`, its members are exactly the file
    paths whose tree nodes are selected.

    Paths stay in the set even when the tree no longer holds a node for them,
    which lets a selection survive a full tree rebuild; see
    :meth:`restore_into`.

    Example:
        >>> selection = SelectionSet(["src/main.py"])
        >>> "src/main.py" in selection
        True
        >>> selection.paths()
        ['src/main.py']
    """

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._paths: Set[str] = set(paths)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths())

    def __len__(self) -> int:
        return len(self._paths)

    def paths(self) -> List[str]:
        """Return the selected paths in sorted order."""
        return sorted(self._paths)

    def add(self, path: str) -> None:
        self._paths.add(path)

    def discard(self, path: str) -> None:
        self._paths.discard(path)

    def clear(self) -> None:
        self._paths.clear()

    def apply(self, model: TreeModel, deltas: Iterable[SelectionDelta]) -> None:
        """Fold selection deltas for file nodes into the set.

        Deltas for directories are ignored; only files are members.
        """
        for delta in deltas:
            node = model.find_by_path(delta.path)
            if node is None or node.is_dir:
                continue
            if delta.selected:
                self._paths.add(delta.path)
            else:
                self._paths.discard(delta.path)

    def refresh_from(self, model: TreeModel) -> None:
        """Replace the members with the selected file paths of ``model``."""
        self._paths = set(model.iter_selected_files())

    def restore_into(self, model: TreeModel) -> List[SelectionDelta]:
        """Re-select remembered paths in a rebuilt tree.

        Paths the tree does not contain are dropped from the set.

        Returns:
            List[SelectionDelta]: Changes made to the tree.
        """
        engine = SelectionEngine(model)
        deltas: List[SelectionDelta] = []
        for path in self.paths():
            if path in model:
                deltas.extend(engine.set_selected(path, True))
            else:
                self._paths.discard(path)
        return deltas
