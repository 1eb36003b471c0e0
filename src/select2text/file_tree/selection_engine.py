"""Tri-state selection propagation over a TreeModel.

Selection changes flow in two directions. An explicit toggle forces the same
state onto every loaded descendant, then every ancestor recomputes its own
state from its direct loaded children:

- all children selected: selected
- no child selected or indeterminate: cleared
- anything else: indeterminate

A directory with no loaded children is always cleared.

Every mutation here is synchronous, so a toggle and its ancestor walk always
run to completion before another mutation can start.
"""

import logging
from typing import TYPE_CHECKING, List, Sequence, Tuple

from select2text.file_tree.tree_node import SelectionDelta, TreeNode, parent_path
from select2text.types import ROOT_PATH

if TYPE_CHECKING:
    from select2text.file_tree.tree_model import TreeModel

logger = logging.getLogger(__name__)


def aggregate_state(children: Sequence[TreeNode]) -> Tuple[bool, bool]:
    """Compute a directory's ``(selected, indeterminate)`` pair from its loaded children.

    Example:
        >>> from select2text.types import NodeKind
        >>> a = TreeNode("a", "a", NodeKind.FILE, selected=True)
        >>> b = TreeNode("b", "b", NodeKind.FILE)
        >>> aggregate_state([a, b])
        (False, True)
        >>> aggregate_state([a])
        (True, False)
        >>> aggregate_state([])
        (False, False)
    """
    if not children:
        return False, False
    if all(child.selected for child in children):
        return True, False
    if not any(child.selected or child.indeterminate for child in children):
        return False, False
    return False, True


class SelectionEngine:
    """Applies selection changes to a TreeModel while keeping tri-state invariants.

    Methods return the list of :class:`SelectionDelta` records for every node
    whose flags actually changed, in the order the changes were made, so a
    presentation layer can update only what moved. Paths that are not in the
    model (for example after a refresh) are treated as no-ops.

    Attributes:
        model (TreeModel): The tree being mutated.

    Example:
        >>> from select2text.file_tree.tree_model import TreeModel
        >>> from select2text.host import HostEntry
        >>> from select2text.types import NodeKind
        >>> model = TreeModel()
        >>> _ = model.build_root("p", [HostEntry("a.py", NodeKind.FILE), HostEntry("b.py", NodeKind.FILE)])
        >>> engine = SelectionEngine(model)
        >>> engine.set_selected("a.py", True)
        [SelectionDelta(path='a.py', selected=True, indeterminate=False), \
SelectionDelta(path='.', selected=False, indeterminate=True)]
    """

    def __init__(self, model: "TreeModel") -> None:
        self.model = model

    def set_selected(self, path: str, selected: bool) -> List[SelectionDelta]:
        """Select or clear a node, its loaded descendants, and update its ancestors.

        Args:
            path: Path of the node to change.
            selected: The new selection state.

        Returns:
            List[SelectionDelta]: Changed nodes. Empty if the path is unknown.
        """
        node = self.model.find_by_path(path)
        if node is None:
            logger.debug("Ignoring selection change for unknown path %s", path)
            return []

        subtree = list(node.walk())
        before = [current.state for current in subtree]
        for current in subtree:
            _apply(current, selected, False)
        # Children before parents, so loaded directories that end up empty or
        # mixed settle on their aggregate
        for current in reversed(subtree):
            if current.is_dir and current.loaded:
                self._recompute(current)

        deltas = [current.state for current, old in zip(subtree, before) if current.state != old]
        deltas.extend(self.recompute_ancestors(path))
        return deltas

    def recompute_ancestors(self, path: str) -> List[SelectionDelta]:
        """Recompute the tri-state of every ancestor of ``path``, nearest first.

        The walk stops at the root. Each ancestor is visited exactly once.

        Returns:
            List[SelectionDelta]: Ancestors whose state changed.
        """
        deltas: List[SelectionDelta] = []
        current = parent_path(path)
        while current is not None:
            node = self.model.find_by_path(current)
            if node is None:
                logger.debug("Ancestor %s of %s is not in the tree", current, path)
                break
            if self._recompute(node):
                deltas.append(node.state)
            current = parent_path(current)
        return deltas

    def recompute_from(self, path: str) -> List[SelectionDelta]:
        """Recompute the node at ``path`` itself, then all of its ancestors."""
        node = self.model.find_by_path(path)
        if node is None:
            return []
        deltas: List[SelectionDelta] = []
        if node.is_dir and node.loaded and self._recompute(node):
            deltas.append(node.state)
        deltas.extend(self.recompute_ancestors(path))
        return deltas

    def select_all(self) -> List[SelectionDelta]:
        """Select every loaded node."""
        return self.set_selected(ROOT_PATH, True)

    def deselect_all(self) -> List[SelectionDelta]:
        """Clear every loaded node."""
        return self.set_selected(ROOT_PATH, False)

    @staticmethod
    def _recompute(node: TreeNode) -> bool:
        selected, indeterminate = aggregate_state(node.loaded_children())
        return _apply(node, selected, indeterminate)


def _apply(node: TreeNode, selected: bool, indeterminate: bool) -> bool:
    if node.selected == selected and node.indeterminate == indeterminate:
        return False
    node.selected = selected
    node.indeterminate = indeterminate
    return True
