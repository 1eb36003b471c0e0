"""Node representation for elements of a lazily loaded selection tree."""

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional

from select2text.types import ROOT_PATH, NodeKind


class SelectionDelta(NamedTuple):
    """Selection state of one node after a mutation changed it.

    Attributes:
        path: Path of the node that changed.
        selected: New ``selected`` flag.
        indeterminate: New ``indeterminate`` flag.
    """

    path: str
    selected: bool
    indeterminate: bool


@dataclass(eq=False)
class TreeNode:
    """Node representing a file or directory in the selection tree.

    Nodes hold no reference to their parent. Parents are found through the
    path-keyed index kept by :class:`~select2text.file_tree.tree_model.TreeModel`
    and :func:`parent_path`.

    A node is in exactly one of three selection states: selected,
    indeterminate, or neither. Directories that have not been loaded have
    ``children`` set to None.

    Attributes:
        path (str): Slash-separated path relative to the root, ``"."`` for the root.
        name (str): The basename of the file or directory.
        kind (NodeKind): Whether this node is a file or a directory.
        children (Optional[List[TreeNode]]): Loaded children, or None until loaded.
        selected (bool): True if the node is fully selected.
        indeterminate (bool): True if some but not all loaded descendants are selected.
        has_children (bool): Whether the directory is known or assumed to have children.
        loaded (bool): True once the directory's children have been attached.
        size (Optional[int]): File size in bytes, when reported by the host.

    Example:
        >>> node = TreeNode("src/main.py", "main.py", NodeKind.FILE, size=12)
        >>> node.is_dir
        False
        >>> node.state
        SelectionDelta(path='src/main.py', selected=False, indeterminate=False)
    """

    path: str
    name: str
    kind: NodeKind
    children: Optional[List["TreeNode"]] = None
    selected: bool = False
    indeterminate: bool = False
    has_children: bool = False
    loaded: bool = False
    size: Optional[int] = None

    @property
    def is_dir(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    @property
    def state(self) -> SelectionDelta:
        """Current selection state as a delta record."""
        return SelectionDelta(self.path, self.selected, self.indeterminate)

    def loaded_children(self) -> List["TreeNode"]:
        """Return the loaded children, or an empty list for files and unloaded directories."""
        return self.children if self.children is not None else []

    def walk(self) -> Iterator["TreeNode"]:
        """Yield this node and every loaded descendant in depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.loaded_children()))


def parent_path(path: str) -> Optional[str]:
    """Derive the path of a node's parent by dropping the last path segment.

    Returns:
        The parent path, ``"."`` for top-level entries, or None for the root.

    Example:
        >>> parent_path("src/utils/helpers.py")
        'src/utils'
        >>> parent_path("README.md")
        '.'
        >>> parent_path(".") is None
        True
    """
    if path == ROOT_PATH:
        return None
    head, sep, _ = path.rpartition("/")
    return head if sep else ROOT_PATH


def join_path(dir_path: str, name: str) -> str:
    """Join a child name onto a directory path relative to the root.

    Example:
        >>> join_path(".", "src")
        'src'
        >>> join_path("src", "main.py")
        'src/main.py'
    """
    return name if dir_path == ROOT_PATH else f"{dir_path}/{name}"
