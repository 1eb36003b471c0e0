"""Lazily loaded tree model with per-node selection state.

This module provides the TreeModel class, which holds the authoritative
hierarchical view of a host's file tree. Directories are loaded on demand; each
load attaches a child list under an existing node. Nodes are indexed by path so
that lookups and ancestor walks never need parent pointers.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from select2text.exclusion_rules.base_rules import BaseExclusionRules
from select2text.exclusion_rules.git_rules import default_noise_rules
from select2text.file_tree.selection_engine import SelectionEngine
from select2text.file_tree.tree_node import SelectionDelta, TreeNode, join_path, parent_path
from select2text.host import HostEntry
from select2text.types import ROOT_PATH, NodeKind

logger = logging.getLogger(__name__)


class TreeModel:
    """A path-indexed tree of files and directories with tri-state selection flags.

    The model starts from a shallow snapshot of the root directory and grows as
    directories are expanded. Selection aggregates are kept consistent by the
    :class:`~select2text.file_tree.selection_engine.SelectionEngine`, which
    this model also calls after attaching children.

    A fixed denylist of noise entries (version control directories, dependency
    and build output folders, log files, OS metadata files) is filtered out
    while children are enumerated. Additional exclusion rules can be supplied.

    Attributes:
        root (Optional[TreeNode]): The root node, None until :meth:`build_root` is called.
        exclusion_rules (BaseExclusionRules): Rules applied to every enumerated child.

    Example:
        >>> from select2text.host import HostEntry
        >>> model = TreeModel()
        >>> root = model.build_root("project", [
        ...     HostEntry("src", NodeKind.DIRECTORY),
        ...     HostEntry("README.md", NodeKind.FILE, 120),
        ...     HostEntry(".git", NodeKind.DIRECTORY),
        ... ])
        >>> [child.path for child in root.children]
        ['src', 'README.md']
        >>> model.find_by_path("src").loaded
        False
    """

    def __init__(self, exclusion_rules: Optional[BaseExclusionRules] = None) -> None:
        self.exclusion_rules = exclusion_rules if exclusion_rules is not None else default_noise_rules()
        self.root: Optional[TreeNode] = None
        self._index: Dict[str, TreeNode] = {}

    def build_root(self, name: str, entries: Iterable[HostEntry]) -> TreeNode:
        """Build a fresh tree from the host's shallow root listing.

        Any existing tree is discarded. The root is always loaded, unselected
        and has the path ``"."``.

        Args:
            name: Display name of the root directory.
            entries: The root directory's listing.

        Returns:
            The new root node.
        """
        self._index = {}
        root = TreeNode(ROOT_PATH, name, NodeKind.DIRECTORY)
        self._index[ROOT_PATH] = root
        self.root = root
        self._install_children(root, entries)
        logger.debug("Built tree root %r with %d entries", name, len(root.loaded_children()))
        return root

    def _make_children(self, dir_path: str, entries: Iterable[HostEntry]) -> List[TreeNode]:
        filtering = self.exclusion_rules.has_rules()
        children = []
        for entry in entries:
            path = join_path(dir_path, entry.name)
            # Directory-only patterns such as "build/" need the trailing slash
            candidate = path + "/" if entry.kind == NodeKind.DIRECTORY else path
            if filtering and self.exclusion_rules.exclude(candidate):
                logger.debug("Excluding %s by default rules", path)
                continue
            children.append(
                TreeNode(
                    path,
                    entry.name,
                    entry.kind,
                    has_children=entry.kind == NodeKind.DIRECTORY,
                    size=entry.size if entry.kind == NodeKind.FILE else None,
                )
            )
        # Directories first, then files, both alphabetically
        children.sort(key=lambda n: (not n.is_dir, n.name))
        return children

    def _install_children(self, node: TreeNode, entries: Iterable[HostEntry]) -> List[TreeNode]:
        for old in node.loaded_children():
            for descendant in old.walk():
                self._index.pop(descendant.path, None)
        children = self._make_children(node.path, entries)
        for child in children:
            self._index[child.path] = child
        node.children = children
        node.loaded = True
        node.has_children = len(children) > 0
        return children

    def attach_children(self, dir_path: str, entries: Iterable[HostEntry]) -> List[SelectionDelta]:
        """Install a freshly loaded child list under a directory.

        Children inherit the directory's selection state when the directory was
        fully selected or fully cleared before the load. Selection aggregates
        are then recomputed from the directory up to the root.

        Args:
            dir_path: Path of the directory whose children were loaded.
            entries: The directory's listing as reported by the host.

        Returns:
            List[SelectionDelta]: The new state of every node whose selection
                flags changed, children included. Empty if the path is stale.
        """
        node = self.find_by_path(dir_path)
        if node is None or not node.is_dir:
            logger.debug("Ignoring children for stale or non-directory path %s", dir_path)
            return []

        inherit = not node.indeterminate
        children = self._install_children(node, entries)
        deltas = []
        for child in children:
            child.selected = node.selected if inherit else False
            child.indeterminate = False
            if child.selected:
                deltas.append(child.state)

        deltas.extend(SelectionEngine(self).recompute_from(dir_path))
        return deltas

    def find_by_path(self, path: str) -> Optional[TreeNode]:
        """Look up a node by path.

        Returns:
            The node, or None if no node has that path (for example after a
            refresh removed it).
        """
        return self._index.get(path)

    def find_parent(self, path: str) -> Optional[TreeNode]:
        """Look up the parent of the node at ``path``.

        Returns:
            The parent node, or None for the root or an unknown path.
        """
        parent = parent_path(path)
        if parent is None:
            return None
        return self._index.get(parent)

    def __contains__(self, path: object) -> bool:
        return path in self._index

    def __len__(self) -> int:
        return len(self._index)

    def iter_nodes(self) -> Iterator[TreeNode]:
        """Iterate over every loaded node in depth-first pre-order."""
        if self.root is not None:
            yield from self.root.walk()

    def iter_selected_files(self) -> Iterator[str]:
        """Yield the paths of all selected, loaded file nodes in tree order."""
        for node in self.iter_nodes():
            if not node.is_dir and node.selected:
                yield node.path

    def iter_selected_unloaded_directories(self) -> Iterator[str]:
        """Yield selected directories whose children have never been loaded."""
        for node in self.iter_nodes():
            if node.is_dir and node.selected and not node.loaded:
                yield node.path
