"""Lazily loaded file tree with tri-state selection.

This package provides the tree model, the selection engine that keeps
selection states consistent, and the selected-path projection used by exports.
"""

from .selection_engine import SelectionEngine, aggregate_state
from .selection_set import SelectionSet
from .tree_model import TreeModel
from .tree_node import SelectionDelta, TreeNode, join_path, parent_path

__all__ = [
    "SelectionDelta",
    "SelectionEngine",
    "SelectionSet",
    "TreeModel",
    "TreeNode",
    "aggregate_state",
    "join_path",
    "parent_path",
]
