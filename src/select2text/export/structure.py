"""ASCII rendering of the directory structure of exported files."""

from typing import Any, Iterable, Iterator, Optional

from anytree import Node


class StructureNode(Node):  # type: ignore
    """Node of the structure tree built from exported file paths.

    Extends anytree.Node with a flag telling directories from files.

    Attributes:
        name (str): The last path segment.
        is_dir (bool): True for intermediate path segments, False for files.

    Example:
        >>> root = StructureNode("", is_dir=True)
        >>> child = StructureNode("main.py", parent=root)
        >>> child.is_dir
        False
    """

    def __init__(self, name: str, parent: Optional["StructureNode"] = None, is_dir: bool = False, **kwargs: Any) -> None:
        super().__init__(name, parent, **kwargs)
        self.is_dir = is_dir

    def child(self, name: str) -> Optional["StructureNode"]:
        for node in self.children:
            if node.name == name:
                return node
        return None


def build_structure(file_paths: Iterable[str]) -> StructureNode:
    """Build a structure tree from slash-separated file paths.

    Every path names a file; each of its leading segments becomes a directory.

    Args:
        file_paths: Paths relative to the tree root.

    Returns:
        StructureNode: An unnamed root whose descendants mirror the paths.

    Example:
        >>> root = build_structure(["src/main.ts", "README.md"])
        >>> sorted(node.name for node in root.children)
        ['README.md', 'src']
    """
    root = StructureNode("", is_dir=True)
    for path in file_paths:
        parts = [part for part in path.split("/") if part and part != "."]
        current = root
        for index, part in enumerate(parts):
            is_last = index == len(parts) - 1
            existing = current.child(part)
            if existing is None:
                existing = StructureNode(part, parent=current, is_dir=not is_last)
            current = existing
    return root


def stream_structure(root: StructureNode) -> Iterator[str]:
    """Yield the lines of an ASCII tree below ``root``.

    Output looks like the Unix ``tree`` command. At each level directories come
    first, then files, each group ordered by name. Directories carry a trailing
    ``/``. The root itself is not printed.
    """

    def write_node(node: StructureNode, prefix: str, is_last: bool) -> Iterator[str]:
        connector = "└── " if is_last else "├── "
        suffix = "/" if node.is_dir else ""
        yield f"{prefix}{connector}{node.name}{suffix}"
        yield from write_children(node, prefix + ("    " if is_last else "│   "))

    def write_children(node: StructureNode, prefix: str) -> Iterator[str]:
        # Sort children: directories first, then files, both by name
        sorted_children = sorted(node.children, key=lambda n: (not n.is_dir, n.name))
        for i, child in enumerate(sorted_children):
            yield from write_node(child, prefix, i == len(sorted_children) - 1)

    yield from write_children(root, "")


def render_structure(file_paths: Iterable[str]) -> str:
    """Render file paths as an ASCII tree.

    Example:
        >>> print(render_structure(["src/main.ts", "README.md", "src/lib/util.ts"]))
        ├── src/
        │   ├── lib/
        │   │   └── util.ts
        │   └── main.ts
        └── README.md
    """
    return "\n".join(stream_structure(build_structure(file_paths)))
