from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]

# Path of the tree root, relative paths of all other nodes are joined onto it
ROOT_PATH = "."


class NodeKind(str, Enum):
    """Enumeration of node kinds reported by a host.

    Attributes:
        FILE: Regular file
        DIRECTORY: Directory
    """

    FILE = "file"
    DIRECTORY = "directory"


class OutputFormat(str, Enum):
    """Textual layout of the exported document.

    Values:
        MARKDOWN: Markdown with fenced code blocks per file
        PLAIN_TEXT: Plain text with banner rules per file
    """

    MARKDOWN = "md"
    PLAIN_TEXT = "txt"

    @property
    def file_extension(self) -> str:
        return "." + self.value


class SinkKind(str, Enum):
    """Destination that receives a finished export document.

    Values:
        FILE: Durable file on disk
        CLIPBOARD: Transient, size-limited clipboard-like medium
    """

    FILE = "file"
    CLIPBOARD = "clipboard"
