"""Output strategy base class defining the interface for export document formatting.

This module provides the abstract base class that defines how the pieces of an
export document (header, structure block, per-file sections, inline errors and
summary footer) are rendered for a given output format.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Sequence


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp as UTC ISO 8601 with millisecond precision.

    Naive datetimes are taken to be in UTC already.

    Example:
        >>> format_timestamp(datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc))
        '2024-05-01T12:30:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OutputStrategy(ABC):
    """Abstract base class defining the interface for export output formatting strategies.

    This class implements the Strategy pattern for rendering an export document
    in different textual layouts (e.g., Markdown, plain text). The export
    pipeline calls the methods in document order:

    1. Header - title and generation timestamp
    2. Structure - optional ASCII tree of the exported files
    3. File - one section per successfully read file
    4. Error - one inline block per file that could not be read
    5. Footer - totals and the list of truncated files

    Every method returns a complete fragment; fragments are concatenated as-is.

    Example:
        >>> class CsvStrategy(OutputStrategy):
        ...     def format_header(self, generated_at):
        ...         return "path,content\\n"
        ...     def format_structure(self, tree):
        ...         return ""
        ...     def format_file(self, path, content, language):
        ...         return f"{path},{content!r}\\n"
        ...     def format_error(self, path, message):
        ...         return f"{path},ERROR\\n"
        ...     def format_footer(self, total_files, total_bytes, truncated_files):
        ...         return ""
        ...     def get_file_extension(self):
        ...         return ".csv"
        >>> CsvStrategy().format_file("a.py", "x = 1", "python")
        "a.py,'x = 1'\\n"
    """

    @abstractmethod
    def format_header(self, generated_at: datetime) -> str:
        """Format the document header.

        Args:
            generated_at: Moment the export was generated.

        Returns:
            The header fragment, ending with the separation before the next block.
        """
        pass

    @abstractmethod
    def format_structure(self, tree: str) -> str:
        """Format the directory structure block.

        Args:
            tree: The rendered ASCII tree, one line per node, without a trailing newline.

        Returns:
            The structure fragment.
        """
        pass

    @abstractmethod
    def format_file(self, path: str, content: str, language: str) -> str:
        """Format one file's section.

        Args:
            path: Path of the file relative to the tree root.
            content: The decoded (and possibly truncated) file content.
            language: Short language tag, or an empty string if unknown.

        Returns:
            The file fragment.
        """
        pass

    @abstractmethod
    def format_error(self, path: str, message: str) -> str:
        """Format an inline error block for a file that could not be read."""
        pass

    @abstractmethod
    def format_footer(self, total_files: int, total_bytes: int, truncated_files: Sequence[str]) -> str:
        """Format the summary footer.

        Args:
            total_files: Number of files successfully exported.
            total_bytes: Combined size of those files in bytes.
            truncated_files: Paths of files whose content was truncated, in export order.

        Returns:
            The footer fragment.
        """
        pass

    @abstractmethod
    def get_file_extension(self) -> str:
        """Get the appropriate file extension for this output format.

        Returns:
            The file extension including the leading dot (e.g., ".md", ".txt").
        """
        pass


def size_in_kib(total_bytes: int) -> int:
    """Round a byte count to whole KiB, halves rounding up.

    Example:
        >>> size_in_kib(1536)
        2
        >>> size_in_kib(100)
        0
    """
    return int(total_bytes / 1024 + 0.5)
