"""Plain text output strategy for export documents."""

from datetime import datetime
from typing import Sequence

from .base_strategy import OutputStrategy, format_timestamp, size_in_kib

RULE_WIDTH = 50
MAX_BANNER_WIDTH = 80


def banner_rule(path: str) -> str:
    """Return the ``=`` rule framing a file section, sized to the path.

    Example:
        >>> banner_rule("a.py")
        '=============='
        >>> len(banner_rule("x" * 200))
        80
    """
    return "=" * min(len(path) + 10, MAX_BANNER_WIDTH)


class PlainTextOutputStrategy(OutputStrategy):
    """Output strategy that formats an export as plain text.

    Files are framed by banner rules instead of code fences, so the language
    tag is not used.

    Example:
        >>> strategy = PlainTextOutputStrategy()
        >>> print(strategy.format_file("a.py", "x = 1", "python"), end="")
        ==============
        File: a.py
        ==============
        <BLANKLINE>
        x = 1
        <BLANKLINE>
    """

    def format_header(self, generated_at: datetime) -> str:
        return f"LLM Context Export\nGenerated on: {format_timestamp(generated_at)}\n\n{'=' * RULE_WIDTH}\n\n"

    def format_structure(self, tree: str) -> str:
        return f"Directory Structure:\n\n{tree}\n\n"

    def format_file(self, path: str, content: str, language: str) -> str:
        rule = banner_rule(path)
        return f"{rule}\nFile: {path}\n{rule}\n\n{content}\n\n"

    def format_error(self, path: str, message: str) -> str:
        rule = banner_rule(path)
        return f"{rule}\nFile: {path}\n{rule}\n\nError: {message}\n\n"

    def format_footer(self, total_files: int, total_bytes: int, truncated_files: Sequence[str]) -> str:
        lines = [
            f"\n{'=' * RULE_WIDTH}\n\n",
            "Export Summary:\n",
            f"- Total Files: {total_files}\n",
            f"- Total Size: {size_in_kib(total_bytes)} KB\n",
        ]
        if truncated_files:
            lines.append(f"- Truncated Files: {len(truncated_files)}\n\n")
            lines.append("Truncated Files:\n")
            lines.extend(f"  - {path}\n" for path in truncated_files)
        return "".join(lines)

    def get_file_extension(self) -> str:
        return ".txt"
