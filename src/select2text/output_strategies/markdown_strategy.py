"""Markdown output strategy for export documents.

This module provides a strategy that renders an export as a Markdown document,
wrapping every file's content in a fenced code block annotated with a language
tag.
"""

import re
from datetime import datetime
from typing import Sequence

from .base_strategy import OutputStrategy, format_timestamp, size_in_kib

_BACKTICK_RUN = re.compile(r"`+")


def code_fence(content: str) -> str:
    """Return a backtick fence longer than any backtick run inside ``content``.

    Example:
        >>> code_fence("plain text")
        '```'
        >>> code_fence("```bash\\nmake\\n```")
        '````'
    """
    longest = max((len(run) for run in _BACKTICK_RUN.findall(content)), default=0)
    return "`" * max(3, longest + 1)


class MarkdownOutputStrategy(OutputStrategy):
    """Output strategy that formats an export as Markdown.

    Each file becomes a second-level heading followed by a fenced code block.
    The fence grows past three backticks when the content holds backtick runs
    of its own::

        ## File: src/main.py

        ```python
        print("Hello")
        ```

    Example:
        >>> strategy = MarkdownOutputStrategy()
        >>> print(strategy.format_file("src/main.py", 'print("Hello")', "python"), end="")
        ## File: src/main.py
        <BLANKLINE>
        ```python
        print("Hello")
        ```
        <BLANKLINE>
        >>> strategy.format_error("secret.txt", "Permission denied")
        '## File: secret.txt\\n\\n**Error**: Permission denied\\n\\n'
    """

    def format_header(self, generated_at: datetime) -> str:
        return f"# LLM Context Export\n\nGenerated on: {format_timestamp(generated_at)}\n\n---\n\n"

    def format_structure(self, tree: str) -> str:
        return f"## Directory Structure\n\n```\n{tree}\n```\n\n"

    def format_file(self, path: str, content: str, language: str) -> str:
        fence = code_fence(content)
        return f"## File: {path}\n\n{fence}{language}\n{content}\n{fence}\n\n"

    def format_error(self, path: str, message: str) -> str:
        return f"## File: {path}\n\n**Error**: {message}\n\n"

    def format_footer(self, total_files: int, total_bytes: int, truncated_files: Sequence[str]) -> str:
        """Format the summary footer as a Markdown list.

        Example:
            >>> print(MarkdownOutputStrategy().format_footer(2, 2048, ["big.log"]), end="")
            <BLANKLINE>
            ---
            <BLANKLINE>
            ## Export Summary
            <BLANKLINE>
            - **Total Files**: 2
            - **Total Size**: 2 KB
            - **Truncated Files**: 1
            <BLANKLINE>
            ### Truncated Files:
            - big.log
        """
        lines = [
            "\n---\n\n## Export Summary\n\n",
            f"- **Total Files**: {total_files}\n",
            f"- **Total Size**: {size_in_kib(total_bytes)} KB\n",
        ]
        if truncated_files:
            lines.append(f"- **Truncated Files**: {len(truncated_files)}\n\n")
            lines.append("### Truncated Files:\n")
            lines.extend(f"- {path}\n" for path in truncated_files)
        return "".join(lines)

    def get_file_extension(self) -> str:
        return ".md"
