"""Output strategies for rendering export documents."""

from select2text.types import OutputFormat

from .base_strategy import OutputStrategy
from .markdown_strategy import MarkdownOutputStrategy
from .plain_text_strategy import PlainTextOutputStrategy


def get_strategy(output_format: OutputFormat) -> OutputStrategy:
    """Return the strategy that renders ``output_format``.

    Example:
        >>> get_strategy(OutputFormat.MARKDOWN).get_file_extension()
        '.md'
    """
    if output_format == OutputFormat.MARKDOWN:
        return MarkdownOutputStrategy()
    if output_format == OutputFormat.PLAIN_TEXT:
        return PlainTextOutputStrategy()
    raise ValueError(f"Unsupported output format: {output_format}")


__all__ = [
    "MarkdownOutputStrategy",
    "OutputStrategy",
    "PlainTextOutputStrategy",
    "get_strategy",
]
