"""Sink capability contract consumed by the sink dispatcher."""

from abc import ABC, abstractmethod
from typing import Optional

from select2text.types import PathType


class SinkCapability(ABC):
    """
    Abstract base class for the primitives that deliver an export document.

    Implementations provide the actual clipboard-like write, the durable file
    write and the two user prompts the dispatcher may need. Every operation is
    a coroutine; the dispatcher awaits them one at a time.

    Example:
        >>> from select2text.exceptions import SinkError
        >>> class MemorySink(SinkCapability):
        ...     def __init__(self):
        ...         self.clipboard = None
        ...     async def write_primary(self, content):
        ...         self.clipboard = content
        ...     async def write_file(self, destination, content):
        ...         raise SinkError("file", "read-only")
        ...     async def prompt_destination(self, default_name):
        ...         return None
        ...     async def confirm_large_content(self, size_description):
        ...         return True
        >>> sink = MemorySink()
        >>> import asyncio
        >>> asyncio.run(sink.write_primary("hello"))
        >>> sink.clipboard
        'hello'
    """

    @abstractmethod
    async def write_primary(self, content: str) -> None:
        """
        Write content to the transient, size-limited primary medium.

        Raises:
            SinkError: If the write fails.
        """
        pass

    @abstractmethod
    async def write_file(self, destination: PathType, content: str) -> None:
        """
        Write content to a durable file.

        Raises:
            SinkError: If the write fails.
        """
        pass

    @abstractmethod
    async def prompt_destination(self, default_name: str) -> Optional[PathType]:
        """
        Ask the user where to save a file.

        Args:
            default_name: Suggested file name.

        Returns:
            The chosen destination, or None if the user declined.
        """
        pass

    @abstractmethod
    async def confirm_large_content(self, size_description: str) -> bool:
        """
        Ask the user whether to proceed with a very large delivery.

        Args:
            size_description: Human-readable size, e.g. ``"12.3MB"``.

        Returns:
            True to proceed, False to cancel.
        """
        pass
