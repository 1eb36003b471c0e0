"""Bounded accumulation of output text."""

from typing import Iterator, List


class ChunkedOutputBuffer:
    """Accumulates text fragments into chunks of bounded size.

    Fragments are concatenated only within the current chunk. When appending a
    fragment would push the current chunk past ``chunk_size`` characters, a new
    chunk is started with that fragment instead, so no concatenation ever spans
    the whole output. A single fragment larger than ``chunk_size`` becomes a
    chunk of its own; fragments are never split.

    The final text is the ordered concatenation of all chunks, identical to
    concatenating the fragments directly.

    Args:
        chunk_size: Maximum chunk length in characters. Must be at least 4096.
            Defaults to 1 MiB.

    Raises:
        ValueError: If chunk_size is less than 4096.

    Example:
        >>> buffer = ChunkedOutputBuffer(chunk_size=4096)
        >>> buffer.append("a" * 3000)
        >>> buffer.append("b" * 3000)
        >>> buffer.chunk_count
        2
        >>> len(buffer.getvalue())
        6000
    """

    MINIMUM_CHUNK_SIZE = 4096  # 4 KB

    def __init__(self, chunk_size: int = 1024 * 1024) -> None:
        if chunk_size < self.MINIMUM_CHUNK_SIZE:
            raise ValueError(f"chunk_size must be at least {self.MINIMUM_CHUNK_SIZE} characters, got {chunk_size}")
        self._chunk_size = chunk_size
        self._chunks: List[str] = []
        self._current_size = 0

    def append(self, fragment: str) -> None:
        """Add a fragment at the end of the output."""
        if not fragment:
            return
        if not self._chunks or self._current_size + len(fragment) > self._chunk_size:
            self._chunks.append(fragment)
            self._current_size = len(fragment)
        else:
            self._chunks[-1] += fragment
            self._current_size += len(fragment)

    @property
    def chunk_count(self) -> int:
        return len(self._chunks)

    def __iter__(self) -> Iterator[str]:
        return iter(self._chunks)

    def getvalue(self) -> str:
        """Return the complete output text."""
        return "".join(self)
