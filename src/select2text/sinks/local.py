"""Sink capability backed by the system clipboard, local files and a console prompt."""

import asyncio
import codecs
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

import pyperclip  # type: ignore

from select2text.exceptions import SinkError
from select2text.types import PathType

from .base import SinkCapability

logger = logging.getLogger(__name__)


class LocalSinkCapability(SinkCapability):
    """Delivers export documents on the local machine.

    The primary medium is the system clipboard, accessed through pyperclip.
    Files are written as UTF-8 with a leading byte order mark. Prompts are
    asked on a console; with ``assume_yes`` every prompt is answered
    affirmatively without asking, and the suggested file name is accepted.

    Attributes:
        assume_yes (bool): Answer every prompt with yes.
        prompt (Callable[[str], str]): Reads one line of user input after
            showing a prompt. Defaults to :func:`input`.
        output (TextIO): Stream that receives notices. Defaults to stderr.

    Example:
        >>> capability = LocalSinkCapability(assume_yes=True)
        >>> asyncio.run(capability.prompt_destination("export.md")).name
        'export.md'
    """

    def __init__(
        self,
        assume_yes: bool = False,
        prompt: Optional[Callable[[str], str]] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        self.assume_yes = assume_yes
        self.prompt = prompt or input
        self.output = output or sys.stderr

    async def write_primary(self, content: str) -> None:
        try:
            await asyncio.to_thread(pyperclip.copy, content)
        except pyperclip.PyperclipException as e:
            raise SinkError("clipboard", f"Failed to copy to clipboard: {e}", e)
        logger.debug("Copied %d characters to the clipboard", len(content))

    async def write_file(self, destination: PathType, content: str) -> None:
        await asyncio.to_thread(self._write_file, Path(destination), content)

    def _write_file(self, destination: Path, content: str) -> None:
        try:
            with destination.open("wb") as f:
                f.write(codecs.BOM_UTF8)
                f.write(content.encode("utf-8"))
        except OSError as e:
            raise SinkError("file", f"Failed to save file {destination}: {e}", e)
        logger.debug("Wrote %d characters to %s", len(content), destination)

    async def prompt_destination(self, default_name: str) -> Optional[PathType]:
        if self.assume_yes:
            return Path(default_name)
        answer = await self._ask("Would you like to save as a file instead? [y/N] ")
        if answer is None or answer.lower() not in ("y", "yes"):
            return None
        name = await self._ask(f"File name [{default_name}]: ")
        if name is None:
            return None
        return Path(name or default_name)

    async def confirm_large_content(self, size_description: str) -> bool:
        if self.assume_yes:
            return True
        answer = await self._ask(
            f"The content is {size_description}. Large clipboard operations may be slow or fail. Continue? [y/N] "
        )
        return answer is not None and answer.lower() in ("y", "yes")

    async def _ask(self, question: str) -> Optional[str]:
        try:
            answer = await asyncio.to_thread(self.prompt, question)
        except EOFError:
            print(file=self.output)
            return None
        return answer.strip()
