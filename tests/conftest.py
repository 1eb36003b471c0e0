"""Test configuration and fixtures for select2text."""

from typing import Dict, Iterable, List, Optional, Tuple, Union

import pytest

from select2text.exceptions import PathNotFoundError, ReadError, SinkError
from select2text.host import Host, HostEntry, HostStat
from select2text.sinks.base import SinkCapability
from select2text.types import ROOT_PATH, NodeKind


class FakeHost(Host):
    """In-memory host built from a mapping of file paths to contents.

    Directories are implied by file paths; empty directories can be listed in
    ``dirs``. Paths in ``unreadable`` raise ReadError when read.
    """

    def __init__(
        self,
        files: Dict[str, Union[str, bytes]],
        dirs: Iterable[str] = (),
        unreadable: Iterable[str] = (),
        root_name: str = "project",
    ) -> None:
        self.root_name = root_name
        self.files = {path: content.encode("utf-8") if isinstance(content, str) else content for path, content in files.items()}
        self.dirs = {ROOT_PATH}
        for path in list(self.files) + list(dirs):
            parts = path.split("/")
            for depth in range(1, len(parts)):
                self.dirs.add("/".join(parts[:depth]))
        self.dirs.update(dirs)
        self.unreadable = set(unreadable)
        self.listed: List[str] = []
        self.read: List[str] = []
        self.stat_calls: List[str] = []

    def remove(self, path: str) -> None:
        self.files.pop(path, None)
        self.dirs.discard(path)
        prefix = path + "/"
        self.files = {p: c for p, c in self.files.items() if not p.startswith(prefix)}
        self.dirs = {d for d in self.dirs if not d.startswith(prefix)}

    async def stat_path(self, path: str) -> HostStat:
        self.stat_calls.append(path)
        if path in self.dirs:
            return HostStat(NodeKind.DIRECTORY)
        if path in self.files:
            return HostStat(NodeKind.FILE, len(self.files[path]))
        raise PathNotFoundError(path)

    async def list_children(self, dir_path: str) -> List[HostEntry]:
        self.listed.append(dir_path)
        if dir_path not in self.dirs:
            raise PathNotFoundError(dir_path)
        prefix = "" if dir_path == ROOT_PATH else dir_path + "/"
        entries = []
        for path in sorted(self.dirs - {ROOT_PATH}):
            if path.startswith(prefix) and "/" not in path[len(prefix) :]:  # noqa: E203
                entries.append(HostEntry(path[len(prefix) :], NodeKind.DIRECTORY))  # noqa: E203
        for path, content in sorted(self.files.items()):
            if path.startswith(prefix) and "/" not in path[len(prefix) :]:  # noqa: E203
                entries.append(HostEntry(path[len(prefix) :], NodeKind.FILE, len(content)))  # noqa: E203
        # Hosts give no ordering guarantee
        return list(reversed(entries))

    async def read_file_bytes(self, path: str) -> bytes:
        self.read.append(path)
        if path in self.unreadable:
            raise ReadError(path, PermissionError("Permission denied"))
        if path not in self.files:
            raise ReadError(path, FileNotFoundError("No such file"))
        return self.files[path]


class FakeSink(SinkCapability):
    """Scripted sink capability recording every call it receives.

    ``primary_results`` lists the outcome of successive primary writes: True
    for success, False for a SinkError. Once exhausted, writes succeed.
    """

    def __init__(
        self,
        primary_results: Iterable[bool] = (),
        file_succeeds: bool = True,
        destination: Optional[str] = "fallback.md",
        confirm: bool = True,
    ) -> None:
        self.primary_results = list(primary_results)
        self.file_succeeds = file_succeeds
        self.destination = destination
        self.confirm = confirm
        self.primary_writes: List[str] = []
        self.file_writes: List[Tuple[str, str]] = []
        self.prompts: List[str] = []
        self.confirmations: List[str] = []

    async def write_primary(self, content: str) -> None:
        self.primary_writes.append(content)
        if self.primary_results and not self.primary_results.pop(0):
            raise SinkError("clipboard", "clipboard unavailable")

    async def write_file(self, destination, content: str) -> None:
        self.file_writes.append((str(destination), content))
        if not self.file_succeeds:
            raise SinkError("file", "disk full")

    async def prompt_destination(self, default_name: str):
        self.prompts.append(default_name)
        return self.destination

    async def confirm_large_content(self, size_description: str) -> bool:
        self.confirmations.append(size_description)
        return self.confirm


@pytest.fixture
def fake_host():
    """Factory for in-memory hosts."""
    return FakeHost


@pytest.fixture
def fake_sink():
    """Factory for scripted sink capabilities."""
    return FakeSink


@pytest.fixture
def project_host():
    """A small project tree used across tests."""
    return FakeHost(
        {
            "README.md": "# Project\n",
            "package.json": '{"name": "demo"}\n',
            "src/main.ts": "console.log('hi');\n",
            "src/util.ts": "export const x = 1;\n",
            "src/lib/deep.ts": "export const deep = true;\n",
            "assets/logo.png": b"\x89PNG\r\n",
            "node_modules/pkg/index.js": "module.exports = {};\n",
            "docs/guide.md": "Guide\n",
        },
        dirs=["empty"],
    )
