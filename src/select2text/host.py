"""Host collaborator contract and a local filesystem implementation.

The host supplies raw directory listings, file metadata and file bytes. All of
its operations are coroutines so that callers await each I/O point in turn;
nothing in select2text issues concurrent host requests.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence

from select2text.exceptions import InvalidPathError, PathError, PathNotFoundError, ReadError
from select2text.types import ROOT_PATH, NodeKind, PathType

logger = logging.getLogger(__name__)


class HostEntry(NamedTuple):
    """One entry of a directory listing.

    Attributes:
        name: Basename of the entry.
        kind: File or directory.
        size: Size in bytes for files, None when unknown.
    """

    name: str
    kind: NodeKind
    size: Optional[int] = None


class HostStat(NamedTuple):
    """Metadata reported for a single path."""

    kind: NodeKind
    size: Optional[int] = None


def normalize_path(path: str) -> str:
    """Normalize and validate a path relative to the host root.

    Backslashes become forward slashes and a leading ``./`` is dropped. Paths
    that are absolute, contain ``..`` segments or contain empty segments are
    rejected.

    Args:
        path: The path to normalize.

    Returns:
        The normalized path, ``"."`` for the root.

    Raises:
        InvalidPathError: If the path would escape the root.

    Example:
        >>> normalize_path("src\\\\main.py")
        'src/main.py'
        >>> normalize_path("./README.md")
        'README.md'
        >>> normalize_path("../secret")
        Traceback (most recent call last):
            ...
        select2text.exceptions.InvalidPathError: Invalid file path: ../secret
    """
    if not path:
        raise InvalidPathError(path)
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    if normalized in ("", ROOT_PATH):
        return ROOT_PATH
    if normalized.startswith("/") or "//" in normalized:
        raise InvalidPathError(path)
    if any(segment == ".." for segment in normalized.split("/")):
        raise InvalidPathError(path)
    return normalized.rstrip("/")


class Host(ABC):
    """
    Abstract base class for the environment that supplies the file tree.

    Implementations resolve paths relative to their own root. Paths passed in
    and names handed back always use forward slashes.

    Example:
        >>> class EmptyHost(Host):
        ...     root_name = "empty"
        ...     async def stat_path(self, path):
        ...         return HostStat(NodeKind.DIRECTORY)
        ...     async def list_children(self, dir_path):
        ...         return []
        ...     async def read_file_bytes(self, path):
        ...         raise ReadError(path)
        >>> asyncio.run(EmptyHost().list_children("."))
        []
    """

    root_name: str

    @abstractmethod
    async def stat_path(self, path: str) -> HostStat:
        """
        Report the kind and size of a path.

        Raises:
            PathNotFoundError: If the path no longer exists.
            PathError: If the path cannot be inspected for another reason.
        """
        pass

    @abstractmethod
    async def list_children(self, dir_path: str) -> Sequence[HostEntry]:
        """
        List the entries of a directory.

        The ordering of the returned entries is not guaranteed.

        Raises:
            PathNotFoundError: If the directory no longer exists.
            ReadError: If the directory cannot be listed.
        """
        pass

    @abstractmethod
    async def read_file_bytes(self, path: str) -> bytes:
        """
        Read the complete contents of a file.

        Raises:
            ReadError: On permission or I/O problems, including a file that has
                disappeared since it was listed.
        """
        pass


class LocalFileSystemHost(Host):
    """Host backed by a directory on the local filesystem.

    Blocking filesystem calls are run in a worker thread through
    :func:`asyncio.to_thread` so the event loop is never blocked.

    Symbolic links to directories are not followed unless ``follow_symlinks``
    is set; such links are left out of listings. A followed link that points
    back at one of its own ancestors is left out as well. Links whose target
    lies outside the root are never listed, and paths that resolve outside the
    root are rejected.

    Attributes:
        root_path (Path): The directory all paths are resolved against.
        follow_symlinks (bool): Whether symlinked directories are listed and expanded.

    Example:
        >>> host = LocalFileSystemHost(".")  # doctest: +SKIP
        >>> asyncio.run(host.stat_path("README.md"))  # doctest: +SKIP
        HostStat(kind=<NodeKind.FILE: 'file'>, size=1024)
    """

    def __init__(self, root_path: PathType, follow_symlinks: bool = False) -> None:
        self.root_path = Path(root_path)
        if not self.root_path.exists():
            raise FileNotFoundError(f"Root path does not exist: {self.root_path}")
        if not self.root_path.is_dir():
            raise NotADirectoryError(f"Root path is not a directory: {self.root_path}")
        self.follow_symlinks = follow_symlinks
        self._real_root = self.root_path.resolve()
        self.root_name = self._real_root.name

    def _is_inside_root(self, target: Path) -> bool:
        try:
            real = target.resolve()
        except (OSError, RuntimeError):
            # Symlink loops
            return False
        return real == self._real_root or self._real_root in real.parents

    def _resolve(self, path: str) -> Path:
        normalized = normalize_path(path)
        if normalized == ROOT_PATH:
            return self.root_path
        target = self.root_path / normalized
        if not self._is_inside_root(target):
            raise InvalidPathError(path)
        return target

    def _points_at_ancestor(self, link: Path) -> bool:
        """Check whether a directory link resolves to a directory on its own path."""
        target = link.stat()
        target_id = (target.st_dev, target.st_ino)
        ancestor = link.parent
        while True:
            info = ancestor.stat()
            if (info.st_dev, info.st_ino) == target_id:
                return True
            if ancestor == self.root_path or ancestor == ancestor.parent:
                return False
            ancestor = ancestor.parent

    def _skip_symlink(self, child: Path) -> bool:
        if not self._is_inside_root(child):
            logger.debug("Skipping %s: link target is outside the root", child)
            return True
        if not child.is_dir():
            return False
        if not self.follow_symlinks:
            logger.debug("Not following symlinked directory %s", child)
            return True
        if self._points_at_ancestor(child):
            logger.debug("Skipping %s: symlink loop detected", child)
            return True
        return False

    async def stat_path(self, path: str) -> HostStat:
        return await asyncio.to_thread(self._stat_path, path)

    def _stat_path(self, path: str) -> HostStat:
        target = self._resolve(path)
        try:
            stat_info = target.stat()
        except FileNotFoundError as e:
            raise PathNotFoundError(path, cause=e)
        except OSError as e:
            raise PathError(path, f"Cannot stat {path}: {e}", cause=e)
        if target.is_dir():
            return HostStat(NodeKind.DIRECTORY)
        return HostStat(NodeKind.FILE, stat_info.st_size)

    async def list_children(self, dir_path: str) -> List[HostEntry]:
        return await asyncio.to_thread(self._list_children, dir_path)

    def _list_children(self, dir_path: str) -> List[HostEntry]:
        directory = self._resolve(dir_path)
        try:
            names = os.listdir(directory)
        except FileNotFoundError as e:
            raise PathNotFoundError(dir_path, cause=e)
        except OSError as e:
            raise ReadError(dir_path, e)

        entries = []
        for name in names:
            child = directory / name
            try:
                if child.is_symlink() and self._skip_symlink(child):
                    continue
                if child.is_dir():
                    entries.append(HostEntry(name, NodeKind.DIRECTORY))
                else:
                    entries.append(HostEntry(name, NodeKind.FILE, child.stat().st_size))
            except OSError as e:
                # Dangling symlinks and entries removed mid-listing
                logger.debug("Could not get stats for %s: %s", child, e)
                entries.append(HostEntry(name, NodeKind.FILE))
        return entries

    async def read_file_bytes(self, path: str) -> bytes:
        return await asyncio.to_thread(self._read_file_bytes, path)

    def _read_file_bytes(self, path: str) -> bytes:
        try:
            return self._resolve(path).read_bytes()
        except OSError as e:
            raise ReadError(path, e)
