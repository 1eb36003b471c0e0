import asyncio
import os

import pytest

from select2text.exceptions import InvalidPathError, PathNotFoundError, ReadError
from select2text.host import HostEntry, HostStat, LocalFileSystemHost, normalize_path
from select2text.types import NodeKind


@pytest.mark.parametrize(
    "path,expected",
    [
        (".", "."),
        ("./", "."),
        ("src/main.py", "src/main.py"),
        ("src\\main.py", "src/main.py"),
        ("./README.md", "README.md"),
        ("src/", "src"),
        ("a..b/c", "a..b/c"),
    ],
)
def test_normalize_path(path, expected):
    assert normalize_path(path) == expected


@pytest.mark.parametrize("path", ["", "/etc/passwd", "../secret", "src/../../x", "src//main.py", "..\\x"])
def test_normalize_path_rejects_escapes(path):
    with pytest.raises(InvalidPathError):
        normalize_path(path)


@pytest.fixture
def project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.py").write_text("print('hi')\n")
    (tmp_path / "README.md").write_text("# Demo\n")
    return tmp_path


@pytest.fixture
def host(project):
    return LocalFileSystemHost(project)


def test_root_must_be_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        LocalFileSystemHost(tmp_path / "missing")
    file_path = tmp_path / "file.txt"
    file_path.write_text("x")
    with pytest.raises(NotADirectoryError):
        LocalFileSystemHost(file_path)


def test_root_name(host, project):
    assert host.root_name == project.name


def test_list_children(host):
    entries = sorted(asyncio.run(host.list_children(".")))
    assert entries == [HostEntry("README.md", NodeKind.FILE, 7), HostEntry("src", NodeKind.DIRECTORY)]
    assert asyncio.run(host.list_children("src")) == [HostEntry("main.py", NodeKind.FILE, 12)]


def test_list_missing_directory(host):
    with pytest.raises(PathNotFoundError):
        asyncio.run(host.list_children("nope"))


def test_stat_path(host):
    assert asyncio.run(host.stat_path("src")) == HostStat(NodeKind.DIRECTORY)
    assert asyncio.run(host.stat_path("README.md")) == HostStat(NodeKind.FILE, 7)
    with pytest.raises(PathNotFoundError):
        asyncio.run(host.stat_path("gone.txt"))


def test_read_file_bytes(host):
    assert asyncio.run(host.read_file_bytes("src/main.py")) == b"print('hi')\n"
    with pytest.raises(ReadError):
        asyncio.run(host.read_file_bytes("gone.txt"))
    with pytest.raises(InvalidPathError):
        asyncio.run(host.read_file_bytes("../outside.txt"))


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_dangling_symlink_is_listed_as_file(host, project):
    try:
        os.symlink(project / "missing-target", project / "dangling")
    except OSError:
        pytest.skip("cannot create symlinks here")
    entries = asyncio.run(host.list_children("."))
    assert HostEntry("dangling", NodeKind.FILE) in entries


def make_symlink(target, link):
    try:
        os.symlink(target, link)
    except (OSError, NotImplementedError):
        pytest.skip("cannot create symlinks here")


@pytest.fixture
def linked_project(tmp_path):
    root = tmp_path / "root"
    (root / "src").mkdir(parents=True)
    (root / "src" / "main.py").write_text("print('hi')\n")
    (root / "a.txt").write_text("a\n")
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("secret\n")
    make_symlink(root, root / "loop")
    make_symlink(root / "src", root / "alias")
    make_symlink(outside, root / "ext")
    make_symlink(outside / "secret.txt", root / "secret.txt")
    return root


def test_symlinked_directories_not_followed_by_default(linked_project):
    host = LocalFileSystemHost(linked_project)
    names = sorted(entry.name for entry in asyncio.run(host.list_children(".")))
    assert names == ["a.txt", "src"]


def test_followed_symlinks_skip_loops(linked_project):
    host = LocalFileSystemHost(linked_project, follow_symlinks=True)
    entries = asyncio.run(host.list_children("."))
    assert HostEntry("alias", NodeKind.DIRECTORY) in entries
    assert "loop" not in [entry.name for entry in entries]
    assert asyncio.run(host.list_children("alias")) == [HostEntry("main.py", NodeKind.FILE, 12)]


def test_mutual_directory_links_stop_at_first_repeat(tmp_path):
    (tmp_path / "x").mkdir()
    (tmp_path / "y").mkdir()
    make_symlink(tmp_path / "y", tmp_path / "x" / "to_y")
    make_symlink(tmp_path / "x", tmp_path / "y" / "to_x")
    host = LocalFileSystemHost(tmp_path, follow_symlinks=True)
    assert asyncio.run(host.list_children("x")) == [HostEntry("to_y", NodeKind.DIRECTORY)]
    assert asyncio.run(host.list_children("x/to_y")) == []


def test_links_outside_root_are_hidden_and_unreadable(linked_project):
    host = LocalFileSystemHost(linked_project, follow_symlinks=True)
    names = [entry.name for entry in asyncio.run(host.list_children("."))]
    assert "ext" not in names
    assert "secret.txt" not in names
    with pytest.raises(InvalidPathError):
        asyncio.run(host.read_file_bytes("secret.txt"))
    with pytest.raises(InvalidPathError):
        asyncio.run(host.read_file_bytes("ext/secret.txt"))
    with pytest.raises(InvalidPathError):
        asyncio.run(host.stat_path("ext"))
