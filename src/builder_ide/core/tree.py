"""Recursive, ignore-filtered directory listings."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from builder_ide.core.paths import is_within
from builder_ide.models import FileNode

logger = logging.getLogger(__name__)

DEFAULT_IGNORE: frozenset[str] = frozenset({"node_modules", ".next", ".git", "dist", "build"})


def _is_ignored(name: str, ignore: Iterable[str]) -> bool:
    return name.startswith(".") or name in ignore


def _sort_key(entry: os.DirEntry[str]) -> tuple[int, str, str]:
    return (0 if _is_dir(entry) else 1, entry.name.casefold(), entry.name)


def _is_dir(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False


def _stays_inside(entry: os.DirEntry[str], base: Path) -> bool:
    """Symlinks count only when their target lies under *base*."""
    if not entry.is_symlink():
        return True
    if is_within(base, Path(os.path.realpath(entry.path))):
        return True
    logger.warning("Skipping symlink %s pointing outside %s", entry.path, base)
    return False


def _scan(directory: Path, ignore: Iterable[str], base: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as it:
            entries = [e for e in it if not _is_ignored(e.name, ignore) and _stays_inside(e, base)]
    except OSError as exc:
        logger.warning("Cannot list %s: %s", directory, exc)
        return []
    return sorted(entries, key=_sort_key)


def _enter(directory: Path, visited: set[tuple[int, int]]) -> bool:
    """Record *directory* as visited; False when it was already seen in this walk."""
    try:
        st = directory.stat()
    except OSError:
        return False
    identity = (st.st_dev, st.st_ino)
    if identity in visited:
        logger.debug("Skipping already visited directory %s", directory)
        return False
    visited.add(identity)
    return True


def build_tree(root: str | Path, ignore: Iterable[str] = DEFAULT_IGNORE) -> list[FileNode]:
    """Return the children of *root* as a nested ``FileNode`` tree.

    Folders come before files at every level, then names compare
    case-insensitively. A missing root yields an empty list.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        return []
    ignore = frozenset(ignore)
    visited: set[tuple[int, int]] = set()
    _enter(root_path, visited)
    base = Path(os.path.realpath(root_path))

    def walk(directory: Path, prefix: str) -> list[FileNode]:
        nodes: list[FileNode] = []
        for entry in _scan(directory, ignore, base):
            rel = f"{prefix}{entry.name}"
            if _is_dir(entry):
                child_dir = Path(entry.path)
                children = walk(child_dir, f"{rel}/") if _enter(child_dir, visited) else []
                nodes.append(FileNode(name=entry.name, path=rel, kind="folder", children=children))
            else:
                nodes.append(FileNode(name=entry.name, path=rel, kind="file"))
        return nodes

    return walk(root_path, "")


def iter_files(root: str | Path, ignore: Iterable[str] = DEFAULT_IGNORE) -> Iterator[Path]:
    """Lazily yield every regular file under *root*, depth-first."""
    root_path = Path(root)
    if not root_path.is_dir():
        return
    ignore = frozenset(ignore)
    visited: set[tuple[int, int]] = set()
    _enter(root_path, visited)
    base = Path(os.path.realpath(root_path))

    def walk(directory: Path) -> Iterator[Path]:
        for entry in _scan(directory, ignore, base):
            if _is_dir(entry):
                child_dir = Path(entry.path)
                if _enter(child_dir, visited):
                    yield from walk(child_dir)
            elif entry.is_file():
                yield Path(entry.path)

    yield from walk(root_path)


def to_relative(root: str | Path, path: Path) -> str:
    return os.path.relpath(path, root).replace(os.sep, "/").replace("\\", "/")


def list_files(root: str | Path, ignore: Iterable[str] = DEFAULT_IGNORE) -> list[str]:
    """Flat list of file paths relative to *root*, always ``/``-separated."""
    return [to_relative(root, p) for p in iter_files(root, ignore)]
