from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from builder_ide.core import files as _files
from builder_ide.core.errors import MissingFieldError, NotAFolderError
from builder_ide.core.explain import summarize
from builder_ide.core.paths import resolve_path
from builder_ide.core.tree import DEFAULT_IGNORE, build_tree, list_files
from builder_ide.models import FileNode, FileSummary


def require_path(rel_path: str | None) -> str:
    if not rel_path or not isinstance(rel_path, str):
        raise MissingFieldError("path")
    return rel_path


class ProjectWorkspace:
    """A project directory that bounds every file operation.

    Reads and the tree listing are relative to *root*; mutations are relative
    to the source directory (``<root>/src`` by default).
    """

    def __init__(
        self,
        root: str | Path,
        source_dir: str = "src",
        ignore: Iterable[str] = DEFAULT_IGNORE,
    ) -> None:
        self._root = Path(os.path.realpath(root))
        if self._root.exists() and not self._root.is_dir():
            raise NotAFolderError(f"Project root is not a directory: {root}")
        self._source = resolve_path(self._root, source_dir)
        self._ignore = frozenset(ignore)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def source_root(self) -> Path:
        return self._source

    @property
    def ignore(self) -> frozenset[str]:
        return self._ignore

    def resolve(self, rel_path: str | None) -> Path:
        """Resolve a source-relative path."""
        return resolve_path(self._source, require_path(rel_path))

    def resolve_in_root(self, rel_path: str | None) -> Path:
        return resolve_path(self._root, require_path(rel_path))

    # -- listings --

    def tree(self) -> list[FileNode]:
        return build_tree(self._root, self._ignore)

    def list_source_files(self) -> list[str]:
        return list_files(self._source, self._ignore)

    # -- reads --

    def read_file(self, rel_path: str | None) -> str:
        """Read a file relative to the project root."""
        return _files.read_text(self.resolve_in_root(rel_path))

    def read_source_file(self, rel_path: str | None) -> str:
        return _files.read_text(self.resolve(rel_path))

    def explain_file(self, rel_path: str | None) -> FileSummary:
        path = require_path(rel_path)
        return summarize(path, self.read_source_file(path))

    # -- mutations --

    def create_file(self, rel_path: str | None, content: str | None = None) -> str:
        return _files.create_file(self.resolve(rel_path), content)

    def write_file(self, rel_path: str | None, content: str, *, must_exist: bool = False) -> None:
        _files.overwrite_file(self.resolve(rel_path), content, must_exist=must_exist)

    def replace_in_file(self, rel_path: str | None, find: str, replace: str) -> bool:
        return _files.replace_first(self.resolve(rel_path), find, replace)

    def delete_file(self, rel_path: str | None) -> None:
        _files.delete_file(self.resolve(rel_path))
