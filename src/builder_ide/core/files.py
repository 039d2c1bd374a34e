"""File mutations against already-resolved absolute paths.

Callers are expected to obtain *path* from :func:`builder_ide.core.paths.resolve_path`.
Writes land in a temporary sibling that is renamed over the target, and every
mutation of one path holds that path's lock.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from builder_ide.core.errors import InvalidRequestError, NotAFileError, NotFoundError
from builder_ide.core.scaffold import default_scaffold

logger = logging.getLogger(__name__)

_locks_guard = threading.Lock()
# path -> (lock, number of callers holding or waiting for it)
_path_locks: dict[str, tuple[threading.Lock, int]] = {}


@contextmanager
def path_lock(path: Path) -> Iterator[None]:
    key = str(path)
    with _locks_guard:
        lock, users = _path_locks.get(key, (threading.Lock(), 0))
        _path_locks[key] = (lock, users + 1)
    try:
        with lock:
            yield
    finally:
        with _locks_guard:
            _, users = _path_locks[key]
            if users == 1:
                del _path_locks[key]
            else:
                _path_locks[key] = (lock, users - 1)


def _existing_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o644


def atomic_write_text(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.chmod(tmp_name, _existing_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_text(path: Path, *, strict: bool = False) -> str:
    """Decode *path* as UTF-8 without newline translation.

    Undecodable bytes become U+FFFD unless *strict*, in which case a file that
    is not UTF-8 text is refused with ``InvalidRequestError``.
    """
    if not path.is_file():
        raise NotFoundError("Not found")
    data = path.read_bytes()
    if not strict:
        return data.decode("utf-8", errors="replace")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidRequestError(f"{path.name} is not a UTF-8 text file") from exc


def create_file(path: Path, content: str | None = None) -> str:
    """Create *path* (and its parents); an existing file is overwritten.

    Without *content* the extension scaffold is written. Returns what was written.
    """
    if path.is_dir():
        raise NotAFileError(f"{path.name} is a directory")
    text = content if content is not None else default_scaffold(path.name)
    with path_lock(path):
        path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_text(path, text)
    logger.info("Created %s (%d bytes)", path, len(text))
    return text


def overwrite_file(path: Path, content: str, *, must_exist: bool = False) -> None:
    """Write *content* verbatim, creating the file and its parents unless *must_exist*."""
    with path_lock(path):
        if path.is_dir():
            raise NotAFileError("Only files can be edited")
        if not path.exists():
            if must_exist:
                raise NotFoundError("File not found")
            path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_text(path, content)
    logger.info("Overwrote %s (%d bytes)", path, len(content))


def replace_first(path: Path, find: str, replace: str) -> bool:
    """Replace the first literal occurrence of *find*; False when it does not occur."""
    with path_lock(path):
        text = read_text(path, strict=True)
        if find not in text:
            logger.info("No occurrence of search text in %s, leaving it unchanged", path)
            return False
        atomic_write_text(path, text.replace(find, replace, 1))
    logger.info("Edited %s", path)
    return True


def delete_file(path: Path) -> None:
    with path_lock(path):
        if not path.exists():
            raise NotFoundError("File not found")
        if not path.is_file():
            raise NotAFileError("Only file deletion is supported")
        path.unlink()
    logger.info("Deleted %s", path)
