import os
import posixpath
from pathlib import Path

from builder_ide.core.errors import InvalidPathError, PathEscapeError


def normalize_relative(target: str) -> str:
    """Normalize an untrusted relative path, rejecting any ``..`` segment.

    Backslashes count as separators and leading slashes are dropped, so a
    rooted-looking path is treated as relative to the base.
    """
    if "\x00" in target:
        raise InvalidPathError(f"Invalid path: {target!r}")
    cleaned = posixpath.normpath(target.replace("\\", "/")).lstrip("/")
    if cleaned in ("", "."):
        return "."
    if ".." in cleaned.split("/"):
        raise InvalidPathError(f"Invalid path: {target}")
    return cleaned


def is_within(base: Path, candidate: Path) -> bool:
    base_str = str(base)
    candidate_str = str(candidate)
    return candidate_str == base_str or candidate_str.startswith(base_str.rstrip(os.sep) + os.sep)


def resolve_path(base: str | Path, target: str) -> Path:
    """Resolve *target* against *base* and return a canonical absolute path inside it."""
    relative = normalize_relative(target)
    canonical_base = Path(os.path.realpath(base))
    candidate = Path(os.path.realpath(canonical_base / relative))
    if not is_within(canonical_base, candidate):
        raise PathEscapeError(f"Path escape detected: {target}")
    return candidate
