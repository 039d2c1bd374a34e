"""Streaming zip export of a project tree.

``zipfile`` writes into an unseekable sink here, which makes it emit data
descriptors instead of seeking back to patch headers. The sink is drained
after every entry so bytes reach the caller while the walk is still going.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from collections.abc import Iterable, Iterator
from pathlib import Path

from builder_ide.core.scaffold import package_manifest_json, readme
from builder_ide.core.tree import DEFAULT_IGNORE, iter_files, to_relative
from builder_ide.models import ArchiveEntry

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^\w .-]+", re.ASCII)


class _ChunkSink(io.RawIOBase):
    def __init__(self) -> None:
        super().__init__()
        self._chunks: list[bytes] = []

    def writable(self) -> bool:
        return True

    def write(self, data: bytes) -> int:  # type: ignore[override]
        self._chunks.append(bytes(data))
        return len(data)

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data


def safe_archive_name(project_name: str, default: str = "project") -> str:
    """A folder/file name usable inside the archive and in ``Content-Disposition``."""
    cleaned = _UNSAFE_NAME_CHARS.sub("-", project_name).strip(" .-")
    return cleaned or default


def synthesized_entries(project_name: str) -> list[ArchiveEntry]:
    return [
        ArchiveEntry(name=f"{project_name}/package.json", content=package_manifest_json(project_name).encode()),
        ArchiveEntry(name=f"{project_name}/README.md", content=readme(project_name).encode()),
    ]


def export_project(
    source_root: str | Path,
    project_name: str,
    ignore: Iterable[str] = DEFAULT_IGNORE,
    extra_entries: Iterable[ArchiveEntry] | None = None,
) -> Iterator[bytes]:
    """Yield a zip of *source_root* under ``<project_name>/src/`` plus extra entries.

    When *extra_entries* is None a generated ``package.json`` and ``README.md``
    are appended after the real files.
    """
    name = safe_archive_name(project_name)
    extras = synthesized_entries(name) if extra_entries is None else list(extra_entries)
    sink = _ChunkSink()
    count = 0
    with zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for path in iter_files(source_root, ignore):
            zf.write(path, arcname=f"{name}/src/{to_relative(source_root, path)}")
            count += 1
            chunk = sink.drain()
            if chunk:
                yield chunk
        for entry in extras:
            zf.writestr(entry.name, entry.content)
            chunk = sink.drain()
            if chunk:
                yield chunk
    tail = sink.drain()
    if tail:
        yield tail
    logger.info("Exported %d file(s) from %s as %s.zip", count, source_root, name)


def stream_entries(entries: Iterable[ArchiveEntry]) -> Iterator[bytes]:
    """Yield a zip holding exactly *entries*, in order."""
    sink = _ChunkSink()
    with zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for entry in entries:
            zf.writestr(entry.name, entry.content)
            chunk = sink.drain()
            if chunk:
                yield chunk
    tail = sink.drain()
    if tail:
        yield tail
