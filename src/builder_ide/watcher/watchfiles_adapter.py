from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine, Iterable
from pathlib import Path
from typing import Any

from watchfiles import awatch

from builder_ide.core.analysis import grammar_for
from builder_ide.core.ports.watcher import FileWatcherPort
from builder_ide.core.tree import DEFAULT_IGNORE

logger = logging.getLogger(__name__)


def _is_watched_file(path: Path, root: Path, ignore: Iterable[str] = DEFAULT_IGNORE) -> bool:
    """Source files the linter or type-checker would look at, outside ignored or hidden folders."""
    if grammar_for(path.name) is None:
        return False
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = path.parts
    return not any(part.startswith(".") or part in ignore for part in parts)


class WatchfilesWatcher(FileWatcherPort):
    """Watch a project source directory and trigger a callback on source changes."""

    def __init__(
        self,
        directory: str | Path,
        on_change: Callable[[set[Path]], Coroutine[Any, Any, None]],
        ignore: Iterable[str] = DEFAULT_IGNORE,
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._ignore = frozenset(ignore)
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            paths = {
                Path(p) for _, p in changes if _is_watched_file(Path(p), self._directory, self._ignore)
            }
            if paths:
                logger.info("Detected changes in %d file(s)", len(paths))
                try:
                    await self._on_change(paths)
                except Exception:
                    logger.exception("Error in watcher callback")
