"""Tests for the watchfiles watcher adapter."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from builder_ide.core.ports.watcher import FileWatcherPort
from builder_ide.watcher.watchfiles_adapter import (
    WatchfilesWatcher,
    _is_watched_file,
)

ROOT = Path("/tmp/project/src")


class TestIsWatchedFile:
    @pytest.mark.parametrize("name", ["page.tsx", "index.ts", "util.js", "App.jsx", "server.mjs"])
    def test_source_files(self, name: str) -> None:
        assert _is_watched_file(ROOT / name, ROOT) is True

    @pytest.mark.parametrize("name", ["readme.md", "styles.css", "Makefile", "photo.png"])
    def test_other_files(self, name: str) -> None:
        assert _is_watched_file(ROOT / name, ROOT) is False

    def test_ignored_directories(self) -> None:
        assert _is_watched_file(ROOT / "node_modules" / "x" / "index.js", ROOT) is False
        assert _is_watched_file(ROOT / ".next" / "server.js", ROOT) is False


class TestWatchfilesWatcher:
    def test_implements_port(self) -> None:
        assert FileWatcherPort in WatchfilesWatcher.__mro__
        watcher: FileWatcherPort = WatchfilesWatcher(ROOT, AsyncMock())
        assert callable(watcher.wait)

    @pytest.mark.asyncio
    async def test_wait_returns_after_stop(self) -> None:
        watcher = WatchfilesWatcher(ROOT, AsyncMock())

        with patch("builder_ide.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _empty_async_iter()
            await watcher.start()
            waiting = asyncio.create_task(watcher.wait())
            await asyncio.sleep(0.01)
            assert not waiting.done()
            await watcher.stop()
            await asyncio.wait_for(waiting, timeout=1)

    @pytest.mark.asyncio
    async def test_start_creates_task(self) -> None:
        watcher = WatchfilesWatcher(ROOT, AsyncMock())

        with patch("builder_ide.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _empty_async_iter()
            await watcher.start()
            assert watcher._task is not None
            await watcher.stop()
            assert watcher._task is None

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self) -> None:
        await WatchfilesWatcher(ROOT, AsyncMock()).stop()

    @pytest.mark.asyncio
    async def test_double_start_is_noop(self) -> None:
        watcher = WatchfilesWatcher(ROOT, AsyncMock())

        with patch("builder_ide.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _empty_async_iter()
            await watcher.start()
            task1 = watcher._task
            await watcher.start()
            assert watcher._task is task1
            await watcher.stop()

    @pytest.mark.asyncio
    async def test_callback_receives_source_files(self) -> None:
        callback = AsyncMock()
        watcher = WatchfilesWatcher(ROOT, callback)
        changes = {
            (1, f"{ROOT}/app/page.tsx"),
            (2, f"{ROOT}/notes.txt"),
            (1, f"{ROOT}/node_modules/react/index.js"),
            (1, f"{ROOT}/index.ts"),
        }

        with patch("builder_ide.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _single_change_iter(changes)
            await watcher.start()
            await asyncio.sleep(0.05)
            await watcher.stop()

        callback.assert_called_once()
        assert callback.call_args[0][0] == {ROOT / "app" / "page.tsx", ROOT / "index.ts"}

    @pytest.mark.asyncio
    async def test_callback_errors_do_not_stop_watching(self) -> None:
        callback = AsyncMock(side_effect=RuntimeError("boom"))
        watcher = WatchfilesWatcher(ROOT, callback)

        with patch("builder_ide.watcher.watchfiles_adapter.awatch") as mock_awatch:
            mock_awatch.return_value = _single_change_iter({(1, f"{ROOT}/index.ts")})
            await watcher.start()
            await asyncio.sleep(0.05)
            assert watcher._task is not None
            assert not watcher._task.done()
            await watcher.stop()

        callback.assert_called_once()


async def _empty_async_iter() -> AsyncIterator[Any]:
    """Async iterator that never yields, just blocks until cancelled."""
    try:
        await asyncio.sleep(3600)
    except asyncio.CancelledError:
        return
    yield  # pragma: no cover


async def _single_change_iter(changes: set[tuple[int, str]]) -> AsyncIterator[set[tuple[int, str]]]:
    """Async iterator that yields one set of changes then blocks."""
    yield changes
    try:
        await asyncio.sleep(3600)
    except asyncio.CancelledError:
        return
