from typing import Protocol


class FileWatcherPort(Protocol):
    """Watches a source directory and reports changed files to a callback."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...

    async def wait(self) -> None:
        """Block until the watch loop ends or is cancelled."""
        ...
