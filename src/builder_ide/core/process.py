import asyncio
import contextlib
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from builder_ide.core.errors import CommandTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str


async def run_command(args: Sequence[str], cwd: str | Path, timeout: float) -> CommandResult:
    """Run *args* without a shell, killing the process if it outlives *timeout* seconds.

    Raises ``FileNotFoundError`` when the executable is missing and
    ``CommandTimeoutError`` on timeout.
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except (asyncio.TimeoutError, asyncio.CancelledError) as exc:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()
        if isinstance(exc, asyncio.CancelledError):
            raise
        logger.warning("Command %s timed out after %.0fs", " ".join(args), timeout)
        raise CommandTimeoutError(f"Command timed out after {timeout:.0f}s: {' '.join(args)}") from None
    returncode = await proc.wait()
    return CommandResult(
        returncode=returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
