"""Streaming subprocess execution for package manager commands.

Output is forwarded to the logger line by line while the child runs:
stdout at normal level, stderr at error level.  A run succeeds only on
exit status 0; anything else raises a :class:`~zorx.errors.SubprocessError`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from zorx.console import ConsoleLogger
from zorx.errors import CommandFailedError, CommandNotFoundError, CommandTimeoutError


class ProcessExecutor:
    """Runs external programs with live output and an optional time limit.

    Args:
        logger: Destination for the child's output lines.
        timeout: Wall-clock seconds before the child is killed.  ``None``
            lets it run until it exits.
    """

    def __init__(self, logger: ConsoleLogger, timeout: float | None = None) -> None:
        self.logger = logger
        self.timeout = timeout

    async def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: str | Path | None = None,
    ) -> None:
        """Run ``command args...`` in *cwd* and wait for it to finish.

        Raises:
            CommandNotFoundError: *command* is not an executable on ``PATH``.
            CommandFailedError: The child exited with a non-zero status.
            CommandTimeoutError: The child outlived ``self.timeout``.
        """
        self.logger.debug(f"$ {command} {' '.join(args)}".rstrip())
        try:
            process = await asyncio.create_subprocess_exec(
                command,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd else None,
            )
        except (FileNotFoundError, PermissionError) as exc:
            raise CommandNotFoundError(command) from exc

        assert process.stdout is not None and process.stderr is not None
        streams = asyncio.gather(
            _pump(process.stdout, self.logger.normal),
            _pump(process.stderr, self.logger.error),
        )

        try:
            await asyncio.wait_for(_finish(process, streams), timeout=self.timeout)
        except asyncio.TimeoutError:
            await _kill(process)
            raise CommandTimeoutError(command, self.timeout or 0) from None
        except asyncio.CancelledError:
            await _kill(process)
            raise

        if process.returncode != 0:
            raise CommandFailedError(command, args, process.returncode)


async def _finish(process: asyncio.subprocess.Process, streams: Awaitable[object]) -> int:
    await streams
    return await process.wait()


async def _pump(stream: asyncio.StreamReader, emit: Callable[[str], None]) -> None:
    """Forward each non-blank line of *stream* to *emit* as it arrives."""
    while True:
        line = await stream.readline()
        if not line:
            return
        text = line.decode("utf-8", errors="replace").rstrip()
        if text:
            emit(text)


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()
