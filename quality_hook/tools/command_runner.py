"""Async subprocess execution for the diagnostic and fix tools.

Commands run without a shell, with captured output and a hard timeout.
A timed-out command is killed and reported with TIMEOUT_EXIT_CODE; a
missing executable is reported with NOT_FOUND_EXIT_CODE.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124
NOT_FOUND_EXIT_CODE = 127


@dataclass(frozen=True)
class CommandResult:
    """Result of a finished command.

    Attributes:
        command: The argv that was run.
        returncode: Process exit status (124 on timeout, 127 if not found).
        stdout: Captured standard output.
        stderr: Captured standard error.
        timed_out: Whether the command was killed for exceeding its timeout.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def not_found(self) -> bool:
        return self.returncode == NOT_FOUND_EXIT_CODE and not self.timed_out


async def run_command_async(
    args: Sequence[str],
    cwd: Path | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run a command and capture its output.

    Args:
        args: Command argv.
        cwd: Working directory, or None for the current directory.
        timeout: Seconds before the process is killed. None waits forever.

    Returns:
        CommandResult. Never raises for non-zero exits, timeouts, or a
        missing executable.
    """
    command = tuple(args)
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        logger.warning("Command not found: %s", command[0])
        return CommandResult(command=command, returncode=NOT_FOUND_EXIT_CODE, stderr=str(e))

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        stdout, stderr = await process.communicate()
        logger.warning("Command timed out after %ss: %s", timeout, " ".join(command))
        return CommandResult(
            command=command,
            returncode=TIMEOUT_EXIT_CODE,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            timed_out=True,
        )

    returncode = process.returncode if process.returncode is not None else -1
    return CommandResult(
        command=command,
        returncode=returncode,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
    )
