"""Async helpers for running external commands (``gem``, ``yard``, ``ruby``).

Every collaborator that shells out goes through :func:`run_command` so that
timeouts, missing executables and non-zero exits surface as
:class:`~open_gemdocs.errors.CommandError` subclasses.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
from pathlib import Path

from pydantic import BaseModel, Field

from open_gemdocs.errors import CommandError, CommandTimeoutError

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Captured output of a finished command."""

    exit_code: int = Field(..., description="Process exit code.")
    stdout: str = Field(default="", description="Captured stdout.")
    stderr: str = Field(default="", description="Captured stderr.")

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


async def run_command(
    command: list[str],
    *,
    cwd: Path | str | None = None,
    timeout: float = 60.0,
    check: bool = False,
) -> CommandResult:
    """Run *command* and capture its output.

    Raises:
        CommandTimeoutError: If the command runs longer than *timeout* seconds.
        CommandError: If the executable cannot be started, or if *check* is
            set and the command exits non-zero.
    """
    display = shlex.join(command)
    logger.debug("Running %s (cwd=%s)", display, cwd)

    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd is not None else None,
        )
    except OSError as exc:
        raise CommandError(display, str(exc)) from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        proc.kill()
        await proc.wait()
        raise CommandTimeoutError(display, timeout) from None

    result = CommandResult(
        exit_code=proc.returncode or 0,
        stdout=stdout.decode(errors="replace") if stdout else "",
        stderr=stderr.decode(errors="replace") if stderr else "",
    )

    if check and not result.ok:
        detail = result.stderr.strip() or f"exit status {result.exit_code}"
        raise CommandError(display, detail)

    return result
