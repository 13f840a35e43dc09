"""Async subprocess runner for the external validator and linters."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from pydantic import BaseModel, Field

from copilot.errors import ToolInvocationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class ToolRun(BaseModel):
    """Captured result of one external tool invocation."""

    argv: list[str] = Field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def tool(self) -> str:
        return Path(self.argv[0]).name if self.argv else ""


class ProcessRunner:
    """Runs a command to completion and captures its text output."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    async def run(self, argv: list[str], timeout: float | None = None) -> ToolRun:
        """Run ``argv`` without a shell.

        Raises ToolInvocationError if the executable cannot be started or
        does not finish in time. A non-zero exit is not an error here;
        callers decide what the output means.
        """
        tool = Path(argv[0]).name
        limit = timeout if timeout is not None else self._timeout
        logger.debug("Running %s", argv)

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise ToolInvocationError(tool, f"executable not found: {argv[0]}")
        except OSError as e:
            raise ToolInvocationError(tool, str(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=limit)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise ToolInvocationError(tool, f"timed out after {limit:g}s")
        except asyncio.CancelledError:
            proc.kill()
            raise

        run = ToolRun(
            argv=list(argv),
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        logger.debug(
            "%s exited %d (stdout=%d bytes, stderr=%d bytes)",
            tool,
            run.returncode,
            len(run.stdout),
            len(run.stderr),
        )
        return run
