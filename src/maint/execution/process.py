"""Shared subprocess runner for validation and version-control commands."""
import asyncio
import logging
import os
import signal
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command"""
    command: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.exit_code == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """stdout and stderr combined, the way test reporters are read."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


async def run_command(
    cmd: list[str],
    cwd: Path | str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run ``cmd`` without a shell and capture its output.

    A timeout kills the process and is reported as a failed result, as is a
    missing executable.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd is not None else None,
        )
    except (FileNotFoundError, PermissionError) as e:
        return CommandResult(command=tuple(cmd), exit_code=127, stderr=str(e))

    return await _collect(process, tuple(cmd), timeout)


async def run_shell_command(
    command: str,
    cwd: Path | str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run ``command`` through the system shell and capture its output.

    Test commands are written for a shell (``CI=1 npm test``,
    ``npm test && npm run lint``). The shell gets its own process group so a
    timeout kills the whole pipeline, not only the shell.
    """
    process = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd is not None else None,
        start_new_session=True,
    )
    return await _collect(process, (command,), timeout, process_group=True)


def _kill(process: asyncio.subprocess.Process, process_group: bool) -> None:
    if process_group and hasattr(os, "killpg"):
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            logger.debug("Process group %s already exited", process.pid)
        return
    try:
        process.kill()
    except ProcessLookupError:
        logger.debug("Process %s already exited", process.pid)


async def _collect(
    process: asyncio.subprocess.Process,
    command: tuple[str, ...],
    timeout: float | None,
    process_group: bool = False,
) -> CommandResult:
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        _kill(process, process_group)
        await process.wait()
        logger.warning("Command timed out after %ss: %s", timeout, " ".join(command))
        return CommandResult(
            command=command,
            exit_code=-1,
            stderr=f"Command timed out after {timeout} seconds",
            timed_out=True,
        )

    return CommandResult(
        command=command,
        exit_code=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
