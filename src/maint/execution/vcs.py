"""Version-control side effects (git)."""
import logging
from pathlib import Path

from maint.errors import CommitError
from maint.execution.process import run_command

logger = logging.getLogger(__name__)

COMMIT_PREFIX = "Auto-fix: "
MAX_SUBJECT_LENGTH = 72


def commit_message(error_context: str, filename: str) -> str:
    """Commit subject derived from the first line of the error, else the file."""
    first_line = next((line.strip() for line in error_context.splitlines() if line.strip()), "")
    subject = first_line or f"Resolve issue in {filename}"
    message = COMMIT_PREFIX + subject
    if len(message) > MAX_SUBJECT_LENGTH:
        message = message[: MAX_SUBJECT_LENGTH - 3].rstrip() + "..."
    return message


class GitCommitter:
    """Stages, commits and pushes through the ``git`` CLI."""

    def __init__(self, cwd: Path | str | None = None, timeout: float = 60.0):
        self.cwd = cwd
        self.timeout = timeout

    async def _git(self, *args: str) -> None:
        result = await run_command(["git", *args], cwd=self.cwd, timeout=self.timeout)
        if not result.success:
            detail = (result.stderr or result.stdout).strip()
            raise CommitError(f"git {args[0]} failed ({result.exit_code}): {detail}")

    async def stage(self, paths: list[str] | None = None) -> None:
        """Stage ``paths`` (everything if None)."""
        await self._git("add", *(paths or ["."]))

    async def has_staged_changes(self) -> bool:
        result = await run_command(
            ["git", "diff", "--staged", "--quiet"], cwd=self.cwd, timeout=self.timeout
        )
        # --quiet exits 1 when there are differences
        if result.exit_code in (0, 1):
            return result.exit_code == 1
        detail = (result.stderr or result.stdout).strip()
        raise CommitError(f"git diff failed ({result.exit_code}): {detail}")

    async def commit(self, message: str, paths: list[str] | None = None) -> None:
        """Stage ``paths`` (everything if None) and commit."""
        await self.stage(paths)
        await self._git("commit", "-m", message)
        logger.info("Committed: %s", message)

    async def push(self) -> None:
        await self._git("push")
        logger.info("Pushed commits")
