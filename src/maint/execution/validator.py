"""Validation command (the project's test suite)."""
import logging
from dataclasses import dataclass
from pathlib import Path

from maint.execution.process import run_shell_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation run; exit code 0 means pass"""
    passed: bool
    exit_code: int
    output: str = ""
    timed_out: bool = False


class TestCommandValidator:
    """Runs the configured test command, through the shell, against the working tree."""

    __test__ = False  # keep pytest from collecting this class

    def __init__(
        self,
        command: str = "npm test",
        cwd: Path | str | None = None,
        timeout: float | None = 300.0,
    ):
        self.command = command
        self.cwd = cwd
        self.timeout = timeout

    async def validate(self) -> ValidationResult:
        logger.debug("Running validation command: %s", self.command)
        result = await run_shell_command(self.command, cwd=self.cwd, timeout=self.timeout)
        if result.success:
            logger.info("Validation passed")
        else:
            logger.info("Validation failed (exit code %s)", result.exit_code)
        return ValidationResult(
            passed=result.success,
            exit_code=result.exit_code,
            output=result.output,
            timed_out=result.timed_out,
        )
