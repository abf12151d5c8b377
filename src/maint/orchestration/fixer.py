"""Fix orchestrator: generate a patch, apply it, validate, roll back."""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

from maint.agents.base import BaseAgent, clean_generation
from maint.config.defaults import BUG_FIXER
from maint.errors import CommitError, GenerationError, TargetFileError
from maint.execution.validator import TestCommandValidator
from maint.execution.vcs import GitCommitter, commit_message
from maint.fileio import atomic_write_bytes, atomic_write_text
from maint.orchestration.models import FixAttempt, FixResult
from maint.prompts.variables import Placeholder

logger = logging.getLogger(__name__)

ALL_ATTEMPTS_FAILED = "All fix attempts failed"


class FixOrchestrator(BaseAgent):
    """Repairs one file at a time against the project's test command.

    The target file only ever holds its original bytes or a patch that passed
    validation: every failed attempt restores the bytes captured before the
    first attempt.
    """

    def __init__(
        self,
        *args: Any,
        validator: TestCommandValidator | None = None,
        committer: GitCommitter | None = None,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        settings = self.settings
        self.validator = validator or TestCommandValidator(
            settings.test_command, timeout=settings.test_timeout
        )
        self.committer = committer or GitCommitter()

    @property
    def agent_name(self) -> str:
        return BUG_FIXER

    def agent_variables(self) -> dict[Placeholder, Any]:
        return {Placeholder.SAFETY_LEVEL: self.settings.safety_level}

    @staticmethod
    def _capture(path: Path) -> tuple[bytes, str]:
        try:
            baseline = path.read_bytes()
            return baseline, baseline.decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TargetFileError(f"Cannot read {path}: {e}") from e

    async def fix(
        self, filename: str, error_context: str = "", commit: bool | None = None
    ) -> FixResult:
        """Try up to ``maxAttemptsPerFile`` patches for ``filename``.

        Args:
            filename: File to repair.
            error_context: Failing test output or error message.
            commit: Commit on success; defaults to the ``autoCommit`` setting.

        Raises:
            TargetFileError: If the file is missing or unreadable.
        """
        reason = self.skip_reason(filename)
        if reason:
            return FixResult.skip(reason)

        path = self.resolve_path(filename)
        baseline, code = self._capture(path)
        max_attempts = self.settings.max_attempts_per_file
        prompt = self.render_prompt(
            self.build_variables(filename, code, errorMessage=error_context)
        )

        log: list[FixAttempt] = []
        warnings: list[str] = []
        total_cost = Decimal("0")

        for number in range(1, max_attempts + 1):
            attempt = FixAttempt(number=number)
            log.append(attempt)
            logger.info("Fixing %s: attempt %s/%s", filename, number, max_attempts)

            try:
                outcome = await self.generate(prompt)
            except GenerationError as e:
                logger.warning("Attempt %s for %s: %s", number, filename, e)
                attempt.error = str(e)
                continue

            attempt.generated = True
            attempt.cost = outcome.cost
            total_cost += outcome.cost
            warnings.extend(outcome.warnings)

            fixed_code = clean_generation(outcome.generation.text)
            if not fixed_code:
                attempt.error = "Generated patch was empty"
                logger.warning("Attempt %s for %s produced no code", number, filename)
                continue

            try:
                atomic_write_text(path, fixed_code)
                validation = await self.validator.validate()
            except BaseException:
                atomic_write_bytes(path, baseline)
                raise

            if validation.passed:
                attempt.passed = True
                logger.info("Fixed %s on attempt %s", filename, number)
                committed = await self._commit(filename, error_context, commit, warnings)
                return FixResult(
                    success=True,
                    attempts=number,
                    fixed_code=fixed_code,
                    committed=committed,
                    cost=total_cost,
                    warnings=tuple(warnings),
                    attempt_log=tuple(log),
                )

            attempt.error = f"Validation failed (exit code {validation.exit_code})"
            atomic_write_bytes(path, baseline)
            logger.info("Attempt %s for %s failed validation, restored original", number, filename)

        logger.warning("Could not fix %s after %s attempts", filename, max(max_attempts, 0))
        return FixResult(
            success=False,
            attempts=max(max_attempts, 0),
            error=ALL_ATTEMPTS_FAILED,
            cost=total_cost,
            warnings=tuple(warnings),
            attempt_log=tuple(log),
        )

    async def _commit(
        self, filename: str, error_context: str, commit: bool | None, warnings: list[str]
    ) -> bool:
        if commit is None:
            commit = self.settings.auto_commit
        if not commit:
            return False
        try:
            await self.committer.commit(commit_message(error_context, filename), [filename])
        except CommitError as e:
            logger.error("Commit for %s failed: %s", filename, e)
            warnings.append(f"Commit failed: {e}")
            return False
        return True
