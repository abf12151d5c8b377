"""CI fix runner: find failing files in test output and fix each one."""

import logging
from decimal import Decimal

from maint.errors import CommitError, LedgerSyncError, TargetFileError
from maint.execution.failures import Failure, FailureSource
from maint.execution.validator import TestCommandValidator
from maint.execution.vcs import GitCommitter
from maint.ledger.github import LedgerSink, NullLedgerSink
from maint.ledger.report import USAGE_LABELS, cost_footer
from maint.ledger.tracker import UsageLedger
from maint.orchestration.fixer import FixOrchestrator
from maint.orchestration.models import CIRunReport, FileFixReport

logger = logging.getLogger(__name__)

CI_COMMIT_MESSAGE = "Auto-fix: Resolve test failures"
ERROR_PREVIEW = 80


def group_failures(failures: list[Failure]) -> dict[str, str]:
    """Combine failures per file, keeping first-seen order."""
    grouped: dict[str, list[str]] = {}
    for failure in failures:
        errors = grouped.setdefault(failure.file, [])
        if failure.error not in errors:
            errors.append(failure.error)
    return {file: "\n\n".join(errors) for file, errors in grouped.items()}


def _preview(error: str) -> str:
    first_line = next((line.strip() for line in error.splitlines() if line.strip()), "")
    if len(first_line) > ERROR_PREVIEW:
        return first_line[:ERROR_PREVIEW] + "..."
    return first_line


def render_summary(report: CIRunReport, monthly_total: Decimal, budget: Decimal) -> str:
    """Pull request comment summarising a CI fix run."""
    lines = [
        "## Automated Bug Fix Results",
        "",
        f"**Failing files detected:** {len(report.files)}",
        f"**Successfully fixed:** {report.fixed_count}",
    ]
    fixed = [item for item in report.files if item.fixed]
    unfixed = [item for item in report.files if not item.fixed]
    if fixed:
        lines += ["", "### Fixed"]
        lines += [f"- ✅ `{item.file}`: {_preview(item.error)}" for item in fixed]
    if unfixed:
        lines += ["", "### Not fixed"]
        lines += [f"- ❌ `{item.file}`: {_preview(item.error)}" for item in unfixed]
    if report.committed:
        lines += ["", "The fixes have been committed to this branch. Please review before merging."]

    body = "\n".join(lines) + cost_footer(report.total_cost, monthly_total, budget)
    labels = "+".join(f"label:{label}" for label in USAGE_LABELS)
    return body + f"\n*Cost tracking: [monthly usage issue](../../issues?q=is:open+{labels})*"


class CIFixRunner:
    """Runs the test suite and fixes whatever the failure source points at."""

    def __init__(
        self,
        orchestrator: FixOrchestrator,
        failure_source: FailureSource,
        validator: TestCommandValidator,
        committer: GitCommitter,
        sink: LedgerSink | None = None,
        ledger: UsageLedger | None = None,
        pr_number: str | None = None,
    ):
        self.orchestrator = orchestrator
        self.failure_source = failure_source
        self.validator = validator
        self.committer = committer
        self.sink = sink or NullLedgerSink()
        self.ledger = ledger
        self.pr_number = pr_number

    async def run(self) -> CIRunReport:
        validation = await self.validator.validate()
        if validation.passed:
            logger.info("All tests passing, nothing to fix")
            return CIRunReport(tests_passed=True)

        report = CIRunReport(tests_passed=False)
        failures = group_failures(self.failure_source.collect(validation.output))
        logger.info("Found %s failing file(s)", len(failures))

        for file, error in failures.items():
            try:
                result = await self.orchestrator.fix(file, error, commit=False)
            except TargetFileError as e:
                logger.error("Skipping %s: %s", file, e)
                report.warnings.append(str(e))
                report.files.append(FileFixReport(file=file, error=error, fixed=False))
                continue
            if result.skipped:
                logger.info("Skipped %s (%s)", file, result.reason)
            report.files.append(
                FileFixReport(file=file, error=error, fixed=result.success, cost=result.cost)
            )
            report.warnings.extend(result.warnings)

        if report.fixed_count:
            await self._commit_and_push(report)
        if report.files:
            await self._comment(report)
        return report

    async def _commit_and_push(self, report: CIRunReport) -> None:
        try:
            await self.committer.commit(CI_COMMIT_MESSAGE)
            report.committed = True
            await self.committer.push()
            report.pushed = True
        except CommitError as e:
            logger.error("Failed to commit fixes: %s", e)
            report.warnings.append(f"Commit failed: {e}")

    async def _comment(self, report: CIRunReport) -> None:
        if not self.pr_number:
            logger.debug("No pull request number, not posting a summary")
            return

        if self.ledger is not None:
            monthly_total = self.ledger.summary().cost
            budget = self.ledger.monthly_budget
        else:
            monthly_total, budget = report.total_cost, Decimal("0")

        try:
            await self.sink.comment(self.pr_number, render_summary(report, monthly_total, budget))
            report.commented = True
        except LedgerSyncError as e:
            logger.error("Failed to post pull request comment: %s", e)
            report.warnings.append(f"Comment not posted: {e}")
