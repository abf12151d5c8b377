"""CI documentation runner: document the API files a change touched."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path, PurePosixPath

from maint.agents.doc_writer import README_PATH, DocsResult, DocumentationWriter
from maint.errors import CommitError, LedgerSyncError, TargetFileError
from maint.execution.changes import ChangedFileSource, endpoint_name
from maint.execution.vcs import MAX_SUBJECT_LENGTH, GitCommitter
from maint.fileio import atomic_write_text
from maint.ledger.github import LedgerSink, NullLedgerSink
from maint.ledger.report import cost_footer
from maint.ledger.tracker import UsageLedger
from maint.orchestration.models import DocsRunReport

logger = logging.getLogger(__name__)

DOCS_COMMIT_PREFIX = "📚 Auto-update docs for: "
OVERVIEW_NAME = "API.md"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def docs_commit_message(files: list[str]) -> str:
    """Commit subject naming the documented files, or their count when too long."""
    message = DOCS_COMMIT_PREFIX + ", ".join(PurePosixPath(f).name for f in files)
    if len(message) > MAX_SUBJECT_LENGTH:
        message = f"{DOCS_COMMIT_PREFIX}{len(files)} files"
    return message


def render_api_overview(entries: list[tuple[str, str]], updated_at: datetime) -> str:
    """API overview page; ``entries`` are (endpoint, link relative to the docs dir)."""
    endpoints = "\n".join(f"- **{endpoint}** - [Documentation]({link})" for endpoint, link in entries)
    return "\n".join([
        "# API Documentation",
        "",
        f"**Last Updated:** {updated_at.strftime('%Y-%m-%d %H:%M')} UTC  ",
        "**Generated automatically from code changes**",
        "",
        "## Available Endpoints",
        "",
        endpoints,
        "",
        "---",
        "*This documentation is automatically generated when API code changes.*",
        "",
    ])


def render_docs_summary(
    report: DocsRunReport, links: dict[str, str], monthly_total: Decimal, budget: Decimal
) -> str:
    """Pull request comment listing the documentation written."""
    lines = [
        "## 📚 Automated Documentation Update",
        "",
        f"**API files changed:** {len(report.changed)}",
        "**Documentation generated for:**",
        "",
    ]
    lines += [
        f"- 📄 `{result.filename}` → [Documentation]({links[result.filename]})"
        for result in report.documented
    ]
    if report.failed:
        lines += ["", "**Not documented:**"]
        lines += [f"- ❌ `{result.filename}`: {result.error}" for result in report.failed]
    if report.committed:
        lines += ["", "The documentation has been automatically generated and committed to this branch."]
    return "\n".join(lines) + cost_footer(report.total_cost, monthly_total, budget)


class CIDocsRunner:
    """Documents changed API files, commits the docs once and reports on the PR."""

    def __init__(
        self,
        writer: DocumentationWriter,
        changes: ChangedFileSource,
        committer: GitCommitter,
        sink: LedgerSink | None = None,
        ledger: UsageLedger | None = None,
        pr_number: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.writer = writer
        self.changes = changes
        self.committer = committer
        self.sink = sink or NullLedgerSink()
        self.ledger = ledger
        self.pr_number = pr_number
        self.clock = clock

    @property
    def docs_dir(self) -> PurePosixPath:
        return PurePosixPath(self.writer.settings.docs_dir)

    def doc_link(self, filename: str) -> str:
        """Link to a file's documentation from the repository root."""
        return self.writer.doc_relpath(filename).as_posix()

    async def run(self) -> DocsRunReport:
        report = DocsRunReport(changed=await self.changes.files())
        if not report.changed:
            logger.info("No API changes detected")
            return report

        logger.info("Documenting %s changed API file(s)", len(report.changed))
        for file in report.changed:
            try:
                result = await self.writer.generate_docs(file)
            except TargetFileError as e:
                logger.error("Skipping %s: %s", file, e)
                result = DocsResult(filename=file, error=str(e))
            report.results.append(result)
            report.warnings.extend(result.warnings)

        if not report.documented:
            return report

        report.overview_path = self._write_overview(report)
        await self._commit_and_push(report)
        await self._comment(report)
        return report

    def _write_overview(self, report: DocsRunReport) -> Path:
        entries = [
            (
                endpoint_name(result.filename),
                self.writer.doc_relpath(result.filename).relative_to(self.docs_dir).as_posix(),
            )
            for result in report.documented
        ]
        path = self.writer.root / self.docs_dir / OVERVIEW_NAME
        atomic_write_text(path, render_api_overview(entries, self.clock()))
        logger.info("Wrote API overview %s", path)
        return path

    async def _commit_and_push(self, report: DocsRunReport) -> None:
        paths = [self.docs_dir.as_posix()]
        if (self.writer.root / README_PATH).is_file():
            paths.append(README_PATH)
        try:
            await self.committer.stage(paths)
            if not await self.committer.has_staged_changes():
                logger.info("No documentation changes to commit")
                return
            await self.committer.commit(
                docs_commit_message([result.filename for result in report.documented]), paths
            )
            report.committed = True
            await self.committer.push()
            report.pushed = True
        except CommitError as e:
            logger.error("Failed to commit documentation: %s", e)
            report.warnings.append(f"Commit failed: {e}")

    async def _comment(self, report: DocsRunReport) -> None:
        if not self.pr_number:
            logger.debug("No pull request number, not posting a summary")
            return

        if self.ledger is not None:
            monthly_total = self.ledger.summary().cost
            budget = self.ledger.monthly_budget
        else:
            monthly_total, budget = report.total_cost, Decimal("0")

        links = {result.filename: self.doc_link(result.filename) for result in report.documented}
        try:
            await self.sink.comment(
                self.pr_number, render_docs_summary(report, links, monthly_total, budget)
            )
            report.commented = True
        except LedgerSyncError as e:
            logger.error("Failed to post pull request comment: %s", e)
            report.warnings.append(f"Comment not posted: {e}")
