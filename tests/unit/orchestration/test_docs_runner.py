"""Tests for the CI documentation runner."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

from maint.agents.doc_writer import DocsResult, DocumentationWriter
from maint.errors import CommitError, GenerationError, LedgerSyncError
from maint.execution.vcs import GitCommitter
from maint.ledger.github import LedgerSink
from maint.orchestration.docs_ci import (
    CIDocsRunner,
    docs_commit_message,
    render_api_overview,
)
from maint.prompts.engine import TemplateEngine


@pytest.fixture
def project(tmp_path):
    (tmp_path / "api").mkdir()
    (tmp_path / "api" / "users.js").write_text("export function getUser(id) {}")
    (tmp_path / "server" / "api" / "auth").mkdir(parents=True)
    (tmp_path / "server" / "api" / "auth" / "login.js").write_text("export function login() {}")
    return tmp_path


@pytest.fixture
def committer():
    mock = AsyncMock(spec=GitCommitter)
    mock.has_staged_changes.return_value = True
    return mock


def changes_returning(files):
    changes = Mock()
    changes.files = AsyncMock(return_value=files)
    return changes


def make_runner(store, client, project, files, committer, sink=None, pr_number="9"):
    writer = DocumentationWriter(store, TemplateEngine(), client, root=project)
    return CIDocsRunner(
        writer,
        changes_returning(files),
        committer,
        sink=sink or AsyncMock(spec=LedgerSink),
        pr_number=pr_number,
        clock=lambda: datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc),
    )


def test_commit_message_names_files():
    assert docs_commit_message(["api/users.js", "server/api/auth/login.js"]) == (
        "📚 Auto-update docs for: users.js, login.js"
    )


def test_long_commit_message_counts_files():
    files = [f"api/endpoint_with_a_long_name_{i}.js" for i in range(5)]
    assert docs_commit_message(files) == "📚 Auto-update docs for: 5 files"


def test_render_api_overview():
    body = render_api_overview(
        [("users", "api/users.md"), ("auth/login", "server/api/auth/login.md")],
        datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc),
    )

    assert body.startswith("# API Documentation")
    assert "**Last Updated:** 2024-03-15 12:00 UTC" in body
    assert "- **users** - [Documentation](api/users.md)" in body
    assert "- **auth/login** - [Documentation](server/api/auth/login.md)" in body


@pytest.mark.asyncio
async def test_no_changes_does_nothing(store, scripted_client, project, committer):
    sink = AsyncMock(spec=LedgerSink)
    client = scripted_client([])

    report = await make_runner(store, client, project, [], committer, sink=sink).run()

    assert report.results == []
    assert client.calls == []
    committer.stage.assert_not_awaited()
    sink.comment.assert_not_awaited()


@pytest.mark.asyncio
async def test_documents_commits_once_and_comments(store, scripted_client, project, committer):
    sink = AsyncMock(spec=LedgerSink)
    client = scripted_client(["# Users", "# Login"])
    files = ["api/users.js", "server/api/auth/login.js"]

    report = await make_runner(store, client, project, files, committer, sink=sink).run()

    assert [r.filename for r in report.documented] == files
    assert (project / "docs" / "api" / "users.md").read_text() == "# Users\n"
    assert (project / "docs" / "server" / "api" / "auth" / "login.md").read_text() == "# Login\n"
    overview = (project / "docs" / "API.md").read_text()
    assert report.overview_path == project / "docs" / "API.md"
    assert "- **auth/login** - [Documentation](server/api/auth/login.md)" in overview

    committer.stage.assert_awaited_once_with(["docs", "README.md"])
    committer.commit.assert_awaited_once_with(
        "📚 Auto-update docs for: users.js, login.js", ["docs", "README.md"]
    )
    committer.push.assert_awaited_once()
    assert report.committed is True
    assert report.pushed is True

    thread, body = sink.comment.await_args.args
    assert thread == "9"
    assert "**API files changed:** 2" in body
    assert "- 📄 `api/users.js` → [Documentation](docs/api/users.md)" in body
    assert "committed to this branch" in body


@pytest.mark.asyncio
async def test_nothing_staged_skips_commit(store, scripted_client, project, committer):
    committer.has_staged_changes.return_value = False

    report = await make_runner(store, scripted_client(["# Users"]), project, ["api/users.js"], committer).run()

    committer.commit.assert_not_awaited()
    committer.push.assert_not_awaited()
    assert report.committed is False
    assert report.warnings == []


@pytest.mark.asyncio
async def test_failures_become_warnings(store, scripted_client, project, committer):
    committer.push.side_effect = CommitError("rejected")
    sink = AsyncMock(spec=LedgerSink)
    sink.comment.side_effect = LedgerSyncError("forbidden")

    report = await make_runner(
        store, scripted_client(["# Users"]), project, ["api/users.js"], committer, sink=sink
    ).run()

    assert report.committed is True
    assert report.pushed is False
    assert report.commented is False
    assert report.warnings == ["Commit failed: rejected", "Comment not posted: forbidden"]


@pytest.mark.asyncio
async def test_unreadable_file_is_reported(store, scripted_client, project, committer):
    sink = AsyncMock(spec=LedgerSink)

    report = await make_runner(
        store, scripted_client(["# Users"]), project, ["api/gone.js", "api/users.js"], committer, sink=sink
    ).run()

    assert [r.filename for r in report.failed] == ["api/gone.js"]
    assert report.failed[0].error.startswith("Cannot read api/gone.js")
    assert [r.filename for r in report.documented] == ["api/users.js"]
    assert "- ❌ `api/gone.js`" in sink.comment.await_args.args[1]


@pytest.mark.asyncio
async def test_generation_failure_writes_nothing(store, scripted_client, project, committer):
    client = scripted_client([GenerationError("rate limited")])

    report = await make_runner(store, client, project, ["api/users.js"], committer).run()

    assert report.documented == []
    assert report.failed == [DocsResult(filename="api/users.js", error="rate limited")]
    assert not (project / "docs").exists()
    committer.stage.assert_not_awaited()
    assert report.total_cost == Decimal("0")
