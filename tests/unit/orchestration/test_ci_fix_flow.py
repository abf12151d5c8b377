"""CI fixing from real test output through to files on disk."""

from unittest.mock import AsyncMock, Mock

import pytest

from maint.execution.failures import TestOutputFailureSource
from maint.execution.validator import ValidationResult
from maint.execution.vcs import GitCommitter
from maint.ledger.github import LedgerSink
from maint.orchestration.ci import CI_COMMIT_MESSAGE, CIFixRunner
from maint.orchestration.fixer import FixOrchestrator
from maint.prompts.engine import TemplateEngine


@pytest.fixture
def project(tmp_path, monkeypatch):
    """A project whose root is not the working directory."""
    root = tmp_path / "proj"
    (root / "src").mkdir(parents=True)
    (root / "src" / "cart.js").write_text("for (const item of items) {}")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    return root


def failing_suite(output):
    suite = Mock()
    suite.validate = AsyncMock(return_value=ValidationResult(passed=False, exit_code=1, output=output))
    return suite


def jest_output(cart):
    return (
        "FAIL src/cart.test.js\n"
        "  TypeError: items is not iterable\n"
        f"      at total ({cart}:3:5)\n"
    )


def make_runner(store, project, client, per_file_validator, committer, sink):
    cart = project / "src" / "cart.js"
    orchestrator = FixOrchestrator(
        store,
        TemplateEngine(),
        client,
        validator=per_file_validator,
        committer=committer,
        root=project,
    )
    return CIFixRunner(
        orchestrator,
        TestOutputFailureSource(project),
        failing_suite(jest_output(cart)),
        committer,
        sink=sink,
        pr_number="7",
    )


@pytest.mark.asyncio
async def test_fixes_stack_frame_file_under_root(store, scripted_client, scripted_validator, project):
    cart = project / "src" / "cart.js"
    client = scripted_client(["```js\nfor (const item of items ?? []) {}\n```"])
    per_file = scripted_validator([True], watch=cart)
    committer = AsyncMock(spec=GitCommitter)
    sink = AsyncMock(spec=LedgerSink)

    report = await make_runner(store, project, client, per_file, committer, sink).run()

    assert report.warnings == []
    assert [item.file for item in report.files] == ["src/cart.js"]
    assert report.fixed_count == 1
    assert cart.read_text() == "for (const item of items ?? []) {}"
    assert "items is not iterable" in client.calls[0]["prompt"]
    assert "Hint: Guard against null or undefined collections" in client.calls[0]["prompt"]
    committer.commit.assert_awaited_once_with(CI_COMMIT_MESSAGE)
    committer.push.assert_awaited_once()
    sink.comment.assert_awaited_once()
    assert "- ✅ `src/cart.js`" in sink.comment.await_args.args[1]


@pytest.mark.asyncio
async def test_unfixable_file_is_restored_and_reported(store, scripted_client, scripted_validator, project):
    store.config.bug_fixer.max_attempts_per_file = 2
    cart = project / "src" / "cart.js"
    original = cart.read_bytes()
    client = scripted_client(["attempt one", "attempt two"])
    per_file = scripted_validator([False, False], watch=cart)
    committer = AsyncMock(spec=GitCommitter)
    sink = AsyncMock(spec=LedgerSink)

    report = await make_runner(store, project, client, per_file, committer, sink).run()

    assert per_file.seen == ["attempt one", "attempt two"]
    assert cart.read_bytes() == original
    assert report.fixed_count == 0
    assert report.warnings == []
    committer.commit.assert_not_awaited()
    assert "- ❌ `src/cart.js`" in sink.comment.await_args.args[1]
