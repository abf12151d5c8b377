"""Tests for the code review agent."""

import pytest

from maint.agents.reviewer import CodeReviewer
from maint.errors import GenerationError, TargetFileError
from maint.prompts.engine import TemplateEngine


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "cart.js"
    path.write_text("function total(items) { return items.reduce((a, b) => a + b); }")
    return path


@pytest.mark.asyncio
async def test_review_returns_analysis(store, scripted_client, source_file):
    client = scripted_client(["- **Issue:** empty array crashes reduce"])
    reviewer = CodeReviewer(store, TemplateEngine(), client)

    result = await reviewer.review(str(source_file))

    assert result.success is True
    assert "empty array" in result.analysis
    assert result.template == "default"
    assert result.timestamp is not None
    assert "items.reduce" in client.calls[0]["prompt"]
    assert "Review Severity: medium" in client.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_review_uses_configured_template(store, scripted_client, source_file):
    store.config.prompts.code_reviewer.template = "startup"
    client = scripted_client(["ship it"])

    result = await CodeReviewer(store, TemplateEngine(), client).review(str(source_file))

    assert result.template == "startup"
    assert "fast-moving startup" in client.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_disabled_reviewer_skips(store, scripted_client, source_file):
    store.config.code_reviewer.enabled = False
    client = scripted_client([])

    result = await CodeReviewer(store, TemplateEngine(), client).review(str(source_file))

    assert result.skipped is True
    assert result.reason == "disabled"
    assert client.calls == []


@pytest.mark.asyncio
async def test_excluded_file_skips(store, scripted_client, tmp_path):
    test_file = tmp_path / "cart.test.js"
    test_file.write_text("test('x', () => {});")

    result = await CodeReviewer(store, TemplateEngine(), scripted_client([])).review(str(test_file))

    assert result.skipped is True
    assert result.reason == "excluded"


@pytest.mark.asyncio
async def test_missing_file_raises(store, scripted_client, tmp_path):
    with pytest.raises(TargetFileError):
        await CodeReviewer(store, TemplateEngine(), scripted_client([])).review(str(tmp_path / "nope.js"))


@pytest.mark.asyncio
async def test_generation_failure_is_reported(store, scripted_client, source_file):
    client = scripted_client([GenerationError("service unavailable")])

    result = await CodeReviewer(store, TemplateEngine(), client).review(str(source_file))

    assert result.success is False
    assert result.error == "service unavailable"
