"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest

from maint.config.manager import ConfigStore
from maint.config.schema import MaintConfig
from maint.execution.validator import ValidationResult
from maint.ledger.store import UsageStore
from maint.ledger.tracker import UsageLedger
from maint.llm.client import Generation, GenerationClient, TokenUsage
from maint.output import formatter as formatter_module

ISOLATED_ENV = (
    "MAINT_CONFIG",
    "MAINT_MONTHLY_BUDGET",
    "MAINT_LOG_LEVEL",
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_REPOSITORY_OWNER",
    "GITHUB_API_URL",
    "PR_NUMBER",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
)


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Keep the developer's environment out of tests."""
    for name in ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_formatter():
    """Reset the global formatter before each test."""
    formatter_module._formatter = None
    yield
    formatter_module._formatter = None


class ScriptedClient(GenerationClient):
    """Returns queued outputs in order; exceptions in the queue are raised."""

    def __init__(self, outputs, input_tokens=100, output_tokens=50):
        self.outputs = list(outputs)
        self.usage = TokenUsage(input_tokens=input_tokens, output_tokens=output_tokens)
        self.calls = []

    async def generate(self, model, prompt, max_tokens):
        self.calls.append({"model": model, "prompt": prompt, "max_tokens": max_tokens})
        item = self.outputs.pop(0)
        if isinstance(item, BaseException):
            raise item
        return Generation(text=item, model=model, usage=self.usage)


class ScriptedValidator:
    """Passes or fails per call and snapshots the watched file each time."""

    def __init__(self, outcomes, watch=None):
        self.outcomes = list(outcomes)
        self.watch = watch
        self.seen = []

    async def validate(self):
        if self.watch is not None:
            self.seen.append(self.watch.read_text())
        passed = self.outcomes.pop(0)
        return ValidationResult(
            passed=passed,
            exit_code=0 if passed else 1,
            output="" if passed else "FAIL cart.test.js",
        )


@pytest.fixture
def scripted_client():
    """Factory for ScriptedClient."""
    return ScriptedClient


@pytest.fixture
def scripted_validator():
    """Factory for ScriptedValidator."""
    return ScriptedValidator


@pytest.fixture
def store(tmp_path):
    """Default configuration saved under tmp_path."""
    return ConfigStore(MaintConfig.default(), path=tmp_path / ".agent-config.json")


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def ledger(tmp_path, fixed_clock):
    """Usage ledger with a null sink and a clock fixed in March 2024."""
    return UsageLedger(UsageStore(tmp_path / ".agent-usage.json"), clock=fixed_clock)
