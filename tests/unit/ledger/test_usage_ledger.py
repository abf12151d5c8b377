"""Tests for the usage ledger."""

import json
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from maint.errors import LedgerSyncError
from maint.ledger.github import LedgerSink
from maint.ledger.report import ALERT_LABELS, USAGE_LABELS
from maint.ledger.store import UsageStore
from maint.ledger.tracker import UsageLedger, month_key


def make_sink(create_return="7"):
    sink = AsyncMock(spec=LedgerSink)
    sink.create.return_value = create_return
    return sink


def test_month_key():
    assert month_key(datetime(2024, 3, 31, 23, 59, tzinfo=timezone.utc)) == "2024-03"


@pytest.mark.asyncio
async def test_record_usage_returns_cost_and_month_total(ledger):
    record = await ledger.record_usage("bugFixer", "gpt-4o-mini", 1000, 500)

    assert record.cost == Decimal("0.00045")
    assert record.monthly_total == Decimal("0.00045")
    assert record.warnings == ()


@pytest.mark.asyncio
async def test_costs_accumulate_per_agent(ledger):
    with patch("maint.ledger.tracker.calculate_cost", side_effect=[Decimal("0.01"), Decimal("0.02")]):
        await ledger.record_usage("codeReviewer", "gpt-4o", 1, 1)
        record = await ledger.record_usage("codeReviewer", "gpt-4o", 1, 1)

    usage = ledger.summary("2024-03")
    assert record.monthly_total == Decimal("0.03")
    assert usage.agents["codeReviewer"].cost == Decimal("0.03")
    assert usage.agents["codeReviewer"].calls == 2
    assert ledger.state.total_spent == Decimal("0.03")


@pytest.mark.asyncio
async def test_identical_calls_are_not_deduplicated(ledger):
    await ledger.record_usage("bugFixer", "gpt-4o-mini", 1000, 500)
    await ledger.record_usage("bugFixer", "gpt-4o-mini", 1000, 500)

    assert ledger.summary().agents["bugFixer"].calls == 2
    assert ledger.summary().cost == Decimal("0.0009")


@pytest.mark.asyncio
async def test_state_is_persisted_as_decimal_strings(tmp_path, ledger):
    await ledger.record_usage("bugFixer", "gpt-4o-mini", 1000, 500)

    data = json.loads((tmp_path / ".agent-usage.json").read_text())
    assert data["totalSpent"] == "0.00045"
    assert data["monthly"]["2024-03"]["agents"]["bugFixer"] == {"cost": "0.00045", "calls": 1}


@pytest.mark.asyncio
async def test_ledger_reloads_previous_state(tmp_path, fixed_clock, ledger):
    await ledger.record_usage("bugFixer", "gpt-4o-mini", 1000, 500)

    reloaded = UsageLedger(UsageStore(tmp_path / ".agent-usage.json"), clock=fixed_clock)
    record = await reloaded.record_usage("bugFixer", "gpt-4o-mini", 1000, 500)

    assert record.monthly_total == Decimal("0.0009")


@pytest.mark.asyncio
async def test_new_month_creates_and_updates_record(tmp_path, fixed_clock):
    sink = make_sink("42")
    ledger = UsageLedger(UsageStore(tmp_path / "usage.json"), sink=sink, clock=fixed_clock)

    await ledger.record_usage("bugFixer", "gpt-4o-mini", 1000, 500)
    await ledger.record_usage("bugFixer", "gpt-4o-mini", 1000, 500)

    sink.create.assert_awaited_once()
    title, _, labels = sink.create.await_args.args
    assert title == "AI Agent Usage - March 2024"
    assert labels == USAGE_LABELS
    assert sink.update.await_count == 2
    assert sink.update.await_args.args[0] == "42"
    assert ledger.summary().ledger_record_id == "42"


@pytest.mark.asyncio
async def test_single_alert_when_threshold_crossed(tmp_path, fixed_clock):
    sink = make_sink()
    ledger = UsageLedger(
        UsageStore(tmp_path / "usage.json"), sink=sink, monthly_budget=50, clock=fixed_clock
    )

    with patch("maint.ledger.tracker.calculate_cost", side_effect=[Decimal("44"), Decimal("1.5"), Decimal("1")]):
        await ledger.record_usage("documentationWriter", "gpt-4o", 1, 1)
        await ledger.record_usage("documentationWriter", "gpt-4o", 1, 1)
        await ledger.record_usage("documentationWriter", "gpt-4o", 1, 1)

    alert_calls = [c for c in sink.create.await_args_list if c.args[2] == ALERT_LABELS]
    assert len(alert_calls) == 1
    assert alert_calls[0].args[0].startswith("AI Budget Alert - 91% Used")
    assert ledger.summary().alert_raised is True


@pytest.mark.asyncio
async def test_no_alert_below_threshold(tmp_path, fixed_clock):
    sink = make_sink()
    ledger = UsageLedger(UsageStore(tmp_path / "usage.json"), sink=sink, clock=fixed_clock)

    with patch("maint.ledger.tracker.calculate_cost", return_value=Decimal("44.99")):
        await ledger.record_usage("bugFixer", "gpt-4o", 1, 1)

    assert all(c.args[2] != ALERT_LABELS for c in sink.create.await_args_list)
    assert ledger.summary().alert_raised is False


@pytest.mark.asyncio
async def test_alert_marked_even_when_sink_fails(tmp_path, fixed_clock):
    sink = make_sink()
    sink.create.side_effect = ["1", LedgerSyncError("boom")]
    ledger = UsageLedger(UsageStore(tmp_path / "usage.json"), sink=sink, clock=fixed_clock)

    with patch("maint.ledger.tracker.calculate_cost", return_value=Decimal("46")):
        record = await ledger.record_usage("bugFixer", "gpt-4o", 1, 1)

    assert ledger.summary().alert_raised is True
    assert any("Budget alert not delivered" in w for w in record.warnings)
    saved = json.loads((tmp_path / "usage.json").read_text())
    assert saved["monthly"]["2024-03"]["alertRaised"] is True


@pytest.mark.asyncio
async def test_sink_failures_become_warnings_and_state_is_saved(tmp_path, fixed_clock):
    sink = make_sink()
    sink.create.side_effect = LedgerSyncError("github down")
    ledger = UsageLedger(UsageStore(tmp_path / "usage.json"), sink=sink, clock=fixed_clock)

    record = await ledger.record_usage("bugFixer", "gpt-4o-mini", 1000, 500)

    assert record.cost == Decimal("0.00045")
    assert record.warnings == ("Ledger record not created: github down",)
    assert ledger.summary().ledger_record_id is None
    sink.update.assert_not_awaited()
    assert (tmp_path / "usage.json").exists()


def test_summary_for_unknown_month_is_empty(ledger):
    usage = ledger.summary("1999-01")
    assert usage.cost == 0
    assert usage.agents == {}
