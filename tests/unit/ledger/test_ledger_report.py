"""Tests for ledger report rendering."""

from datetime import datetime
from decimal import Decimal

from maint.ledger.models import MonthlyUsage
from maint.ledger.report import (
    budget_percent,
    cost_footer,
    format_money,
    month_display,
    render_alert,
    render_usage_body,
    status_marker,
)


def make_usage(**agent_costs):
    usage = MonthlyUsage()
    for name, cost in agent_costs.items():
        usage.add(name, Decimal(cost))
    return usage


def test_format_money_rounds_for_display():
    assert format_money(Decimal("0.00045"), 4) == "$0.0005"
    assert format_money(Decimal("12.345")) == "$12.35"
    assert format_money(Decimal("50")) == "$50.00"


def test_month_display():
    assert month_display("2024-03") == "March 2024"


def test_budget_percent_and_marker():
    assert budget_percent(Decimal("45"), Decimal("50")) == 90
    assert budget_percent(Decimal("1"), Decimal("0")) == 100
    assert status_marker(50) == "✅"
    assert status_marker(80) == "⚠️"
    assert status_marker(95) == "🚨"


def test_usage_body_sorts_agents_by_cost():
    usage = make_usage(codeReviewer="0.5", documentationWriter="2")

    body = render_usage_body("2024-03", usage, Decimal("50"), datetime(2024, 3, 15, 9, 30))

    assert body.index("documentationWriter") < body.index("codeReviewer")
    assert "**Total Cost:** $2.50" in body
    assert "**Remaining:** $47.50" in body
    assert "*Last updated: 2024-03-15 09:30 UTC*" in body
    assert "Budget Alert" not in body


def test_usage_body_includes_suggestions_above_warning_level():
    usage = make_usage(documentationWriter="40")

    body = render_usage_body("2024-03", usage, Decimal("50"))

    assert "### ⚠️ Budget Alert" in body
    assert "**documentationWriter** is expensive" in body


def test_alert_title_and_body():
    usage = make_usage(bugFixer="46")

    title, body = render_alert("2024-03", usage, Decimal("50"))

    assert title == "AI Budget Alert - 92% Used (March 2024)"
    assert "**Current Usage:** $46.00 / $50.00" in body


def test_cost_footer():
    footer = cost_footer(Decimal("0.0123"), Decimal("3.456"), Decimal("50"))
    assert "**AI Cost:** $0.0123" in footer
    assert "**Monthly Total:** $3.46/$50.00" in footer
