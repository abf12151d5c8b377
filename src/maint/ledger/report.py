"""Markdown bodies for the external ledger record and budget alerts."""
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from maint.ledger.models import MonthlyUsage

USAGE_LABELS = ["ai-usage", "automated"]
ALERT_LABELS = ["ai-budget-alert", "urgent"]

# Average cost per call above which an agent is flagged as expensive
EXPENSIVE_CALL_COST = Decimal("0.02")
WARNING_PERCENT = 75
CRITICAL_PERCENT = 90


def format_money(value: Decimal, places: int = 2) -> str:
    """Round for display only; stored values keep full precision."""
    exponent = Decimal(1).scaleb(-places)
    return f"${value.quantize(exponent, rounding=ROUND_HALF_UP)}"


def month_display(month: str) -> str:
    """``2024-03`` -> ``March 2024``."""
    year, month_number = month.split("-")
    return date(int(year), int(month_number), 1).strftime("%B %Y")


def budget_percent(cost: Decimal, budget: Decimal) -> int:
    if budget <= 0:
        return 100
    return int((cost / budget * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def status_marker(percent: int) -> str:
    if percent > CRITICAL_PERCENT:
        return "🚨"
    if percent > WARNING_PERCENT:
        return "⚠️"
    return "✅"


def usage_title(month: str) -> str:
    return f"AI Agent Usage - {month_display(month)}"


def budget_suggestions(usage: MonthlyUsage) -> str:
    """Concrete suggestions for reducing spend."""
    suggestions = []
    for name, agent in usage.agents.items():
        if agent.average_cost > EXPENSIVE_CALL_COST:
            suggestions.append(
                f"- **{name}** is expensive ({format_money(agent.average_cost, 4)}/call)"
                " - consider switching to gpt-4o-mini"
            )

    if not suggestions:
        suggestions.append(
            "- Usage is high but efficient - consider increasing budget"
            " or reducing automation frequency"
        )

    return "\n".join(suggestions)


def agent_breakdown(usage: MonthlyUsage) -> str:
    """One line per agent, most expensive first."""
    lines = []
    for name, agent in sorted(usage.agents.items(), key=lambda item: item[1].cost, reverse=True):
        lines.append(
            f"- **{name}:** {format_money(agent.cost, 3)} ({agent.calls} calls,"
            f" {format_money(agent.average_cost, 4)}/call)"
        )
    return "\n".join(lines) or "_No usage yet this month_"


def render_usage_body(
    month: str,
    usage: MonthlyUsage,
    budget: Decimal,
    updated_at: datetime | None = None,
) -> str:
    """Full body of the monthly usage record (replaces the previous body)."""
    percent = budget_percent(usage.cost, budget)
    lines = [
        f"## AI Agent Usage Report - {month_display(month)}",
        "",
        f"**Monthly Budget:** {format_money(budget)}",
        "",
        f"### Current Usage {status_marker(percent)}",
        f"- **Total Cost:** {format_money(usage.cost)}",
        f"- **Budget Used:** {percent}%",
        f"- **Remaining:** {format_money(budget - usage.cost)}",
        "",
        "### Agent Breakdown",
        agent_breakdown(usage),
    ]

    if percent > WARNING_PERCENT:
        lines += ["", "### ⚠️ Budget Alert", budget_suggestions(usage)]

    lines += ["", "---"]
    if updated_at is not None:
        lines.append(f"*Last updated: {updated_at.strftime('%Y-%m-%d %H:%M')} UTC*")
    lines.append("*This issue is automatically updated as agents are used.*")
    return "\n".join(lines)


def render_alert(month: str, usage: MonthlyUsage, budget: Decimal) -> tuple[str, str]:
    """Title and body of the one-time budget alert."""
    percent = budget_percent(usage.cost, budget)
    title = f"AI Budget Alert - {percent}% Used ({month_display(month)})"
    body = "\n".join([
        "## Budget Alert",
        "",
        f"We've reached {percent}% of our monthly AI budget.",
        "",
        f"**Current Usage:** {format_money(usage.cost)} / {format_money(budget)}",
        f"**Remaining:** {format_money(budget - usage.cost)}",
        "",
        "### Immediate Actions Needed:",
        budget_suggestions(usage),
        "",
        "### Options:",
        "- [ ] Increase monthly budget",
        "- [ ] Switch agents to cheaper models (gpt-4o-mini)",
        "- [ ] Temporarily disable non-critical agents",
        "- [ ] Optimize prompt templates to use fewer tokens",
        "",
        "---",
        "*This alert was created automatically when usage crossed the budget threshold.*",
    ])
    return title, body


def cost_footer(cost: Decimal, monthly_total: Decimal, budget: Decimal) -> str:
    """Cost line appended to pull request comments."""
    return (
        f"\n\n---\n**AI Cost:** {format_money(cost, 4)} | "
        f"**Monthly Total:** {format_money(monthly_total)}/{format_money(budget)}"
    )
