"""Budget CLI commands."""

import click

from maint.cli.shared import load_store
from maint.config.defaults import BUDGET_PER_DEVELOPER, MIN_TEAM_BUDGET
from maint.ledger.report import USAGE_LABELS
from maint.output.formatter import get_formatter


def suggested_budget(team_size: int) -> int:
    """Monthly budget for a team: $10 per developer, at least $25."""
    return max(MIN_TEAM_BUDGET, team_size * BUDGET_PER_DEVELOPER)


@click.group()
def budget() -> None:
    """Manage the monthly AI budget."""
    pass


@budget.command("setup")
@click.option("--team-size", type=click.IntRange(min=1), default=5, show_default=True,
              help="Number of developers using the agents")
@click.pass_context
def budget_setup(ctx: click.Context, team_size: int) -> None:
    """Set the monthly budget from the team size."""
    store = load_store(ctx)
    formatter = get_formatter()

    amount = suggested_budget(team_size)
    store.set_value("costControls.monthlyBudget", amount)

    formatter.print_success(f"Set monthly budget: ${amount} for {team_size} developers")
    formatter.print_info("Usage tracking appears in GitHub issues:")
    formatter.print_info("  - monthly usage reports, updated on every call")
    formatter.print_info("  - an alert issue when spend approaches the budget")
    formatter.print_info("  - cost figures in pull request comments")
    formatter.print_info(f"Monitor usage with the label '{USAGE_LABELS[0]}'")
