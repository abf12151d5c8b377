"""Terminal output using Rich."""

import json
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from maint.agents.doc_writer import DocsResult
from maint.agents.reviewer import ReviewResult
from maint.ledger.models import MonthlyUsage
from maint.ledger.report import budget_percent, format_money, month_display
from maint.orchestration.models import CIRunReport, DocsRunReport, FixResult

MAINT_THEME = Theme(
    {
        "agent": "cyan",
        "success": "green",
        "error": "red bold",
        "warning": "yellow",
        "info": "blue",
        "skip": "magenta",
        "metadata": "dim",
    }
)


class OutputFormatter:
    """Handles all user-facing output for maint."""

    def __init__(self, color: bool | None = None, verbose: bool = False) -> None:
        self.console = Console(theme=MAINT_THEME, force_terminal=color)
        self.verbose = verbose

    def print_error(self, message: str) -> None:
        self.console.print(f"[error]Error: {escape(message)}[/error]", soft_wrap=True)

    def print_success(self, message: str) -> None:
        self.console.print(f"[success]{escape(message)}[/success]", soft_wrap=True)

    def print_info(self, message: str) -> None:
        self.console.print(f"[info]{escape(message)}[/info]", soft_wrap=True)

    def print_warning(self, message: str) -> None:
        self.console.print(f"[warning]{escape(message)}[/warning]", soft_wrap=True)

    def print_skip(self, filename: str, reason: str | None) -> None:
        self.console.print(f"[skip]Skipped {escape(filename)} ({reason})[/skip]", soft_wrap=True)

    def print_warnings(self, warnings: Iterable[str]) -> None:
        for warning in warnings:
            self.print_warning(f"Warning: {warning}")

    def print_cost(self, cost: Decimal) -> None:
        self.console.print(f"[metadata](cost {format_money(cost, 4)})[/metadata]")

    # --- agent results ---

    def print_fix_result(self, filename: str, result: FixResult) -> None:
        if result.skipped:
            self.print_skip(filename, result.reason)
            return
        if result.success:
            self.print_success(f"Fixed {filename} in {result.attempts} attempt(s)")
            if result.committed:
                self.print_info("Changes committed")
        else:
            self.print_error(f"{result.error} for {filename} ({result.attempts} attempt(s))")

        if self.verbose:
            for attempt in result.attempt_log:
                status = "passed" if attempt.passed else attempt.error or "failed"
                self.console.print(f"[metadata]  attempt {attempt.number}: {status}[/metadata]")
        self.print_warnings(result.warnings)
        self.print_cost(result.cost)

    def print_review(self, result: ReviewResult) -> None:
        if result.skipped:
            self.print_skip(result.filename, result.reason)
            return
        if not result.success:
            self.print_error(f"Review of {result.filename} failed: {result.error}")
            return
        self.console.print(Panel(
            Markdown(result.analysis),
            title=f"[agent]Review: {result.filename}[/agent]",
            subtitle=f"template: {result.template}",
            border_style="agent",
        ))
        self.print_warnings(result.warnings)
        self.print_cost(result.cost)

    def print_docs_result(self, result: DocsResult) -> None:
        if result.skipped:
            self.print_skip(result.filename, result.reason)
            return
        if not result.success:
            self.print_error(f"Documentation for {result.filename} failed: {result.error}")
            return
        self.print_success(f"Created {result.doc_path}")
        if result.readme_updated:
            self.print_info("Updated README.md index")
        self.print_warnings(result.warnings)
        self.print_cost(result.cost)

    def print_ci_report(self, report: CIRunReport) -> None:
        if report.tests_passed:
            self.print_success("All tests passing, nothing to fix")
            return

        table = Table(title="CI Fix Results")
        table.add_column("File", style="cyan")
        table.add_column("Status", justify="center")
        table.add_column("Cost", justify="right")
        for item in report.files:
            status = "[success]fixed[/success]" if item.fixed else "[error]not fixed[/error]"
            table.add_row(item.file, status, format_money(item.cost, 4))
        self.console.print(table)

        if report.committed:
            self.print_info("Fixes committed" + (" and pushed" if report.pushed else ""))
        self.print_warnings(report.warnings)

    def print_docs_report(self, report: DocsRunReport) -> None:
        if not report.changed:
            self.print_success("No API changes detected")
            return

        table = Table(title="CI Documentation Results")
        table.add_column("File", style="cyan")
        table.add_column("Documentation")
        table.add_column("Cost", justify="right")
        for result in report.results:
            if result.success:
                status = escape(str(result.doc_path))
            elif result.skipped:
                status = f"[skip]skipped ({result.reason})[/skip]"
            else:
                status = "[error]failed[/error]"
            table.add_row(escape(result.filename), status, format_money(result.cost, 4))
        self.console.print(table)

        if report.overview_path is not None:
            self.print_info(f"API overview: {report.overview_path}")
        if report.committed:
            self.print_info("Documentation committed" + (" and pushed" if report.pushed else ""))
        self.print_warnings(report.warnings)

    # --- usage and budget ---

    def print_usage(
        self,
        month: str,
        usage: MonthlyUsage,
        budget: Decimal,
        total_spent: Decimal,
    ) -> None:
        """Usage table for one month, most expensive agent first."""
        table = Table(title=f"AI Agent Usage - {month_display(month)}")
        table.add_column("Agent", style="cyan")
        table.add_column("Calls", justify="right")
        table.add_column("Cost", justify="right")
        table.add_column("Avg/Call", justify="right")

        for name, agent in sorted(usage.agents.items(), key=lambda item: item[1].cost, reverse=True):
            table.add_row(
                name,
                str(agent.calls),
                format_money(agent.cost, 4),
                format_money(agent.average_cost, 4),
            )
        self.console.print(table)

        percent = budget_percent(usage.cost, budget)
        style = "error" if percent >= 90 else "warning" if percent > 75 else "success"
        self.console.print(
            f"[{style}]{format_money(usage.cost)} of {format_money(budget)} used ({percent}%)[/{style}]"
        )
        self.console.print(f"[metadata]All-time spend: {format_money(total_spent)}[/metadata]")

    # --- templates and config ---

    def print_template_list(self, templates: dict[str, list[str]], active: dict[str, str]) -> None:
        """Template names per agent, marking the configured one."""
        table = Table(title="Prompt Templates")
        table.add_column("Agent", style="cyan")
        table.add_column("Templates")

        for agent, names in templates.items():
            rendered = [
                f"[success]{name}*[/success]" if name == active.get(agent) else name
                for name in names
            ]
            table.add_row(agent, ", ".join(rendered))

        self.console.print(table)
        self.console.print("[metadata]* configured template[/metadata]")

    def print_template(self, agent: str, name: str, body: str) -> None:
        self.console.print(Panel(Text(body), title=f"[agent]{agent}/{name}[/agent]", border_style="agent"))

    def print_value(self, value: Any) -> None:
        """Print a configuration value; records and lists as JSON."""
        if isinstance(value, (dict, list)):
            self.console.print_json(json.dumps(value))
        else:
            self.console.print(str(value), markup=False, highlight=False)


# Global formatter instance
_formatter: OutputFormatter | None = None


def get_formatter(color: bool | None = None, verbose: bool = False) -> OutputFormatter:
    """Get or create the global formatter instance."""
    global _formatter
    if _formatter is None:
        _formatter = OutputFormatter(color=color, verbose=verbose)
    return _formatter
