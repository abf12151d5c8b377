"""Main CLI entry point for maint."""

import asyncio
import re
from pathlib import Path

import click

from maint.agents.doc_writer import DocumentationWriter
from maint.agents.reviewer import CodeReviewer
from maint.cli.shared import build_ledger, load_store, resolve_agent, setup_logging
from maint.config.defaults import BUG_FIXER, CODE_REVIEWER
from maint.config.manager import ConfigStore
from maint.errors import TargetFileError, UnknownAgentError
from maint.execution.changes import ChangedFileSource
from maint.execution.failures import TestOutputFailureSource
from maint.execution.validator import TestCommandValidator
from maint.execution.vcs import GitCommitter
from maint.ledger.github import GitHubIssueSink
from maint.llm.client import RoutingGenerationClient
from maint.orchestration.ci import CIFixRunner
from maint.orchestration.docs_ci import CIDocsRunner
from maint.orchestration.fixer import FixOrchestrator
from maint.output.formatter import get_formatter
from maint.prompts.engine import TemplateEngine

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output (debug logging)")
@click.option("--no-color", is_flag=True, help="Disable colors")
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False),
    help="Configuration file (default: $MAINT_CONFIG or .agent-config.json)",
)
@click.version_option(package_name="maint")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, no_color: bool, config_path: str | None) -> None:
    """Maint - configurable AI maintenance agents.

    \b
    Examples:
        maint run review src/cart.js             # Review a file
        maint run fix src/cart.js "TypeError..." # Fix a failing file
        maint run docs src/api/users.js          # Write documentation
        maint ci-fix                             # Fix failing tests in CI
        maint ci-docs                            # Document changed API files
        maint usage                              # Show this month's spend
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path

    setup_logging(verbose)
    get_formatter(color=False if no_color else None, verbose=verbose)


@cli.command()
@click.argument("agent_command")
@click.argument("filename")
@click.argument("error_message", required=False, default="")
@click.pass_context
def run(ctx: click.Context, agent_command: str, filename: str, error_message: str) -> None:
    """Run an agent (fix, review, docs) on FILENAME."""
    formatter = get_formatter()
    try:
        agent_name = resolve_agent(agent_command)
    except UnknownAgentError as e:
        formatter.print_error(str(e))
        raise SystemExit(1)

    if not Path(filename).is_file():
        formatter.print_error(f"File not found: {filename}")
        raise SystemExit(1)

    store = load_store(ctx)
    try:
        succeeded = asyncio.run(_run_agent(store, agent_name, filename, error_message))
    except (TargetFileError, UnknownAgentError) as e:
        formatter.print_error(str(e))
        raise SystemExit(1)

    if not succeeded:
        raise SystemExit(1)


async def _run_agent(store: ConfigStore, agent_name: str, filename: str, error_message: str) -> bool:
    """Run one agent invocation; True on success or skip."""
    formatter = get_formatter()
    sink = GitHubIssueSink.from_env()
    try:
        ledger = build_ledger(store, sink)
        components = (store, TemplateEngine.from_config(store.config), RoutingGenerationClient())

        if agent_name == BUG_FIXER:
            result = await FixOrchestrator(*components, ledger=ledger).fix(filename, error_message)
            formatter.print_fix_result(filename, result)
        elif agent_name == CODE_REVIEWER:
            result = await CodeReviewer(*components, ledger=ledger).review(filename)
            formatter.print_review(result)
        else:
            result = await DocumentationWriter(*components, ledger=ledger).generate_docs(filename)
            formatter.print_docs_result(result)
    finally:
        await sink.aclose()

    return result.success or result.skipped


@cli.command("ci-fix")
@click.option("--pr-number", envvar="PR_NUMBER", help="Pull request to comment on (default: $PR_NUMBER)")
@click.option("--root", type=click.Path(file_okay=False), default=".", help="Project root")
@click.pass_context
def ci_fix(ctx: click.Context, pr_number: str | None, root: str) -> None:
    """Run the test command and fix the files behind any failures."""
    store = load_store(ctx)
    report = asyncio.run(_run_ci_fix(store, pr_number, Path(root)))
    get_formatter().print_ci_report(report)

    if not report.tests_passed and (not report.files or report.fixed_count < len(report.files)):
        raise SystemExit(1)


async def _run_ci_fix(store: ConfigStore, pr_number: str | None, root: Path):
    settings = store.agent(BUG_FIXER)
    sink = GitHubIssueSink.from_env()
    try:
        ledger = build_ledger(store, sink)
        validator = TestCommandValidator(settings.test_command, cwd=root, timeout=settings.test_timeout)
        committer = GitCommitter(cwd=root)
        orchestrator = FixOrchestrator(
            store,
            TemplateEngine.from_config(store.config),
            RoutingGenerationClient(),
            ledger=ledger,
            validator=validator,
            committer=committer,
            root=root,
        )
        runner = CIFixRunner(
            orchestrator,
            TestOutputFailureSource(root),
            validator,
            committer,
            sink=sink,
            ledger=ledger,
            pr_number=pr_number,
        )
        return await runner.run()
    finally:
        await sink.aclose()


@cli.command("ci-docs")
@click.option("--pr-number", envvar="PR_NUMBER", help="Pull request to comment on (default: $PR_NUMBER)")
@click.option("--root", type=click.Path(file_okay=False), default=".", help="Project root")
@click.option("--base", default="HEAD~1", show_default=True, help="Revision to diff from")
@click.option("--head", default="HEAD", show_default=True, help="Revision to diff to")
@click.pass_context
def ci_docs(ctx: click.Context, pr_number: str | None, root: str, base: str, head: str) -> None:
    """Document the API files changed between BASE and HEAD."""
    store = load_store(ctx)
    report = asyncio.run(_run_ci_docs(store, pr_number, Path(root), base, head))
    get_formatter().print_docs_report(report)

    if report.failed:
        raise SystemExit(1)


async def _run_ci_docs(store: ConfigStore, pr_number: str | None, root: Path, base: str, head: str):
    sink = GitHubIssueSink.from_env()
    try:
        ledger = build_ledger(store, sink)
        writer = DocumentationWriter(
            store,
            TemplateEngine.from_config(store.config),
            RoutingGenerationClient(),
            ledger=ledger,
            root=root,
        )
        runner = CIDocsRunner(
            writer,
            ChangedFileSource(root, base=base, head=head),
            GitCommitter(cwd=root),
            sink=sink,
            ledger=ledger,
            pr_number=pr_number,
        )
        return await runner.run()
    finally:
        await sink.aclose()


def _validate_month(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is not None and not re.fullmatch(r"\d{4}-(0[1-9]|1[0-2])", value):
        raise click.BadParameter("expected YYYY-MM")
    return value


@cli.command()
@click.option(
    "--month", callback=_validate_month, help="Month to show as YYYY-MM (default: current month)"
)
@click.pass_context
def usage(ctx: click.Context, month: str | None) -> None:
    """Show AI spend for a month."""
    store = load_store(ctx)
    ledger = build_ledger(store)
    month = month or ledger.current_month()
    get_formatter().print_usage(month, ledger.summary(month), ledger.monthly_budget, ledger.state.total_spent)


# Register subcommand groups
from maint.cli.commands.budget_cmd import budget
from maint.cli.commands.config_cmd import config
from maint.cli.commands.templates_cmd import templates

cli.add_command(budget)
cli.add_command(config)
cli.add_command(templates)


if __name__ == "__main__":
    cli()
