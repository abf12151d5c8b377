"""Wiring shared by CLI commands."""

import logging
import os

import click
from rich.logging import RichHandler

from maint.config.defaults import BUG_FIXER, CODE_REVIEWER, DOCUMENTATION_WRITER
from maint.config.manager import ConfigStore
from maint.errors import ConfigUnavailableError, UnknownAgentError
from maint.ledger.github import LedgerSink, NullLedgerSink
from maint.ledger.tracker import UsageLedger
from maint.output.formatter import get_formatter

LOG_LEVEL_ENV = "MAINT_LOG_LEVEL"

# Short agent names accepted wherever an agent is named
AGENT_COMMANDS = {
    "fix": BUG_FIXER,
    "review": CODE_REVIEWER,
    "docs": DOCUMENTATION_WRITER,
}


def resolve_agent(name: str) -> str:
    """Map a short command (``fix``) or agent name (``bugFixer``) to the agent name.

    Raises:
        UnknownAgentError: If ``name`` is neither.
    """
    agent_name = AGENT_COMMANDS.get(name, name)
    if agent_name not in AGENT_COMMANDS.values():
        raise UnknownAgentError(name)
    return agent_name


def setup_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=verbose)],
        force=True,
    )


def load_store(ctx: click.Context) -> ConfigStore:
    """Load configuration for this invocation, exiting 1 if that is impossible."""
    obj = ctx.ensure_object(dict)
    store = obj.get("store")
    if store is None:
        try:
            store = ConfigStore.load(obj.get("config_path"))
        except ConfigUnavailableError as e:
            get_formatter().print_error(str(e))
            raise SystemExit(1)
        obj["store"] = store
    return store


def build_ledger(store: ConfigStore, sink: LedgerSink | None = None) -> UsageLedger:
    controls = store.config.cost_controls
    return UsageLedger.from_path(
        controls.usage_path,
        sink=sink or NullLedgerSink(),
        monthly_budget=store.monthly_budget(),
        alert_threshold=controls.alert_threshold,
    )
