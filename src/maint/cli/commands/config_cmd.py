"""Configuration CLI commands."""

import json
from typing import Any

import click
from pydantic import ValidationError

from maint.cli.shared import load_store
from maint.output.formatter import get_formatter

_MISSING = object()

# Free-form maps that accept new keys
FREE_FORM_KEYS = {"teamStandards", "customVariables", "customTemplates"}


def parse_value(raw: str) -> Any:
    """Interpret a command-line value as JSON, falling back to a plain string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


@click.group()
def config() -> None:
    """Manage configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    store = load_store(ctx)
    get_formatter().print_value(store.config.to_dict())


@config.command("get")
@click.argument("key")
@click.pass_context
def config_get(ctx: click.Context, key: str) -> None:
    """Get a value by dotted path (e.g. bugFixer.maxAttemptsPerFile)."""
    store = load_store(ctx)
    formatter = get_formatter()

    value = store.get_value(key, _MISSING)
    if value is _MISSING:
        formatter.print_error(f"Unknown configuration key: {key}")
        raise SystemExit(1)
    formatter.print_value(value)


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Set a value by dotted path; VALUE is parsed as JSON when possible."""
    store = load_store(ctx)
    formatter = get_formatter()

    parent, _, _ = key.rpartition(".")
    is_free_form = parent.rpartition(".")[2] in FREE_FORM_KEYS
    if store.get_value(key, _MISSING) is _MISSING and not is_free_form:
        formatter.print_error(f"Unknown configuration key: {key}")
        raise SystemExit(1)

    try:
        store.set_value(key, parse_value(value))
    except ValidationError as e:
        formatter.print_error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        raise SystemExit(1)

    formatter.print_success(f"Set {key} = {json.dumps(store.get_value(key))}")
