"""Prompt template CLI commands."""

from typing import TextIO

import click

from maint.cli.shared import load_store, resolve_agent
from maint.config.defaults import AGENT_NAMES
from maint.errors import UnknownAgentError
from maint.output.formatter import get_formatter
from maint.prompts.engine import DEFAULT_TEMPLATE, TemplateEngine
from maint.prompts.variables import SAMPLE_VARIABLES


def _agent_or_exit(name: str) -> str:
    try:
        return resolve_agent(name)
    except UnknownAgentError as e:
        get_formatter().print_error(str(e))
        raise SystemExit(1)


@click.group()
def templates() -> None:
    """Inspect and manage prompt templates."""
    pass


@templates.command("list")
@click.argument("agent", required=False)
@click.pass_context
def templates_list(ctx: click.Context, agent: str | None) -> None:
    """List templates for AGENT (all agents by default)."""
    store = load_store(ctx)
    engine = TemplateEngine.from_config(store.config)

    agents = [_agent_or_exit(agent)] if agent else list(AGENT_NAMES)
    get_formatter().print_template_list(
        {name: engine.list_templates(name) for name in agents},
        {name: store.prompt_settings(name).template for name in agents},
    )


@templates.command("show")
@click.argument("agent")
@click.argument("name", default=DEFAULT_TEMPLATE)
@click.option("--sample", is_flag=True, help="Render with sample variables")
@click.pass_context
def templates_show(ctx: click.Context, agent: str, name: str, sample: bool) -> None:
    """Show template NAME of AGENT, optionally rendered with sample input."""
    agent_name = _agent_or_exit(agent)
    store = load_store(ctx)
    engine = TemplateEngine.from_config(store.config)
    formatter = get_formatter()

    if name not in engine.list_templates(agent_name):
        formatter.print_warning(f"No template '{name}' for {agent_name}, showing '{DEFAULT_TEMPLATE}'")
        name = DEFAULT_TEMPLATE

    body = engine.templates[agent_name][name]
    if sample:
        leftover = engine.unresolved_placeholders(body, SAMPLE_VARIABLES)
        body = engine.get_template(agent_name, name, SAMPLE_VARIABLES)
        formatter.print_template(agent_name, name, body)
        if leftover:
            formatter.print_warning(f"Unresolved placeholders: {', '.join(leftover)}")
    else:
        formatter.print_template(agent_name, name, body)


@templates.command("add")
@click.argument("agent")
@click.argument("name")
@click.argument("body", required=False)
@click.option("-f", "--file", "body_file", type=click.File("r", encoding="utf-8"),
              help="Read the template body from a file")
@click.option("--use", is_flag=True, help="Also make it the agent's active template")
@click.pass_context
def templates_add(
    ctx: click.Context,
    agent: str,
    name: str,
    body: str | None,
    body_file: TextIO | None,
    use: bool,
) -> None:
    """Save a custom template NAME for AGENT in the configuration."""
    agent_name = _agent_or_exit(agent)
    formatter = get_formatter()

    if "." in name:
        formatter.print_error("Template names cannot contain '.'")
        raise SystemExit(1)
    if body_file is not None:
        body = body_file.read()
    if not body:
        formatter.print_error("Provide the template body as an argument or with --file")
        raise SystemExit(1)

    store = load_store(ctx)
    store.set_value(f"prompts.{agent_name}.customTemplates.{name}", body)
    if use:
        store.set_value(f"prompts.{agent_name}.template", name)

    formatter.print_success(f"Saved template '{name}' for {agent_name}")


@templates.command("use")
@click.argument("agent")
@click.argument("name")
@click.pass_context
def templates_use(ctx: click.Context, agent: str, name: str) -> None:
    """Make NAME the active template for AGENT."""
    agent_name = _agent_or_exit(agent)
    store = load_store(ctx)
    formatter = get_formatter()

    if name not in TemplateEngine.from_config(store.config).list_templates(agent_name):
        formatter.print_warning(f"No template '{name}' for {agent_name}; '{DEFAULT_TEMPLATE}' will be used")
    store.set_value(f"prompts.{agent_name}.template", name)
    formatter.print_success(f"{agent_name} now uses the '{name}' template")
