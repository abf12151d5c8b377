"""Prompt template registry and renderer."""

import copy
import logging
import re
from collections.abc import Mapping
from typing import Any

from maint.config.schema import MaintConfig
from maint.errors import UnknownAgentError
from maint.prompts.library import BUILTIN_TEMPLATES
from maint.prompts.variables import VariableBag, stringify

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "default"

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _as_mapping(variables: Mapping[str, Any] | VariableBag) -> Mapping[str, Any]:
    if isinstance(variables, VariableBag):
        return variables.as_mapping()
    return variables


class TemplateEngine:
    """Holds named templates per agent and renders them.

    Every agent table contains a ``default`` template; asking for a name that
    does not exist renders ``default`` instead.
    """

    def __init__(self, templates: dict[str, dict[str, str]] | None = None):
        source = BUILTIN_TEMPLATES if templates is None else templates
        self.templates: dict[str, dict[str, str]] = copy.deepcopy(source)

    def get_template(
        self,
        agent: str,
        name: str,
        variables: Mapping[str, Any] | VariableBag,
    ) -> str:
        """Resolve ``agent``/``name`` (falling back to default) and render it.

        Raises:
            UnknownAgentError: If no templates are registered for ``agent``.
        """
        agent_templates = self.templates.get(agent)
        if agent_templates is None:
            raise UnknownAgentError(agent)

        template = agent_templates.get(name)
        if template is None:
            logger.debug("No template %r for %s, using default", name, agent)
            template = agent_templates[DEFAULT_TEMPLATE]

        rendered = self.render(template, variables)
        leftover = self.unresolved_placeholders(template, variables)
        if leftover:
            logger.debug("Template %s/%s left unfilled: %s", agent, name, ", ".join(leftover))
        return rendered

    @staticmethod
    def render(template: str, variables: Mapping[str, Any] | VariableBag) -> str:
        """Replace each ``{key}`` with its stringified value.

        Keys without a value stay in the output as literal ``{key}`` text.
        Substituted values are not scanned again.
        """
        mapping = _as_mapping(variables)

        def substitute(match: re.Match[str]) -> str:
            key = match.group(1)
            if key not in mapping:
                return match.group(0)
            return stringify(mapping[key])

        return _PLACEHOLDER_RE.sub(substitute, template)

    @staticmethod
    def unresolved_placeholders(
        template: str, variables: Mapping[str, Any] | VariableBag
    ) -> list[str]:
        """Names of placeholders in ``template`` that ``variables`` does not fill."""
        mapping = _as_mapping(variables)
        seen: list[str] = []
        for key in _PLACEHOLDER_RE.findall(template):
            if key not in mapping and key not in seen:
                seen.append(key)
        return seen

    def add_template(self, agent: str, name: str, body: str) -> None:
        """Insert or overwrite a template. The body is not validated.

        The first template added for a new agent also becomes its default.
        """
        agent_templates = self.templates.setdefault(agent, {})
        agent_templates[name] = body
        agent_templates.setdefault(DEFAULT_TEMPLATE, body)
        logger.info("Added template '%s' for %s", name, agent)

    def list_templates(self, agent: str) -> list[str]:
        """Template names for ``agent`` (empty if the agent is unknown)."""
        return list(self.templates.get(agent, {}))

    def has_agent(self, agent: str) -> bool:
        return agent in self.templates

    @classmethod
    def from_config(cls, config: MaintConfig) -> "TemplateEngine":
        """Build an engine with built-ins plus ``prompts.*.customTemplates``."""
        engine = cls()
        for agent in list(engine.templates):
            settings = config.get_prompt_settings(agent)
            for name, body in settings.custom_templates.items():
                engine.add_template(agent, name, body)
        return engine
