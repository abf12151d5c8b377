"""Configuration schema using Pydantic.

On disk the configuration is a JSON object with camelCase keys
(``codeReviewer.excludePatterns``); in Python the fields are snake_case.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from maint.config import defaults
from maint.errors import UnknownAgentError


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GlobalConfig(CamelModel):
    """Fallback settings shared by every agent."""

    model: str = defaults.DEFAULT_MODEL
    max_tokens: int = defaults.DEFAULT_MAX_TOKENS
    enabled: bool = True
    generation_timeout: float = defaults.DEFAULT_GENERATION_TIMEOUT  # seconds


class AgentConfig(CamelModel):
    """Settings common to all agents.

    ``model`` and ``max_tokens`` left as None fall back to the global values.
    """

    enabled: bool = True
    model: str | None = None
    max_tokens: int | None = None
    exclude_patterns: list[str] = Field(default_factory=list)


class CodeReviewerConfig(AgentConfig):
    """Code reviewer settings."""

    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(defaults.DEFAULT_REVIEWER_EXCLUDES)
    )
    focus_areas: list[str] = Field(
        default_factory=lambda: ["bugs", "security", "performance"]
    )
    severity: str = "medium"  # low, medium, high
    team_standards: dict[str, Any] = Field(
        default_factory=lambda: {
            "maxFunctionLength": 50,
            "requireJSDoc": False,
            "enforceCamelCase": True,
        }
    )


class BugFixerConfig(AgentConfig):
    """Bug fixer settings."""

    model: str | None = "gpt-4o-mini"
    max_tokens: int | None = 1500
    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(defaults.DEFAULT_FIXER_EXCLUDES)
    )
    attempt_complex_fixes: bool = False
    max_attempts_per_file: int = defaults.DEFAULT_MAX_ATTEMPTS
    safety_level: str = "medium"  # low, medium, high
    auto_commit: bool = True
    test_command: str = defaults.DEFAULT_TEST_COMMAND
    test_timeout: float = defaults.DEFAULT_TEST_TIMEOUT


class DocumentationWriterConfig(AgentConfig):
    """Documentation writer settings."""

    model: str | None = "gpt-4o"
    max_tokens: int | None = 3000
    style: str = "standard"  # brief, standard, comprehensive
    include_examples: bool = True
    voice_and_tone: str = "professional"  # professional, casual, technical
    generate_readme: bool = True
    docs_dir: str = "docs"


class PromptSettings(CamelModel):
    """Template selection for one agent."""

    template: str = "default"
    custom_variables: dict[str, Any] = Field(default_factory=dict)
    custom_templates: dict[str, str] = Field(default_factory=dict)


class PromptsConfig(CamelModel):
    """Template selection for every agent."""

    code_reviewer: PromptSettings = Field(default_factory=PromptSettings)
    bug_fixer: PromptSettings = Field(default_factory=PromptSettings)
    documentation_writer: PromptSettings = Field(
        default_factory=lambda: PromptSettings(template="comprehensive")
    )


class CostControlsConfig(CamelModel):
    """Monthly budget and usage ledger settings."""

    monthly_budget: float = defaults.DEFAULT_MONTHLY_BUDGET
    alert_threshold: float = defaults.DEFAULT_ALERT_THRESHOLD
    usage_path: str = defaults.DEFAULT_USAGE_PATH


class MaintConfig(CamelModel):
    """Root configuration model for maint."""

    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    code_reviewer: CodeReviewerConfig = Field(default_factory=CodeReviewerConfig)
    bug_fixer: BugFixerConfig = Field(default_factory=BugFixerConfig)
    documentation_writer: DocumentationWriterConfig = Field(
        default_factory=DocumentationWriterConfig
    )
    prompts: PromptsConfig = Field(default_factory=PromptsConfig)
    cost_controls: CostControlsConfig = Field(default_factory=CostControlsConfig)

    @classmethod
    def default(cls) -> "MaintConfig":
        """Create default configuration."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Dump with on-disk (camelCase) keys."""
        return self.model_dump(by_alias=True, mode="json")

    def get_agent_config(self, agent_name: str) -> AgentConfig:
        """Get configuration for a specific agent."""
        agents: dict[str, AgentConfig] = {
            defaults.CODE_REVIEWER: self.code_reviewer,
            defaults.BUG_FIXER: self.bug_fixer,
            defaults.DOCUMENTATION_WRITER: self.documentation_writer,
        }
        if agent_name not in agents:
            raise UnknownAgentError(agent_name)
        return agents[agent_name]

    def get_prompt_settings(self, agent_name: str) -> PromptSettings:
        """Get template selection for a specific agent."""
        prompts = {
            defaults.CODE_REVIEWER: self.prompts.code_reviewer,
            defaults.BUG_FIXER: self.prompts.bug_fixer,
            defaults.DOCUMENTATION_WRITER: self.prompts.documentation_writer,
        }
        if agent_name not in prompts:
            raise UnknownAgentError(agent_name)
        return prompts[agent_name]
