"""Configuration store for loading, merging, and querying agent configs."""

import json
import logging
import os
from pathlib import Path
from typing import Any

import toml
from pydantic import ValidationError

from maint.config import defaults
from maint.config.matching import matches_any
from maint.config.schema import AgentConfig, MaintConfig, PromptSettings
from maint.errors import ConfigUnavailableError

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """Get the configuration file path (``MAINT_CONFIG`` overrides the default)."""
    return Path(os.environ.get(defaults.CONFIG_PATH_ENV, defaults.DEFAULT_CONFIG_PATH))


def deep_merge(user: dict[str, Any], base: dict[str, Any]) -> dict[str, Any]:
    """Deep merge ``user`` over ``base``.

    Nested dictionaries merge recursively. A key that is missing from ``user``,
    or set to None there, keeps the value from ``base``. Lists are combined,
    user items first and without duplicates, so adding one exclude pattern
    keeps the default ones. Other user values replace the base value.
    """
    result = dict(base)
    for key, value in user.items():
        if value is None and key in base:
            continue
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(value, result[key])
        elif isinstance(value, list) and isinstance(result.get(key), list):
            result[key] = _merge_lists(value, result[key])
        else:
            result[key] = value
    return result


def _merge_lists(user: list[Any], base: list[Any]) -> list[Any]:
    merged: list[Any] = []
    for item in [*user, *base]:
        if item not in merged:
            merged.append(item)
    return merged


def _read_config_file(path: Path) -> dict[str, Any]:
    """Parse a JSON or TOML configuration file into a dictionary."""
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".toml":
        data = toml.loads(text)
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be an object, got {type(data).__name__}")
    return data


def _write_config_file(path: Path, data: dict[str, Any]) -> None:
    """Write a configuration dictionary as JSON or TOML."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".toml":
        path.write_text(toml.dumps(data), encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def load_config(path: Path | str) -> MaintConfig:
    """Load configuration from ``path``, merged over the built-in defaults.

    Any read, parse or validation problem is recovered by writing the default
    configuration to ``path`` and returning it.

    Raises:
        ConfigUnavailableError: If the defaults cannot be written either.
    """
    config_path = Path(path)
    default_dict = MaintConfig.default().to_dict()

    try:
        user_config = _read_config_file(config_path)
        merged = deep_merge(user_config, default_dict)
        config = MaintConfig.model_validate(merged)
        logger.debug("Loaded configuration from %s", config_path)
        return config
    except (OSError, ValueError, toml.TomlDecodeError, ValidationError) as e:
        logger.info("No usable config at %s (%s), creating defaults", config_path, e)

    config = MaintConfig.default()
    try:
        _write_config_file(config_path, default_dict)
    except OSError as e:
        raise ConfigUnavailableError(
            f"Cannot read {config_path} and cannot write default configuration: {e}"
        ) from e
    logger.info("Created default configuration at %s", config_path)
    return config


class ConfigStore:
    """Holds the active configuration and answers agent queries."""

    def __init__(self, config: MaintConfig | None = None, path: Path | str | None = None):
        self.config = config or MaintConfig.default()
        self.path = Path(path) if path is not None else get_config_path()

    @classmethod
    def load(cls, path: Path | str | None = None) -> "ConfigStore":
        """Load the configuration file (see :func:`load_config`)."""
        config_path = Path(path) if path is not None else get_config_path()
        return cls(load_config(config_path), config_path)

    @staticmethod
    def merge(user: dict[str, Any], base: dict[str, Any]) -> dict[str, Any]:
        """Deep merge user values over defaults."""
        return deep_merge(user, base)

    def save(self) -> None:
        """Persist the active configuration."""
        _write_config_file(self.path, self.config.to_dict())
        logger.info("Configuration saved to %s", self.path)

    # --- agent queries ---

    def agent(self, agent_name: str) -> AgentConfig:
        """Get settings for ``agent_name`` (raises UnknownAgentError)."""
        return self.config.get_agent_config(agent_name)

    def prompt_settings(self, agent_name: str) -> PromptSettings:
        """Get template selection for ``agent_name``."""
        return self.config.get_prompt_settings(agent_name)

    def is_enabled(self, agent_name: str) -> bool:
        """An agent runs only if both it and the global switch are enabled."""
        return self.agent(agent_name).enabled and self.config.global_.enabled

    def should_skip(self, agent_name: str, filename: str) -> bool:
        """Check if ``filename`` matches one of the agent's exclude patterns."""
        return matches_any(filename, self.agent(agent_name).exclude_patterns)

    def resolve_model(self, agent_name: str) -> str:
        """Agent model, else the global model."""
        return self.agent(agent_name).model or self.config.global_.model

    def resolve_max_tokens(self, agent_name: str) -> int:
        """Agent token limit, else the global limit."""
        return self.agent(agent_name).max_tokens or self.config.global_.max_tokens

    def monthly_budget(self) -> float:
        """Monthly budget, ``MAINT_MONTHLY_BUDGET`` taking precedence."""
        override = os.environ.get(defaults.MONTHLY_BUDGET_ENV)
        if override:
            try:
                return float(override)
            except ValueError:
                logger.warning(
                    "Ignoring invalid %s=%r", defaults.MONTHLY_BUDGET_ENV, override
                )
        return self.config.cost_controls.monthly_budget

    # --- dotted-path access ---

    def get_value(self, key_path: str, default: Any = None) -> Any:
        """Get a configuration value by dot-separated path.

        Example: get_value("bugFixer.maxAttemptsPerFile")
        """
        current: Any = self.config.to_dict()
        for key in key_path.split("."):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def set_value(self, key_path: str, value: Any) -> None:
        """Set a configuration value by dot-separated path and save.

        Example: set_value("global.model", "gpt-4o")
        """
        config_dict = self.config.to_dict()

        keys = key_path.split(".")
        current = config_dict
        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[keys[-1]] = value

        self.config = MaintConfig.model_validate(config_dict)
        self.save()
