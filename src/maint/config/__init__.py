"""Configuration management."""

from maint.config.manager import ConfigStore, deep_merge, load_config
from maint.config.schema import AgentConfig, MaintConfig

__all__ = ["AgentConfig", "ConfigStore", "MaintConfig", "deep_merge", "load_config"]
