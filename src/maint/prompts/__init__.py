"""Prompt templates and rendering."""

from maint.prompts.engine import DEFAULT_TEMPLATE, TemplateEngine
from maint.prompts.variables import Placeholder, VariableBag, detect_language

__all__ = ["DEFAULT_TEMPLATE", "Placeholder", "TemplateEngine", "VariableBag", "detect_language"]
