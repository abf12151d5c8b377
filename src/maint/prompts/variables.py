"""Variable bags used to render prompt templates."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Any

logger = logging.getLogger(__name__)


class Placeholder(str, Enum):
    """Placeholder keys the built-in agents know how to fill."""

    CODE = "code"
    FILENAME = "filename"
    LANGUAGE = "language"
    ERROR_MESSAGE = "errorMessage"
    SAFETY_LEVEL = "safetyLevel"
    FOCUS_AREAS = "focusAreas"
    SEVERITY = "severity"
    TEAM_STANDARDS = "teamStandards"
    VOICE_AND_TONE = "voiceAndTone"
    STYLE = "style"
    INCLUDE_EXAMPLES = "includeExamples"
    EXISTING_DOCS = "existingDocs"


AGENT_PLACEHOLDERS: dict[str, tuple[Placeholder, ...]] = {
    "codeReviewer": (
        Placeholder.CODE,
        Placeholder.FILENAME,
        Placeholder.LANGUAGE,
        Placeholder.FOCUS_AREAS,
        Placeholder.SEVERITY,
        Placeholder.TEAM_STANDARDS,
    ),
    "bugFixer": (
        Placeholder.CODE,
        Placeholder.FILENAME,
        Placeholder.LANGUAGE,
        Placeholder.ERROR_MESSAGE,
        Placeholder.SAFETY_LEVEL,
    ),
    "documentationWriter": (
        Placeholder.CODE,
        Placeholder.FILENAME,
        Placeholder.LANGUAGE,
        Placeholder.VOICE_AND_TONE,
        Placeholder.STYLE,
        Placeholder.INCLUDE_EXAMPLES,
        Placeholder.EXISTING_DOCS,
    ),
}

LANGUAGE_MAP = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".go": "go",
    ".rb": "ruby",
    ".java": "java",
    ".rs": "rust",
}
DEFAULT_LANGUAGE = "javascript"

# Used by the template tester to preview templates without real input
SAMPLE_VARIABLES: dict[str, Any] = {
    "code": 'function test() { return "example"; }',
    "filename": "test.js",
    "language": "javascript",
    "focusAreas": ["bugs", "security", "performance"],
    "severity": "medium",
    "teamStandards": {"maxFunctionLength": 50},
    "errorMessage": "TypeError: Cannot read property of undefined",
    "safetyLevel": "medium",
    "voiceAndTone": "professional",
    "style": "comprehensive",
    "includeExamples": True,
    "existingDocs": "",
}


def detect_language(filename: str) -> str:
    """Guess the source language from the file extension."""
    return LANGUAGE_MAP.get(PurePath(filename).suffix.lower(), DEFAULT_LANGUAGE)


def stringify(value: Any) -> str:
    """Render one variable value as template text.

    Lists and tuples are comma-joined, mappings become indented JSON,
    everything else uses ``str()``.
    """
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(dict(value), indent=2, default=str)
    return str(value)


@dataclass
class VariableBag:
    """Known placeholder values plus free-form custom variables.

    Custom variables are applied last, so they can override known values.
    """

    values: dict[Placeholder, Any] = field(default_factory=dict)
    custom: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        custom: Mapping[str, Any] | None = None,
    ) -> "VariableBag":
        """Split a plain mapping into known placeholders and extras.

        Keys that are neither known placeholders nor declared custom variables
        are kept (as custom) but logged, since no built-in template uses them.
        """
        known_keys = {p.value for p in Placeholder}
        bag = cls(custom=dict(custom or {}))
        for key, value in mapping.items():
            if key in known_keys:
                bag.values[Placeholder(key)] = value
            else:
                if key not in bag.custom:
                    logger.warning("Unknown template variable %r", key)
                bag.custom.setdefault(key, value)
        return bag

    def set(self, key: Placeholder, value: Any) -> "VariableBag":
        self.values[key] = value
        return self

    def as_mapping(self) -> dict[str, Any]:
        """Flatten into the name -> value mapping the renderer consumes."""
        mapping: dict[str, Any] = {key.value: value for key, value in self.values.items()}
        mapping.update(self.custom)
        return mapping
