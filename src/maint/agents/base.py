"""Shared behaviour for the maintenance agents."""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

from maint.config.manager import ConfigStore
from maint.errors import GenerationError, TargetFileError
from maint.ledger.models import UsageRecord
from maint.ledger.tracker import UsageLedger
from maint.llm.client import Generation, GenerationClient
from maint.prompts.engine import TemplateEngine
from maint.prompts.variables import Placeholder, VariableBag, detect_language

logger = logging.getLogger(__name__)

SKIP_DISABLED = "disabled"
SKIP_EXCLUDED = "excluded"

_THINK_BLOCK_RE = re.compile(r"<think>.*?</think>", re.DOTALL)
_FENCE_RE = re.compile(r"```[\w+.-]*[ \t]*\n?([\s\S]*?)```")


def clean_generation(raw: str) -> str:
    """Extract the payload from generated text.

    Reasoning blocks are dropped and, when the text contains a fenced block,
    only the first block's content is kept.
    """
    text = _THINK_BLOCK_RE.sub("", raw).strip()
    fence = _FENCE_RE.search(text)
    if fence:
        return fence.group(1).strip()
    return text


@dataclass
class GenerationOutcome:
    """Generated text plus what it cost"""
    generation: Generation
    cost: Decimal = Decimal("0")
    monthly_total: Decimal | None = None
    warnings: list[str] = field(default_factory=list)


class BaseAgent(ABC):
    """Gate, prompt assembly and metered generation shared by all agents."""

    def __init__(
        self,
        config: ConfigStore,
        engine: TemplateEngine,
        client: GenerationClient,
        ledger: UsageLedger | None = None,
        root: Path | str | None = None,
    ):
        self.config = config
        self.engine = engine
        self.client = client
        self.ledger = ledger
        # Relative filenames name files under the project root, not the cwd
        self.root = Path(root) if root is not None else Path.cwd()

    @property
    @abstractmethod
    def agent_name(self) -> str:
        """Configuration key of this agent (e.g. ``bugFixer``)."""
        ...

    @property
    def settings(self) -> Any:
        return self.config.agent(self.agent_name)

    def skip_reason(self, filename: str) -> str | None:
        """Why ``filename`` must not be processed, or None if it may."""
        if not self.config.is_enabled(self.agent_name):
            logger.info("%s is disabled, skipping %s", self.agent_name, filename)
            return SKIP_DISABLED
        if self.config.should_skip(self.agent_name, filename):
            logger.info("%s is excluded for %s", filename, self.agent_name)
            return SKIP_EXCLUDED
        return None

    def resolve_path(self, filename: str) -> Path:
        return self.root / filename

    def read_source(self, filename: str) -> str:
        try:
            return self.resolve_path(filename).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TargetFileError(f"Cannot read {filename}: {e}") from e

    def agent_variables(self) -> dict[Placeholder, Any]:
        """Agent-specific placeholder values taken from its settings."""
        return {}

    def build_variables(self, filename: str, code: str, **extra: Any) -> VariableBag:
        bag = VariableBag(custom=dict(self.config.prompt_settings(self.agent_name).custom_variables))
        bag.set(Placeholder.CODE, code)
        bag.set(Placeholder.FILENAME, filename)
        bag.set(Placeholder.LANGUAGE, detect_language(filename))
        for key, value in self.agent_variables().items():
            bag.set(key, value)
        for key, value in extra.items():
            bag.set(Placeholder(key), value)
        return bag

    @property
    def template_name(self) -> str:
        return self.config.prompt_settings(self.agent_name).template

    def render_prompt(self, variables: VariableBag) -> str:
        return self.engine.get_template(self.agent_name, self.template_name, variables)

    async def generate(self, prompt: str) -> GenerationOutcome:
        """Call the generation service under the global timeout and meter it.

        Raises:
            GenerationError: On service failure or timeout.
        """
        model = self.config.resolve_model(self.agent_name)
        max_tokens = self.config.resolve_max_tokens(self.agent_name)
        timeout = self.config.config.global_.generation_timeout

        try:
            generation = await asyncio.wait_for(
                self.client.generate(model, prompt, max_tokens), timeout=timeout
            )
        except asyncio.TimeoutError as e:
            raise GenerationError(f"Generation timed out after {timeout} seconds") from e

        outcome = GenerationOutcome(generation=generation)
        record = await self._record_usage(model, generation)
        if record is not None:
            outcome.cost = record.cost
            outcome.monthly_total = record.monthly_total
            outcome.warnings.extend(record.warnings)
        return outcome

    async def _record_usage(self, model: str, generation: Generation) -> UsageRecord | None:
        if self.ledger is None:
            return None
        return await self.ledger.record_usage(
            self.agent_name,
            model,
            generation.usage.input_tokens,
            generation.usage.output_tokens,
        )
