"""Code review agent."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from maint.agents.base import BaseAgent
from maint.config.defaults import CODE_REVIEWER
from maint.errors import GenerationError
from maint.prompts.variables import Placeholder

logger = logging.getLogger(__name__)


@dataclass
class ReviewResult:
    """Outcome of reviewing one file"""
    filename: str
    success: bool = False
    analysis: str = ""
    template: str | None = None
    timestamp: datetime | None = None
    skipped: bool = False
    reason: str | None = None
    error: str | None = None
    cost: Decimal = Decimal("0")
    warnings: list[str] = field(default_factory=list)


class CodeReviewer(BaseAgent):
    """Reviews a source file with the configured review template."""

    @property
    def agent_name(self) -> str:
        return CODE_REVIEWER

    def agent_variables(self) -> dict[Placeholder, Any]:
        settings = self.settings
        return {
            Placeholder.FOCUS_AREAS: settings.focus_areas,
            Placeholder.SEVERITY: settings.severity,
            Placeholder.TEAM_STANDARDS: settings.team_standards,
        }

    async def review(self, filename: str) -> ReviewResult:
        """Review ``filename``.

        Raises:
            TargetFileError: If the file cannot be read.
        """
        reason = self.skip_reason(filename)
        if reason:
            return ReviewResult(filename=filename, skipped=True, reason=reason)

        code = self.read_source(filename)
        logger.info("Reviewing %s with %r template", filename, self.template_name)
        prompt = self.render_prompt(self.build_variables(filename, code))

        try:
            outcome = await self.generate(prompt)
        except GenerationError as e:
            logger.error("Review of %s failed: %s", filename, e)
            return ReviewResult(filename=filename, template=self.template_name, error=str(e))

        return ReviewResult(
            filename=filename,
            success=True,
            analysis=outcome.generation.text.strip(),
            template=self.template_name,
            timestamp=datetime.now(timezone.utc),
            cost=outcome.cost,
            warnings=outcome.warnings,
        )
