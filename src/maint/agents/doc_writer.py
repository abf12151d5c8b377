"""Documentation writing agent."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path, PurePosixPath
from typing import Any

from maint.agents.base import BaseAgent
from maint.config.defaults import DOCUMENTATION_WRITER
from maint.errors import GenerationError
from maint.fileio import atomic_write_text
from maint.prompts.variables import Placeholder

logger = logging.getLogger(__name__)

README_PATH = "README.md"
README_SKELETON = "# Project Documentation\n"
INDEX_HEADING = "## Documentation"
EXISTING_DOCS_PREVIEW = 500


@dataclass
class DocsResult:
    """Outcome of documenting one file"""
    filename: str
    success: bool = False
    doc_path: Path | None = None
    documentation: str = ""
    readme_updated: bool = False
    skipped: bool = False
    reason: str | None = None
    error: str | None = None
    cost: Decimal = Decimal("0")
    warnings: list[str] = field(default_factory=list)


def add_index_entry(readme: str, link: str) -> str:
    """Add ``link`` to the Documentation section, creating it if needed."""
    lines = readme.splitlines()
    if link in lines:
        return readme

    try:
        start = lines.index(INDEX_HEADING)
    except ValueError:
        while lines and not lines[-1].strip():
            lines.pop()
        lines += ["", INDEX_HEADING, "", link]
        return "\n".join(lines) + "\n"

    # Insert after the last non-blank line of the section
    end = start + 1
    insert_at = start + 1
    while end < len(lines) and not lines[end].startswith("## "):
        if lines[end].strip():
            insert_at = end + 1
        end += 1
    if insert_at == start + 1:
        lines[insert_at:insert_at] = ["", link]
    else:
        lines.insert(insert_at, link)
    return "\n".join(lines) + "\n"


class DocumentationWriter(BaseAgent):
    """Generates Markdown documentation for a source file."""

    @property
    def agent_name(self) -> str:
        return DOCUMENTATION_WRITER

    def agent_variables(self) -> dict[Placeholder, Any]:
        settings = self.settings
        return {
            Placeholder.VOICE_AND_TONE: settings.voice_and_tone,
            Placeholder.STYLE: settings.style,
            Placeholder.INCLUDE_EXAMPLES: "Yes" if settings.include_examples else "No",
        }

    def doc_relpath(self, filename: str) -> PurePosixPath:
        """``src/api/users.js`` -> ``docs/src/api/users.md`` (relative to root)."""
        source = PurePosixPath(Path(filename).as_posix().removeprefix("./"))
        return PurePosixPath(self.settings.docs_dir) / source.with_suffix(".md")

    def read_existing_docs(self, doc_path: Path) -> str:
        try:
            existing = doc_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        preview = existing[:EXISTING_DOCS_PREVIEW]
        if len(existing) > EXISTING_DOCS_PREVIEW:
            preview += "..."
        return f"\n**Existing documentation (update it to match the code):**\n{preview}\n"

    async def generate_docs(self, filename: str) -> DocsResult:
        """Write documentation for ``filename`` under the docs directory.

        Raises:
            TargetFileError: If the file cannot be read.
        """
        reason = self.skip_reason(filename)
        if reason:
            return DocsResult(filename=filename, skipped=True, reason=reason)

        code = self.read_source(filename)
        relpath = self.doc_relpath(filename)
        doc_path = self.root / relpath

        logger.info("Generating %s docs for %s", self.settings.style, filename)
        variables = self.build_variables(
            filename, code, existingDocs=self.read_existing_docs(doc_path)
        )

        try:
            outcome = await self.generate(self.render_prompt(variables))
        except GenerationError as e:
            logger.error("Documentation for %s failed: %s", filename, e)
            return DocsResult(filename=filename, error=str(e))

        documentation = outcome.generation.text.strip() + "\n"
        doc_path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_text(doc_path, documentation)
        logger.info("Wrote %s", doc_path)

        result = DocsResult(
            filename=filename,
            success=True,
            doc_path=doc_path,
            documentation=documentation,
            cost=outcome.cost,
            warnings=outcome.warnings,
        )
        if self.settings.generate_readme:
            self.update_readme(filename, relpath)
            result.readme_updated = True
        return result

    def update_readme(self, filename: str, relpath: PurePosixPath) -> None:
        readme_path = self.root / README_PATH
        try:
            readme = readme_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            readme = README_SKELETON
        updated = add_index_entry(readme, f"- [{filename}]({relpath})")
        if updated != readme:
            atomic_write_text(readme_path, updated)
            logger.info("Updated %s index", README_PATH)
