"""Fix and documentation orchestration for single files and CI runs."""
from maint.orchestration.ci import CIFixRunner, group_failures, render_summary
from maint.orchestration.docs_ci import CIDocsRunner, render_api_overview, render_docs_summary
from maint.orchestration.fixer import ALL_ATTEMPTS_FAILED, FixOrchestrator
from maint.orchestration.models import (
    CIRunReport,
    DocsRunReport,
    FileFixReport,
    FixAttempt,
    FixResult,
)

__all__ = [
    "ALL_ATTEMPTS_FAILED",
    "CIDocsRunner",
    "CIFixRunner",
    "CIRunReport",
    "DocsRunReport",
    "FileFixReport",
    "FixAttempt",
    "FixOrchestrator",
    "FixResult",
    "group_failures",
    "render_api_overview",
    "render_docs_summary",
    "render_summary",
]
