"""Maintenance agents."""
from maint.agents.base import BaseAgent, clean_generation
from maint.agents.doc_writer import DocsResult, DocumentationWriter
from maint.agents.reviewer import CodeReviewer, ReviewResult

__all__ = [
    "BaseAgent",
    "CodeReviewer",
    "DocsResult",
    "DocumentationWriter",
    "ReviewResult",
    "clean_generation",
]
