"""Result records for fix and documentation runs."""
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from maint.agents.doc_writer import DocsResult


@dataclass
class FixAttempt:
    """One pass of generate, apply, validate"""
    number: int
    generated: bool = False
    passed: bool = False
    error: str | None = None
    cost: Decimal = Decimal("0")


@dataclass(frozen=True)
class FixResult:
    """Outcome of fixing one file"""
    success: bool
    attempts: int = 0
    fixed_code: str | None = None
    error: str | None = None
    skipped: bool = False
    reason: str | None = None
    committed: bool = False
    cost: Decimal = Decimal("0")
    warnings: tuple[str, ...] = ()
    attempt_log: tuple[FixAttempt, ...] = ()

    @classmethod
    def skip(cls, reason: str) -> "FixResult":
        return cls(success=False, skipped=True, reason=reason)


@dataclass
class FileFixReport:
    """CI summary line for one file"""
    file: str
    error: str
    fixed: bool
    cost: Decimal = Decimal("0")


@dataclass
class CIRunReport:
    """Outcome of a CI fix run"""
    tests_passed: bool
    files: list[FileFixReport] = field(default_factory=list)
    committed: bool = False
    pushed: bool = False
    commented: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def fixed_count(self) -> int:
        return sum(1 for item in self.files if item.fixed)

    @property
    def total_cost(self) -> Decimal:
        return sum((item.cost for item in self.files), Decimal("0"))


@dataclass
class DocsRunReport:
    """Outcome of a CI documentation run"""
    changed: list[str] = field(default_factory=list)
    results: list[DocsResult] = field(default_factory=list)
    overview_path: Path | None = None
    committed: bool = False
    pushed: bool = False
    commented: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def documented(self) -> list[DocsResult]:
        return [result for result in self.results if result.success]

    @property
    def failed(self) -> list[DocsResult]:
        return [result for result in self.results if not result.success and not result.skipped]

    @property
    def total_cost(self) -> Decimal:
        return sum((result.cost for result in self.results), Decimal("0"))
