"""Failure sources: where the CI runner learns which files to fix."""
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Jest summary line: "FAIL src/cart.test.js"
JEST_FAIL_RE = re.compile(r"^\s*FAIL\s+(\S+\.[cm]?[jt]sx?)\b", re.MULTILINE)
# Node stack frame: "at total (/repo/src/cart.js:12:5)" or "at /repo/src/cart.js:12:5"
STACK_FRAME_RE = re.compile(r"at (?:[\w.<>$\[\] ]+ \()?([^()\s]+\.[cm]?[jt]sx?):\d+:\d+\)?")
# pytest short summary: "FAILED tests/test_cart.py::test_total - AssertionError"
PYTEST_FAILED_RE = re.compile(r"^FAILED\s+([^\s:]+\.py)::(\S+)", re.MULTILINE)

IGNORED_FRAME_MARKERS = (".test.", ".spec.", "node_modules", "internal/")
FALLBACK_FILES = ("index.js", "cart.js", "app.js", "main.js", "server.js")
MAX_OUTPUT_CHARS = 8000

HINTS = (
    (
        lambda text: "is not iterable" in text,
        "Guard against null or undefined collections before iterating over them",
    ),
    (
        lambda text: "Cannot read properties of undefined" in text,
        "Check that the object exists before accessing its properties",
    ),
    (
        lambda text: "Expected:" in text and "Received:" in text,
        "Compare the expected and received values; floating point results may need rounding",
    ),
)


@dataclass(frozen=True)
class Failure:
    """A file to fix and the error context to fix it with"""
    file: str
    error: str


class FailureSource(ABC):
    """Turns a failed validation run into files to fix."""

    @abstractmethod
    def collect(self, output: str) -> list[Failure]:
        pass


class LocalFailureSource(FailureSource):
    """Failures named explicitly by the caller; test output is ignored."""

    def __init__(self, failures: list[Failure]):
        self.failures = list(failures)

    def collect(self, output: str) -> list[Failure]:
        return list(self.failures)


def _relative(path: str, root: Path) -> str:
    """Stack frames carry absolute paths; fixes are addressed relative to root."""
    candidate = Path(path)
    if candidate.is_absolute():
        try:
            return candidate.resolve().relative_to(root).as_posix()
        except ValueError:
            return candidate.as_posix()
    return candidate.as_posix().removeprefix("./")


def hints_for(output: str) -> list[str]:
    return [hint for matches, hint in HINTS if matches(output)]


class TestOutputFailureSource(FailureSource):
    """Parses Jest and pytest output.

    Source files from stack frames are preferred over the failing test files
    themselves; when neither appears, the first existing common entry point is
    used. Every failure carries the (truncated) test output plus hints for
    well-known error shapes.
    """

    __test__ = False

    def __init__(self, root: Path | str | None = None):
        self.root = (Path(root) if root is not None else Path.cwd()).resolve()

    def source_files(self, output: str) -> list[str]:
        """Files worth fixing, most specific first, without duplicates."""
        found: list[str] = []

        def add(path: str) -> None:
            relative = _relative(path, self.root)
            if relative not in found:
                found.append(relative)

        for match in STACK_FRAME_RE.finditer(output):
            path = match.group(1)
            if not any(marker in path for marker in IGNORED_FRAME_MARKERS):
                add(path)

        if not found:
            for match in JEST_FAIL_RE.finditer(output):
                add(match.group(1))
            for match in PYTEST_FAILED_RE.finditer(output):
                add(match.group(1))

        if not found:
            for name in FALLBACK_FILES:
                if (self.root / name).is_file():
                    logger.debug("No failing file found in output, falling back to %s", name)
                    add(name)
                    break

        return found

    def error_context(self, output: str) -> str:
        if len(output) > MAX_OUTPUT_CHARS:
            output = "...\n" + output[-MAX_OUTPUT_CHARS:]
        sections = [f"Test failures:\n\n{output.strip()}"]
        sections += [f"Hint: {hint}" for hint in hints_for(output)]
        return "\n\n".join(sections)

    def collect(self, output: str) -> list[Failure]:
        files = self.source_files(output)
        if not files:
            logger.warning("Could not locate any failing file in the test output")
            return []
        context = self.error_context(output)
        return [Failure(file=path, error=context) for path in files]
