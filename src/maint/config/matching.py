"""Exclude-pattern matching for agent file filters."""

import re
from functools import lru_cache


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate a glob pattern into an anchored regular expression.

    ``*`` matches any run of characters, path separators included, so
    ``**`` behaves the same as ``*``. ``?`` matches exactly one character.
    Everything else is literal.
    """
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def normalize_path(filename: str) -> str:
    """Normalize a filename for matching (forward slashes, no leading ``./``)."""
    path = filename.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def matches_any(filename: str, patterns: list[str]) -> bool:
    """Check if ``filename`` matches any of the glob ``patterns``."""
    path = normalize_path(filename)
    return any(compile_pattern(pattern).fullmatch(path) for pattern in patterns)
