"""Changed-file discovery: which API files a documentation run covers."""
import logging
from pathlib import Path, PurePosixPath

from maint.execution.process import run_command

logger = logging.getLogger(__name__)

API_DIRS = ("server/api", "api", "routes", "endpoints")
API_SUFFIXES = (".js", ".ts")


def is_api_file(path: str) -> bool:
    """True for ``.js``/``.ts`` files under an api, routes or endpoints directory."""
    posix = "/" + PurePosixPath(path).as_posix().removeprefix("./")
    return posix.endswith(API_SUFFIXES) and any(f"/{d}/" in posix for d in API_DIRS)


def endpoint_name(path: str) -> str:
    """``server/api/auth/login.js`` -> ``auth/login``."""
    name = str(PurePosixPath(path).with_suffix("")).removeprefix("./")
    for prefix in API_DIRS:
        if name.startswith(prefix + "/"):
            return name[len(prefix) + 1:]
    return name


class ChangedFileSource:
    """API files touched between two revisions.

    When ``git diff`` is unavailable (shallow clone, no parent commit) every
    API file under the root is returned instead.
    """

    def __init__(
        self,
        root: Path | str | None = None,
        base: str = "HEAD~1",
        head: str = "HEAD",
        timeout: float = 60.0,
    ):
        self.root = Path(root) if root is not None else Path.cwd()
        self.base = base
        self.head = head
        self.timeout = timeout

    async def files(self) -> list[str]:
        result = await run_command(
            ["git", "diff", "--name-only", self.base, self.head],
            cwd=self.root,
            timeout=self.timeout,
        )
        if not result.success:
            logger.warning(
                "git diff %s %s failed (%s), scanning all API files",
                self.base, self.head, (result.stderr or result.stdout).strip(),
            )
            return self.scan()

        files = []
        for line in result.stdout.splitlines():
            path = line.strip()
            if path and is_api_file(path) and (self.root / path).is_file():
                files.append(path)
        logger.info("%s changed API file(s) between %s and %s", len(files), self.base, self.head)
        return files

    def scan(self) -> list[str]:
        """Every API file under the root, in path order."""
        found: list[str] = []
        for directory in API_DIRS:
            base = self.root / directory
            if not base.is_dir():
                continue
            for path in sorted(base.rglob("*")):
                relative = path.relative_to(self.root).as_posix()
                if path.is_file() and path.suffix in API_SUFFIXES and relative not in found:
                    found.append(relative)
        return found
