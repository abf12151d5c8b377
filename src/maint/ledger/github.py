"""External ledger records kept as GitHub issues."""
import logging
import os
from abc import ABC, abstractmethod

import httpx

from maint.errors import LedgerSyncError
from maint.ledger.report import ALERT_LABELS

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = 15.0


class LedgerSink(ABC):
    """Where human-readable ledger records live.

    ``update`` replaces the whole body, so repeating it is harmless.
    """

    @abstractmethod
    async def create(self, title: str, body: str, labels: list[str]) -> str | None:
        """Create a record and return its id (None if records are disabled)."""
        pass

    @abstractmethod
    async def update(self, record_id: str, body: str) -> None:
        """Replace the body of an existing record."""
        pass

    @abstractmethod
    async def comment(self, thread_id: str, body: str) -> None:
        """Post a comment on a thread (issue or pull request)."""
        pass

    async def aclose(self) -> None:
        pass


class NullLedgerSink(LedgerSink):
    """Sink used when no GitHub credentials are configured."""

    async def create(self, title: str, body: str, labels: list[str]) -> str | None:
        logger.debug("Ledger records disabled, not creating %r", title)
        return None

    async def update(self, record_id: str, body: str) -> None:
        logger.debug("Ledger records disabled, not updating %s", record_id)

    async def comment(self, thread_id: str, body: str) -> None:
        logger.debug("Ledger records disabled, not commenting on %s", thread_id)


class GitHubIssueSink(LedgerSink):
    """Ledger records as issues in one repository, via the REST API."""

    def __init__(
        self,
        token: str,
        repository: str,
        api_url: str = DEFAULT_API_URL,
        assignees: list[str] | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        if "/" not in repository:
            raise ValueError(f"Repository must be 'owner/name', got {repository!r}")
        self.repository = repository
        self.assignees = assignees or []
        self._client = client or httpx.AsyncClient(
            base_url=api_url,
            timeout=REQUEST_TIMEOUT,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    @classmethod
    def from_env(cls) -> LedgerSink:
        """GitHub sink from ``GITHUB_TOKEN``/``GITHUB_REPOSITORY``, else a null sink."""
        token = os.environ.get("GITHUB_TOKEN")
        repository = os.environ.get("GITHUB_REPOSITORY")
        if not token or not repository:
            logger.info("GITHUB_TOKEN or GITHUB_REPOSITORY not set, ledger records disabled")
            return NullLedgerSink()
        owner = os.environ.get("GITHUB_REPOSITORY_OWNER")
        return cls(
            token=token,
            repository=repository,
            api_url=os.environ.get("GITHUB_API_URL", DEFAULT_API_URL),
            assignees=[owner] if owner else None,
        )

    async def _request(self, method: str, path: str, json: dict) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise LedgerSyncError(f"GitHub {method} {path} failed: {e}") from e
        return response

    async def create(self, title: str, body: str, labels: list[str]) -> str | None:
        payload: dict = {"title": title, "body": body, "labels": labels}
        if self.assignees and set(ALERT_LABELS) <= set(labels):
            payload["assignees"] = self.assignees
        response = await self._request("POST", f"/repos/{self.repository}/issues", payload)
        # A proxy or misconfigured API URL can answer 2xx with something else
        try:
            number = str(response.json()["number"])
        except (ValueError, KeyError, TypeError) as e:
            raise LedgerSyncError(
                f"GitHub returned no issue number for {title!r}: {response.text[:200]!r}"
            ) from e
        logger.info("Created issue #%s: %s", number, title)
        return number

    async def update(self, record_id: str, body: str) -> None:
        await self._request(
            "PATCH", f"/repos/{self.repository}/issues/{record_id}", {"body": body}
        )

    async def comment(self, thread_id: str, body: str) -> None:
        await self._request(
            "POST", f"/repos/{self.repository}/issues/{thread_id}/comments", {"body": body}
        )

    async def aclose(self) -> None:
        await self._client.aclose()
