"""GitHub REST API issue client.

Creates issues with a single POST to /repos/{repo}/issues.

Reference: https://docs.github.com/en/rest/issues/issues#create-an-issue
"""

from typing import Any

import httpx
import structlog

from ..core.exceptions import UpstreamError
from ..models.bug_report import CreatedIssue, IssueDraft
from .tracker import IssueTrackerClient

logger = structlog.get_logger(__name__)

GITHUB_ACCEPT = "application/vnd.github.v3+json"


class GitHubIssueClient(IssueTrackerClient):
    """GitHub issue client using httpx.

    Authentication:
        Bearer token in the Authorization header.

    A missing token or repository does not fail construction; it fails
    each create_issue call instead, so the service keeps answering
    preflight and validation requests.

    Example:
        >>> async with GitHubIssueClient(token="ghp_xxx", repo="acme/app") as client:
        ...     issue = await client.create_issue(draft)
        >>> issue.number
        42
    """

    def __init__(
        self,
        token: str | None,
        repo: str | None,
        api_url: str = "https://api.github.com",
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the GitHub client.

        Args:
            token: GitHub token with write access to repo
            repo: Repository identifier (owner/name)
            api_url: REST API base URL
            http_client: Preconfigured client (tests pass one with a mock transport)
        """
        self.token = token
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient()

    @property
    def issues_url(self) -> str:
        return f"{self.api_url}/repos/{self.repo}/issues"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": GITHUB_ACCEPT,
            "Content-Type": "application/json",
        }

    async def create_issue(self, draft: IssueDraft) -> CreatedIssue:
        """Create an issue in the configured repository.

        Args:
            draft: Issue title, body and labels

        Returns:
            CreatedIssue: Issue number and html_url

        Raises:
            UpstreamError: If the integration is not configured, the request
                cannot complete, or GitHub answers with a non-2xx status
        """
        if not self.token or not self.repo:
            logger.error(
                "github_not_configured",
                has_token=bool(self.token),
                has_repo=bool(self.repo),
            )
            raise UpstreamError("GitHub integration is not configured")

        logger.info("github_issue_creating", repo=self.repo, labels=draft.labels)

        try:
            response = await self.client.post(
                self.issues_url,
                headers=self._headers(),
                json=draft.model_dump(),
            )
        except httpx.HTTPError as exc:
            logger.error(
                "github_request_failed",
                repo=self.repo,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise UpstreamError(f"GitHub API request failed: {exc}") from exc

        if response.is_error:
            payload = _json_or_none(response)
            logger.error(
                "github_api_error",
                repo=self.repo,
                status_code=response.status_code,
                response=payload,
            )
            raise UpstreamError(
                f"GitHub API error: {_error_message(response, payload)}",
                status_code=response.status_code,
                payload=payload,
            )

        data = _json_or_none(response)
        if not isinstance(data, dict) or "number" not in data or "html_url" not in data:
            raise UpstreamError(
                "GitHub API returned an unexpected response",
                status_code=response.status_code,
                payload=data,
            )

        issue = CreatedIssue(number=data["number"], url=data["html_url"])
        logger.info("github_issue_created", repo=self.repo, issue_number=issue.number)
        return issue

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response, payload: Any) -> str:
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"
