"""Issue tracker integration layer for BugRelay.

Components:
- IssueTrackerClient: Abstract interface (one operation, create_issue)
- GitHubIssueClient: GitHub REST API client for production
- MockIssueTrackerClient: In-memory client for development/testing

Usage:
    >>> client = get_tracker_client(get_settings())
    >>> issue = await client.create_issue(draft)
"""

import structlog

from ..core.config import Settings
from .github import GitHubIssueClient
from .tracker import IssueTrackerClient
from .tracker_mock import MockIssueTrackerClient

logger = structlog.get_logger(__name__)

__all__ = [
    "GitHubIssueClient",
    "IssueTrackerClient",
    "MockIssueTrackerClient",
    "get_tracker_client",
]


def get_tracker_client(settings: Settings) -> IssueTrackerClient:
    """Factory function to get the configured tracker client.

    Unlike a missing-key fallback, an unconfigured GitHub backend still
    returns GitHubIssueClient so submissions fail loudly with a 500.
    The mock is only used when ISSUE_TRACKER=mock.

    Args:
        settings: Application settings

    Returns:
        IssueTrackerClient: GitHub or mock client instance
    """
    if settings.ISSUE_TRACKER == "mock":
        logger.info("tracker_client_selected", tracker="mock")
        return MockIssueTrackerClient()

    logger.info(
        "tracker_client_selected",
        tracker="github",
        repo=settings.GITHUB_REPO,
        configured=settings.github_configured,
    )
    return GitHubIssueClient(
        token=settings.GITHUB_TOKEN,
        repo=settings.GITHUB_REPO,
        api_url=settings.GITHUB_API_URL,
    )
