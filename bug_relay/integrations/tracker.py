"""Issue tracker abstract interface.

Defines the contract for tracker clients (GitHub and mock).
"""

from abc import ABC, abstractmethod

from ..models.bug_report import CreatedIssue, IssueDraft


class IssueTrackerClient(ABC):
    """Abstract base class for issue tracker clients.

    The submitter only ever creates issues, so that is the whole contract.
    Both GitHubIssueClient and MockIssueTrackerClient implement it, which
    lets tests and local development swap the real API out.
    """

    @abstractmethod
    async def create_issue(self, draft: IssueDraft) -> CreatedIssue:
        """Create a new issue on the tracker.

        Args:
            draft: Title, Markdown body and labels for the issue

        Returns:
            CreatedIssue: Number and URL of the created issue

        Raises:
            UpstreamError: If the tracker call fails or is not configured
        """

    async def close(self) -> None:
        """Release any network resources held by the client."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
