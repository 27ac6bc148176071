"""Mock issue tracker client for development and testing.

Issues are stored in memory and lost when the process ends.
"""

import structlog

from ..models.bug_report import CreatedIssue, IssueDraft
from .tracker import IssueTrackerClient

logger = structlog.get_logger(__name__)


class MockIssueTrackerClient(IssueTrackerClient):
    """In-memory tracker with auto-incrementing issue numbers.

    Every call creates a new issue, identical drafts included.

    Example:
        >>> client = MockIssueTrackerClient()
        >>> issue = await client.create_issue(draft)
        >>> issue.number
        1
    """

    def __init__(self, base_url: str = "https://tracker.invalid/issues"):
        self.base_url = base_url.rstrip("/")
        self.issues: dict[int, IssueDraft] = {}
        self._issue_counter = 0

    async def create_issue(self, draft: IssueDraft) -> CreatedIssue:
        self._issue_counter += 1
        number = self._issue_counter
        self.issues[number] = draft

        logger.info("mock_issue_created", issue_number=number, title=draft.title)
        return CreatedIssue(number=number, url=f"{self.base_url}/{number}")
