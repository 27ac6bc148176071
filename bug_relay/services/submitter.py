"""Bug report submission service.

Validates an inbound payload, renders it into an issue draft, files it
through an IssueTrackerClient and maps the outcome to a SubmissionResult
with its HTTP status.
"""

from dataclasses import dataclass
from typing import Any

import structlog

from ..core.config import Settings
from ..core.exceptions import ReportValidationError, UpstreamError
from ..integrations.tracker import IssueTrackerClient
from ..models.bug_report import BugReport, CreatedIssue, IssueDraft, SubmissionResult
from .formatter import build_issue_draft

logger = structlog.get_logger(__name__)

GENERIC_FAILURE = "Failed to submit bug report"


@dataclass(frozen=True)
class SubmissionOutcome:
    """HTTP status paired with the response body."""

    status_code: int
    result: SubmissionResult


class BugReportSubmitter:
    """Turns bug report payloads into tracker issues.

    Settings and tracker client are injected so tests can pass fakes.
    Holds no per-request state; one instance serves every request.

    Example:
        >>> submitter = BugReportSubmitter(settings, MockIssueTrackerClient())
        >>> outcome = await submitter.handle({"email": "a@b.com", ...})
        >>> outcome.status_code
        200
    """

    def __init__(self, settings: Settings, client: IssueTrackerClient):
        self.settings = settings
        self.client = client

    def draft(self, report: BugReport) -> IssueDraft:
        """Render the issue draft using the configured glyphs and footer."""
        return build_issue_draft(
            report,
            glyphs=self.settings.PRIORITY_GLYPHS,
            default_glyph=self.settings.DEFAULT_PRIORITY_GLYPH,
            source=self.settings.REPORT_SOURCE,
        )

    async def submit(self, report: BugReport) -> CreatedIssue:
        """File a validated report. Exactly one tracker call, never retried.

        Raises:
            UpstreamError: If the tracker call fails
        """
        draft = self.draft(report)
        issue = await self.client.create_issue(draft)

        logger.info(
            "bug_report_submitted",
            issue_number=issue.number,
            priority=report.priority,
            labels=draft.labels,
        )
        return issue

    async def handle(self, payload: Any) -> SubmissionOutcome:
        """Validate, submit and map any error to a normalized response.

        Never raises.

        Args:
            payload: Decoded JSON request body

        Returns:
            SubmissionOutcome: 200, 400 or 500 with the matching result
        """
        try:
            report = BugReport.from_payload(payload)
            issue = await self.submit(report)

        except ReportValidationError as exc:
            logger.warning("bug_report_rejected", reason=exc.message, fields=exc.fields)
            return SubmissionOutcome(400, SubmissionResult.failed(exc.message))

        except UpstreamError as exc:
            logger.error(
                "bug_report_upstream_failed",
                error=exc.message,
                upstream_status=exc.status_code,
            )
            return SubmissionOutcome(500, SubmissionResult.failed(exc.message))

        except Exception as exc:
            logger.error(
                "bug_report_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            return SubmissionOutcome(500, SubmissionResult.failed(self.unexpected_error_message(exc)))

        return SubmissionOutcome(200, SubmissionResult.succeeded(issue))

    def unexpected_error_message(self, exc: Exception) -> str:
        # In production, don't expose internal error details
        if self.settings.DEBUG and str(exc):
            return str(exc)
        return GENERIC_FAILURE
