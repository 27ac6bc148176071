"""Hosting-neutral request dispatch for the submit-bug endpoint.

Both the ASGI route and the serverless handler translate their native
request into (method, body), call dispatch_request, and translate the
DispatchResponse back. Method handling, JSON decoding and CORS headers
live here only.
"""

import json
from dataclasses import dataclass, field
from typing import Any

import structlog

from ..models.bug_report import SubmissionResult
from ..services.submitter import BugReportSubmitter, SubmissionOutcome

logger = structlog.get_logger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

JSON_CONTENT_TYPE = "application/json"


@dataclass
class DispatchResponse:
    """Status, headers and optional JSON body for the hosting adapter."""

    status_code: int
    body: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=lambda: dict(CORS_HEADERS))

    def __post_init__(self) -> None:
        if self.body is not None:
            self.headers.setdefault("Content-Type", JSON_CONTENT_TYPE)

    def body_text(self) -> str:
        if self.body is None:
            return ""
        return json.dumps(self.body, ensure_ascii=False)


def method_not_allowed() -> DispatchResponse:
    return DispatchResponse(405, {"error": "Method not allowed"})


def _outcome_response(outcome: SubmissionOutcome) -> DispatchResponse:
    return DispatchResponse(outcome.status_code, outcome.result.to_response())


async def dispatch_request(
    submitter: BugReportSubmitter,
    method: str,
    body: str | bytes | None,
) -> DispatchResponse:
    """Handle one request to the submit-bug endpoint.

    Args:
        submitter: Configured submitter
        method: HTTP method
        body: Raw request body

    Returns:
        DispatchResponse: 200 empty for OPTIONS, 405 for anything other
        than POST, otherwise the submission outcome
    """
    method = method.upper()

    if method == "OPTIONS":
        return DispatchResponse(200)

    if method != "POST":
        logger.warning("method_not_allowed", method=method)
        return method_not_allowed()

    try:
        payload = json.loads(body) if body else {}
    except ValueError as exc:
        # Malformed JSON is an unexpected error, not a validation failure
        logger.error("bug_report_malformed_body", error=str(exc))
        result = SubmissionResult.failed(submitter.unexpected_error_message(exc))
        return DispatchResponse(500, result.to_response())

    outcome = await submitter.handle(payload)
    return _outcome_response(outcome)
