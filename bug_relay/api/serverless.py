"""Serverless function entry point for the submit-bug endpoint.

Accepts API Gateway / Netlify style events:

    {"httpMethod": "POST", "body": "{...}", "isBase64Encoded": false}

and returns {"statusCode", "headers", "body"}. Configure the platform to
call ``bug_relay.api.serverless.handler``.
"""

import asyncio
import base64
import binascii
from typing import Any

import structlog

from ..core.config import get_settings
from ..core.logging import LogContext, setup_logging
from ..integrations import get_tracker_client
from ..models.bug_report import SubmissionResult
from ..services.submitter import BugReportSubmitter
from .dispatch import DispatchResponse, dispatch_request

logger = structlog.get_logger(__name__)

setup_logging()


def _event_body(event: dict[str, Any]) -> str | bytes | None:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        return base64.b64decode(body, validate=True)
    return body


def _event_method(event: dict[str, Any]) -> str:
    method = event.get("httpMethod")
    if not method:
        # HTTP API payload format 2.0
        http = (event.get("requestContext") or {}).get("http") or {}
        method = http.get("method") or ""
    return method


async def handle_event(event: dict[str, Any]) -> DispatchResponse:
    """Dispatch one event with a tracker client scoped to the invocation."""
    settings = get_settings()

    try:
        body = _event_body(event)
    except (binascii.Error, ValueError) as exc:
        logger.error("serverless_body_decode_failed", error=str(exc))
        result = SubmissionResult.failed("Failed to submit bug report")
        return DispatchResponse(500, result.to_response())

    async with get_tracker_client(settings) as client:
        submitter = BugReportSubmitter(settings, client)
        return await dispatch_request(submitter, _event_method(event), body)


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Serverless platform handler.

    Args:
        event: Platform HTTP event
        context: Platform invocation context (unused apart from the request id)

    Returns:
        Platform HTTP response dict
    """
    request_id = getattr(context, "aws_request_id", None)

    with LogContext(request_id=request_id, method=_event_method(event)):
        response = asyncio.run(handle_event(event))
        logger.info("serverless_request_completed", status_code=response.status_code)

    return {
        "statusCode": response.status_code,
        "headers": response.headers,
        "body": response.body_text(),
    }
