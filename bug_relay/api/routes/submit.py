"""Bug report submission endpoint."""

from fastapi import APIRouter, Request, Response

from ...services.submitter import BugReportSubmitter
from ..dispatch import DispatchResponse, dispatch_request

router = APIRouter(tags=["bug-reports"])

SUBMIT_PATHS = ("/submit-bug", "/api/submit-bug")

# Methods outside this list (TRACE, WebDAV verbs) are rejected by the router;
# api.main turns that 405 into the same body via as_response.
SUBMIT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_submitter(request: Request) -> BugReportSubmitter:
    return request.app.state.submitter


def as_response(result: DispatchResponse) -> Response:
    """Convert a dispatch result into a Starlette response."""
    return Response(
        content=result.body_text(),
        status_code=result.status_code,
        headers=result.headers,
    )


@router.api_route(
    SUBMIT_PATHS[0],
    methods=SUBMIT_METHODS,
    summary="Submit a bug report",
    description="File a bug report from the website form as a GitHub issue",
)
@router.api_route(SUBMIT_PATHS[1], methods=SUBMIT_METHODS, include_in_schema=False)
async def submit_bug(request: Request) -> Response:
    """
    Submit a bug report.

    POST takes the report as JSON; OPTIONS answers CORS preflight.

    Returns:
        200 with issue number and URL, 400 when required fields are
        missing, 500 when the tracker call fails.
    """
    body = await request.body() if request.method == "POST" else None
    result = await dispatch_request(get_submitter(request), request.method, body)
    return as_response(result)
