"""Bug report formatting and submission services."""

from .formatter import (
    build_issue_draft,
    issue_labels,
    issue_title,
    priority_glyph,
    render_issue_body,
)
from .submitter import BugReportSubmitter, SubmissionOutcome

__all__ = [
    "BugReportSubmitter",
    "SubmissionOutcome",
    "build_issue_draft",
    "issue_labels",
    "issue_title",
    "priority_glyph",
    "render_issue_body",
]
