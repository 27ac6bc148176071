"""Pydantic models for BugRelay."""

from .bug_report import (
    BugReport,
    CreatedIssue,
    IssueDraft,
    Priority,
    SubmissionResult,
)

__all__ = [
    "BugReport",
    "CreatedIssue",
    "IssueDraft",
    "Priority",
    "SubmissionResult",
]
