"""Pydantic models for bug reports and their submission results."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import ReportValidationError

REQUIRED_FIELDS = ("email", "title", "description")


class Priority(str, Enum):
    """Priority levels the report form offers."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: str | None) -> "Priority | None":
        """Return the matching Priority, or None for missing/unknown values."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class BugReport(BaseModel):
    """Bug report as submitted by the website form.

    Never persisted: built from the request payload, rendered into an
    issue draft, then discarded.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    email: str = Field(..., min_length=1, description="Reporter email address")
    title: str = Field(..., min_length=1, description="Short bug summary")
    description: str = Field(..., min_length=1, description="What went wrong")
    steps: str | None = Field(default=None, description="Steps to reproduce")
    priority: str | None = Field(
        default=None,
        description="low/medium/high/critical; anything else is treated as unspecified",
    )
    user_agent: str | None = Field(default=None, alias="userAgent")
    platform: str | None = Field(default=None)
    screen_size: str | None = Field(default=None, alias="screenSize")
    app_version: str | None = Field(default=None, alias="appVersion")

    @property
    def priority_level(self) -> Priority | None:
        """Recognized priority, or None."""
        return Priority.parse(self.priority)

    @classmethod
    def from_payload(cls, payload: Any) -> "BugReport":
        """Build a report from a decoded JSON payload.

        Raises:
            ReportValidationError: If a required field is missing or empty,
                or the payload does not have the expected shape.
        """
        if not isinstance(payload, dict):
            raise ReportValidationError(fields=list(REQUIRED_FIELDS))

        missing = [name for name in REQUIRED_FIELDS if not payload.get(name)]
        if missing:
            raise ReportValidationError(fields=missing)

        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            raise ReportValidationError("Invalid bug report", fields=fields) from exc


class IssueDraft(BaseModel):
    """Issue payload ready to send to the tracker."""

    title: str
    body: str
    labels: list[str]


class CreatedIssue(BaseModel):
    """Issue as created on the remote tracker."""

    number: int
    url: str


class SubmissionResult(BaseModel):
    """Normalized response body for a submission attempt."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    issue_number: int | None = Field(default=None, alias="issueNumber")
    issue_url: str | None = Field(default=None, alias="issueUrl")
    message: str | None = None
    error: str | None = None

    @classmethod
    def succeeded(cls, issue: CreatedIssue) -> "SubmissionResult":
        return cls(
            success=True,
            issue_number=issue.number,
            issue_url=issue.url,
            message="Bug report submitted successfully",
        )

    @classmethod
    def failed(cls, error: str) -> "SubmissionResult":
        return cls(success=False, error=error)

    def to_response(self) -> dict[str, Any]:
        """Wire representation: camelCase keys, unset fields dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)
