"""Pure transformation of a BugReport into a GitHub issue draft.

Nothing here touches the network or the environment; glyph table and
footer name are passed in by the caller (normally from Settings).
"""

from collections.abc import Mapping

from ..core.config import DEFAULT_PRIORITY_GLYPHS
from ..models.bug_report import BugReport, IssueDraft, Priority

BASE_LABELS = ("bug", "user-reported")
HIGH_PRIORITY_LABEL = "priority-high"
HIGH_PRIORITIES = frozenset({Priority.HIGH, Priority.CRITICAL})

TITLE_PREFIX = "[Bug] "
UNSPECIFIED_PRIORITY = "UNSPECIFIED"
# Literal shown for device fields the form did not send; empty strings are kept as-is
MISSING_DEVICE_VALUE = "unknown"

ISSUE_BODY_TEMPLATE = """
## Bug Report

**Reporter:** {email}
**Priority:** {glyph} {priority}

---

### Description
{description}

{steps_section}

---

### Device Information
- **Platform:** {platform}
- **Screen Size:** {screen_size}
- **User Agent:** {user_agent}
- **App Version:** {app_version}

---

*This bug report was submitted via the {source} bug report form*
"""

STEPS_SECTION_TEMPLATE = "### Steps to Reproduce\n{steps}\n"


def priority_glyph(
    priority: str | None,
    glyphs: Mapping[str, str] = DEFAULT_PRIORITY_GLYPHS,
    default: str = "⚪",
) -> str:
    """Map a priority to its display glyph, falling back to default."""
    if not priority:
        return default
    return glyphs.get(priority, default)


def issue_labels(priority: str | None) -> list[str]:
    """Labels for the issue: base labels plus priority-high for high/critical."""
    labels = list(BASE_LABELS)
    if Priority.parse(priority) in HIGH_PRIORITIES:
        labels.append(HIGH_PRIORITY_LABEL)
    return labels


def issue_title(title: str) -> str:
    return f"{TITLE_PREFIX}{title}"


def _device_value(value: str | None) -> str:
    return MISSING_DEVICE_VALUE if value is None else value


def render_issue_body(
    report: BugReport,
    glyphs: Mapping[str, str] = DEFAULT_PRIORITY_GLYPHS,
    default_glyph: str = "⚪",
    source: str = "InSync",
) -> str:
    """Render the Markdown issue body for a report.

    The steps section is omitted when steps are empty. The four device
    lines (platform, screen size, user agent, app version) are always
    rendered: a missing field prints the literal MISSING_DEVICE_VALUE
    ("unknown"), an empty string prints as an empty value.
    """
    steps_section = STEPS_SECTION_TEMPLATE.format(steps=report.steps) if report.steps else ""

    return ISSUE_BODY_TEMPLATE.format(
        email=report.email,
        glyph=priority_glyph(report.priority, glyphs, default_glyph),
        priority=report.priority.upper() if report.priority else UNSPECIFIED_PRIORITY,
        description=report.description,
        steps_section=steps_section,
        platform=_device_value(report.platform),
        screen_size=_device_value(report.screen_size),
        user_agent=_device_value(report.user_agent),
        app_version=_device_value(report.app_version),
        source=source,
    )


def build_issue_draft(
    report: BugReport,
    glyphs: Mapping[str, str] = DEFAULT_PRIORITY_GLYPHS,
    default_glyph: str = "⚪",
    source: str = "InSync",
) -> IssueDraft:
    """Compose title, body and labels for a report."""
    return IssueDraft(
        title=issue_title(report.title),
        body=render_issue_body(report, glyphs, default_glyph, source),
        labels=issue_labels(report.priority),
    )
