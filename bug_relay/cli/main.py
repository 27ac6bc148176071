"""BugRelay CLI - Main entry point for command-line interface."""

import asyncio
import json
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ..core.config import get_settings
from ..core.exceptions import ReportValidationError
from ..core.logging import setup_logging
from ..integrations import get_tracker_client
from ..models.bug_report import BugReport, Priority
from ..services.formatter import build_issue_draft
from ..services.submitter import BugReportSubmitter, SubmissionOutcome

console = Console()

PRIORITY_CHOICES = [p.value for p in Priority]


def _report_options(func):
    """Options shared by preview and submit."""
    options = [
        click.option("--title", "-t", required=True, help="Short bug summary"),
        click.option("--description", "-d", required=True, help="What went wrong"),
        click.option("--steps", "-s", default=None, help="Steps to reproduce"),
        click.option(
            "--priority",
            "-p",
            type=click.Choice(PRIORITY_CHOICES),
            default=None,
            help="Bug priority",
        ),
        click.option("--platform", default=None, help="Reporter platform"),
        click.option("--app-version", default=None, help="App version"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _payload(email: str, title: str, description: str, steps, priority, platform, app_version) -> dict:
    return {
        "email": email,
        "title": title,
        "description": description,
        "steps": steps,
        "priority": priority,
        "platform": platform,
        "appVersion": app_version,
        "userAgent": "bug-relay-cli",
    }


@click.group()
@click.version_option(version="0.1.0", prog_name="BugRelay")
def cli():
    """
    BugRelay - website bug reports filed as GitHub issues.
    """


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8000, type=int, help="Bind port")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool):
    """
    Run the API server.

    Examples:

        bug-relay serve --port 8080
    """
    import uvicorn

    settings = get_settings()
    console.print(Panel.fit(
        f"[bold cyan]BugRelay[/bold cyan]\n\n"
        f"[dim]Tracker:[/dim] {settings.ISSUE_TRACKER}\n"
        f"[dim]Repository:[/dim] {settings.GITHUB_REPO or '[red]not set[/red]'}",
        border_style="cyan",
        title="[bold]Server[/bold]",
        subtitle=f"http://{host}:{port}",
    ))

    uvicorn.run("bug_relay.api.main:app", host=host, port=port, reload=reload)


@cli.command()
@click.option("--email", "-e", default="reporter@example.com", help="Reporter email")
@_report_options
def preview(email: str, title: str, description: str, steps: Optional[str],
            priority: Optional[str], platform: Optional[str], app_version: Optional[str]):
    """
    Render the issue a report would produce, without submitting it.

    Examples:

        bug-relay preview -t "Crash" -d "App crashes on launch" -p critical
    """
    settings = get_settings()
    payload = _payload(email, title, description, steps, priority, platform, app_version)
    try:
        report = BugReport.from_payload(payload)
    except ReportValidationError as exc:
        console.print(f"[red]✗[/red] {exc.message}: {', '.join(exc.fields)}")
        raise click.Abort()

    draft = build_issue_draft(
        report,
        glyphs=settings.PRIORITY_GLYPHS,
        default_glyph=settings.DEFAULT_PRIORITY_GLYPH,
        source=settings.REPORT_SOURCE,
    )

    console.print(Panel(
        Markdown(draft.body),
        title=f"[bold]{draft.title}[/bold]",
        subtitle=", ".join(draft.labels),
        border_style="cyan",
    ))


@cli.command()
@click.option("--email", "-e", required=True, help="Reporter email")
@_report_options
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table", help="Output format")
def submit(email: str, title: str, description: str, steps: Optional[str],
           priority: Optional[str], platform: Optional[str], app_version: Optional[str],
           output: str):
    """
    Submit a bug report through the configured tracker.

    Examples:

        bug-relay submit -e a@b.com -t "Crash" -d "App crashes on launch"
    """
    setup_logging()
    payload = _payload(email, title, description, steps, priority, platform, app_version)
    outcome = asyncio.run(_submit(payload))

    if output == "json":
        click.echo(json.dumps(outcome.result.to_response(), ensure_ascii=False))
    else:
        _display_outcome(outcome)

    if outcome.status_code != 200:
        raise click.exceptions.Exit(1)


async def _submit(payload: dict) -> SubmissionOutcome:
    settings = get_settings()
    async with get_tracker_client(settings) as client:
        return await BugReportSubmitter(settings, client).handle(payload)


def _display_outcome(outcome: SubmissionOutcome) -> None:
    result = outcome.result

    if not result.success:
        console.print(f"[red]✗ Submission failed ({outcome.status_code}):[/red] {result.error}")
        return

    table = Table(show_header=False, box=box.ROUNDED, border_style="green")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Issue", f"#{result.issue_number}")
    table.add_row("URL", result.issue_url or "")

    console.print(f"[green]✓[/green] {result.message}")
    console.print(table)


if __name__ == "__main__":
    cli()
