"""
Command-Line Interface for JobTracker

Usage:
    python -m jobtracker.ui.cli login you@example.com
    python -m jobtracker.ui.cli add --title "Backend Engineer" --company TechCorp
    python -m jobtracker.ui.cli list --status interview --search berlin
    python -m jobtracker.ui.cli dashboard
    python -m jobtracker.ui.cli stats
"""

import asyncio
import logging
from datetime import date
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.settings import settings
from jobtracker.tracker import (
    ApplicationInput,
    ApplicationRecord,
    ApplicationRepository,
    ApplicationStatus,
    StatsContext,
    TrackerClientError,
    TrackerSession,
    available_months,
    chart_data,
    dashboard_summary,
    filter_applications,
    filter_by_month,
    statistics_summary,
)
from jobtracker.tracker.filters import ALL

app = typer.Typer(
    name="jobtracker",
    help="Track job applications and see how your search is going",
    add_completion=False
)
console = Console()

T = TypeVar("T")

STATUS_STYLES = {
    ApplicationStatus.APPLIED: "blue",
    ApplicationStatus.INTERVIEW: "yellow",
    ApplicationStatus.TEST: "magenta",
    ApplicationStatus.OFFER: "green",
    ApplicationStatus.REJECTED: "red",
    ApplicationStatus.CANCELED: "dim",
}

BAR_WIDTH = 30


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and state changes"),
):
    """JobTracker command line client"""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def _stats_context() -> StatsContext:
    return StatsContext(
        today=date.today(),
        chart_weeks=settings.chart_weeks,
        recent_limit=settings.recent_limit,
    )


def run(action: Callable[[ApplicationRepository], Awaitable[T]], load: bool = False) -> T:
    """Run ``action`` against a repository bound to the saved session.

    Client errors are printed and turned into exit code 1.
    """
    async def runner() -> T:
        session = TrackerSession(settings.session_file)
        async with ApplicationRepository(session=session) as repo:
            if load:
                if not repo.is_authenticated:
                    raise TrackerClientError("Please login first: jobtracker login <email>")
                await repo.load()
            return await action(repo)

    try:
        return asyncio.run(runner())
    except TrackerClientError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)


def _status_text(status: ApplicationStatus) -> str:
    style = STATUS_STYLES[status]
    return f"[{style}]{status.value.title()}[/{style}]"


def _applications_table(apps: List[ApplicationRecord], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Job Title", style="white")
    table.add_column("Company", style="white")
    table.add_column("Location", style="white")
    table.add_column("Status")

    for a in apps:
        table.add_row(
            a.id,
            a.date.isoformat() if a.date else "-",
            a.job_title,
            a.company,
            a.location or "-",
            _status_text(a.status),
        )
    return table


def _bar(count: int, peak: int) -> str:
    width = round(BAR_WIDTH * count / peak) if peak else 0
    return "█" * width


# ============== Account Commands ==============

@app.command()
def register(
    name: str = typer.Option(..., "--name", "-n", help="Your name"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Create an account and log in"""
    user = run(lambda repo: repo.register(name, email, password))
    console.print(f"[green]✓ Welcome, {user.name}![/green]")


@app.command()
def login(
    email: str = typer.Argument(..., help="Email address"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
):
    """Log in and remember the session"""
    async def action(repo: ApplicationRepository):
        user = await repo.login(email, password)
        return user, len(repo.applications)

    user, count = run(action)
    console.print(f"[green]✓ Logged in as {user.name} ({count} applications)[/green]")


@app.command()
def logout():
    """Forget the saved session"""
    message = run(lambda repo: repo.logout())
    console.print(f"[yellow]{message}[/yellow]")


@app.command()
def whoami():
    """Show the logged-in user"""
    user = run(lambda repo: repo.me())

    table = Table(title="Current User")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Name", user.name)
    table.add_row("Email", user.email)
    table.add_row("ID", user.id)
    console.print(table)


@app.command("forgot-password")
def forgot_password(email: str = typer.Argument(..., help="Account email")):
    """Request a password reset link"""
    message = run(lambda repo: repo.forgot_password(email))
    console.print(f"[green]{message}[/green]")


@app.command("reset-password")
def reset_password(
    token: str = typer.Argument(..., help="Token from the reset link"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Set a new password with a reset token"""
    message = run(lambda repo: repo.reset_password(token, password))
    console.print(f"[green]{message}[/green]")


# ============== Application Commands ==============

@app.command("list")
def list_applications(
    status: str = typer.Option(ALL, "--status", "-s", help="applied/interview/test/offer/rejected/canceled or all"),
    search: str = typer.Option("", "--search", "-q", help="Match title, company, location or status"),
    month: str = typer.Option(ALL, "--month", "-m", help="YYYY-MM or all"),
):
    """List applications with optional filters"""
    if status != ALL and status not in {s.value for s in ApplicationStatus}:
        console.print(f"[red]Error: unknown status '{status}'[/red]")
        raise typer.Exit(1)

    async def action(repo: ApplicationRepository):
        return list(repo.applications)

    apps = run(action, load=True)
    try:
        apps = filter_by_month(apps, month)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    apps = filter_applications(apps, status, search)

    if not apps:
        console.print("[yellow]No applications found[/yellow]")
        return
    console.print(_applications_table(apps, f"Applications ({len(apps)})"))


@app.command()
def add(
    title: str = typer.Option(..., "--title", "-t", help="Job title"),
    company: str = typer.Option(..., "--company", "-c", help="Company name"),
    applied_on: str = typer.Option(date.today().isoformat(), "--date", "-d", help="Application date (YYYY-MM-DD)"),
    location: Optional[str] = typer.Option(None, "--location", "-l"),
    status: ApplicationStatus = typer.Option(ApplicationStatus.APPLIED, "--status", "-s"),
    notes: Optional[str] = typer.Option(None, "--notes"),
):
    """Add an application"""
    data = ApplicationInput(
        job_title=title,
        company=company,
        location=location,
        date=applied_on,
        status=status,
        notes=notes,
    )
    created = run(lambda repo: repo.create(data))
    console.print(f"[green]✓ Added {created.job_title} at {created.company} ({created.id})[/green]")


@app.command()
def edit(
    app_id: str = typer.Argument(..., help="Application ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    company: Optional[str] = typer.Option(None, "--company", "-c"),
    applied_on: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD"),
    location: Optional[str] = typer.Option(None, "--location", "-l"),
    status: Optional[ApplicationStatus] = typer.Option(None, "--status", "-s"),
    notes: Optional[str] = typer.Option(None, "--notes"),
):
    """Change fields of an existing application"""
    async def action(repo: ApplicationRepository):
        current = repo.get(app_id)
        if current is None:
            raise TrackerClientError(f"No application with ID {app_id}")

        data = ApplicationInput(
            job_title=title if title is not None else current.job_title,
            company=company if company is not None else current.company,
            location=location if location is not None else current.location,
            date=applied_on if applied_on is not None else (current.date.isoformat() if current.date else ""),
            status=status or current.status,
            notes=notes if notes is not None else current.notes,
        )
        return await repo.update(app_id, data)

    updated = run(action, load=True)
    console.print(f"[green]✓ Updated {updated.job_title} at {updated.company}: {updated.status_label}[/green]")


@app.command()
def delete(
    app_id: str = typer.Argument(..., help="Application ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete an application"""
    if not yes:
        typer.confirm("Are you sure you want to delete this application?", abort=True)
    run(lambda repo: repo.delete(app_id))
    console.print("[green]✓ Application deleted successfully[/green]")


# ============== Views ==============

@app.command()
def dashboard():
    """Headline counters and the latest applications"""
    async def action(repo: ApplicationRepository):
        return dashboard_summary(repo.applications, _stats_context())

    summary = run(action, load=True)

    table = Table(title="Dashboard", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Total Applications", str(summary.total))
    table.add_row("This Week", str(summary.this_week))
    table.add_row("Interviews", str(summary.interviews))
    table.add_row("Offers", str(summary.offers))
    table.add_row("Success Rate", summary.success_rate)
    console.print(table)

    if summary.recent:
        console.print(_applications_table(summary.recent, "Recent Applications"))
    else:
        console.print("[yellow]No applications yet. Add one with 'add'.[/yellow]")


@app.command()
def stats():
    """Weekly and monthly statistics"""
    async def action(repo: ApplicationRepository):
        return statistics_summary(repo.applications, _stats_context())

    summary = run(action, load=True)

    overview = Table(title="Statistics", show_header=False)
    overview.add_column("Metric", style="cyan")
    overview.add_column("Value", style="white")
    overview.add_row("Total Applications", str(summary.total))
    overview.add_row("This Month", str(summary.this_month))
    overview.add_row("Interview Rate", summary.interview_rate)
    overview.add_row("Offer Rate", summary.offer_rate)
    overview.add_row("This Week", str(summary.current_week))
    overview.add_row("Most Active Month", summary.most_active_month)
    overview.add_row("Weekly Average", summary.weekly_average)
    console.print(overview)

    weeks = Table(title="By Week")
    weeks.add_column("Week", style="cyan")
    weeks.add_column("Applications", style="white", justify="right")
    for bucket in summary.weeks:
        weeks.add_row(bucket.label, str(bucket.count))
    console.print(weeks)

    months = Table(title="By Month")
    months.add_column("Month", style="cyan")
    months.add_column("Applications", style="white", justify="right")
    for bucket in summary.months:
        months.add_row(bucket.month_name, str(bucket.count))
    console.print(months)


@app.command()
def charts():
    """Status distribution and weekly timeline as text bars"""
    async def action(repo: ApplicationRepository):
        return chart_data(repo.applications, _stats_context())

    data = run(action, load=True)

    peak = max(data.status_counts, default=0)
    lines = [
        f"{label:<10} {_bar(count, peak)} {count}"
        for label, count in zip(data.status_labels, data.status_counts)
    ]
    console.print(Panel("\n".join(lines), title="Application Status", border_style="blue"))

    if not data.timeline_labels:
        console.print("[yellow]No dated applications to chart[/yellow]")
        return
    peak = max(data.timeline_counts, default=0)
    lines = [
        f"{label:<10} {_bar(count, peak)} {count}"
        for label, count in zip(data.timeline_labels, data.timeline_counts)
    ]
    console.print(Panel("\n".join(lines), title="Weekly Timeline", border_style="green"))


@app.command()
def months():
    """Months that have applications, for --month filtering"""
    async def action(repo: ApplicationRepository):
        return available_months(repo.applications)

    options = run(action, load=True)

    table = Table(title="Months")
    table.add_column("Key", style="cyan")
    table.add_column("Month", style="white")
    for option in options:
        table.add_row(option.key, option.name)
    console.print(table)


if __name__ == "__main__":
    app()
