"""
Record store maintenance commands

Usage:
    python -m jobtracker.ui.api.manage users
    python -m jobtracker.ui.api.manage delete-user someone@example.com
"""

import typer
from rich.console import Console
from rich.table import Table

from .database import get_tracker_database

app = typer.Typer(
    name="jobtracker-manage",
    help="Inspect and clean up JobTracker accounts",
    add_completion=False
)
console = Console()


@app.command()
def users():
    """List registered users"""
    rows = get_tracker_database().list_users()
    if not rows:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title=f"Users ({len(rows)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email", style="white")
    table.add_column("Created", style="green")
    for row in rows:
        table.add_row(row["id"], row["name"], row["email"], str(row["created_at"]))
    console.print(table)


@app.command("delete-user")
def delete_user(
    email: str = typer.Argument(..., help="Email of the account to remove"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a user together with all of their applications"""
    if not yes:
        typer.confirm(f"Delete {email} and all of their applications?", abort=True)

    if get_tracker_database().delete_user_by_email(email):
        console.print(f"[green]✓ Deleted user {email}[/green]")
    else:
        console.print(f"[yellow]No user found with email {email}[/yellow]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
