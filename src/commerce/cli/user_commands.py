"""User administration commands."""

import typer
from rich.table import Table

from src.commerce.entities.core.user import UserRepository

from .utils import console, get_database_service

users_app = typer.Typer(help="Inspect users")


@users_app.command("list")
def list_users() -> None:
    """List all users."""
    with get_database_service().session_scope() as session:
        users = UserRepository(session).list_all()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Role", style="magenta")
    table.add_column("Active", style="yellow")
    table.add_column("Confirmed", style="yellow")

    for user in users:
        table.add_row(
            user.id,
            user.name,
            user.email,
            user.role,
            "✅" if user.is_active else "❌",
            "✅" if user.email_confirmed else "❌",
        )

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")
