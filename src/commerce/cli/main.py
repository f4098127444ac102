"""Main CLI application module."""

import typer

from src.commerce.core.services.database.db_manage import DbManageService
from src.commerce.core.services.user.data_seeder import DataSeeder
from src.commerce.runtime.context import get_config

from .product_commands import products_app
from .user_commands import users_app
from .utils import console, get_database_service

app = typer.Typer(
    help="Commerce services CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(users_app, name="users")
app.add_typer(products_app, name="products")


@app.command("init-db")
def init_db(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables first"),
) -> None:
    """Create the product and user tables."""
    service = DbManageService(get_database_service().engine)
    if drop:
        service.drop_all()
        console.print("[yellow]Dropped existing tables[/yellow]")
    service.create_all()
    console.print("[green]✅ Database initialized[/green]")


@app.command("seed")
def seed() -> None:
    """Create the configured default administrator if missing."""
    with get_database_service().session_scope() as session:
        created = DataSeeder(session).seed()

    if created is None:
        console.print("[yellow]Nothing to seed[/yellow]")
    else:
        console.print(f"[green]✅ Created admin user {created.email}[/green]")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (defaults to config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (defaults to config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "src.commerce.api.http.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        reload=reload,
        access_log=False,
    )


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
