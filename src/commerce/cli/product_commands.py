"""Product inspection commands."""

import typer
from rich.table import Table

from src.commerce.entities.service.product import ProductRepository

from .utils import console, get_database_service

products_app = typer.Typer(help="Inspect products")


@products_app.command("list")
def list_products(
    owner: str | None = typer.Option(None, "--owner", "-o", help="Only products of this user id"),
) -> None:
    """List visible products."""
    with get_database_service().session_scope() as session:
        products = ProductRepository(session).list_all()

    if owner:
        products = [p for p in products if p.is_owned_by(owner)]

    if not products:
        console.print("[yellow]No products found[/yellow]")
        return

    table = Table(title="Products")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Price", style="blue", justify="right")
    table.add_column("Available", style="yellow")
    table.add_column("Owner", style="magenta")

    for product in products:
        table.add_row(
            product.id,
            product.name,
            f"{product.price:.2f}",
            "✅" if product.availability else "❌",
            product.user_id,
        )

    console.print(table)
    console.print(f"\n[green]Found {len(products)} products[/green]")
