import re
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

from sqlmodel import Session

from src.commerce.entities.service.product import Product, ProductRepository


def make_product(
    session: Session,
    owner_id: str,
    name: str = "Widget",
    price: str | Decimal = "10.99",
    availability: bool = True,
    description: str = "A very useful widget",
) -> Product:
    """Persist a product directly through the repository."""
    product = ProductRepository(session).create(
        Product(
            name=name,
            description=description,
            price=Decimal(str(price)),
            availability=availability,
            user_id=owner_id,
        )
    )
    session.commit()
    return product


def link_params(body: str) -> dict[str, str]:
    """Extract the query parameters of the first link in an email body."""
    match = re.search(r"href='([^']+)'", body)
    assert match, f"no link in {body!r}"
    query = parse_qs(urlparse(match.group(1)).query)
    return {key: values[0] for key, values in query.items()}
