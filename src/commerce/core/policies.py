"""Authorization policies evaluated at the service boundary."""

from src.commerce.entities.service.product import Product


def can_mutate_product(actor_id: str | None, product: Product | None) -> bool:
    """Whether ``actor_id`` may update or delete ``product``.

    Only the owner may mutate, and only while the product is visible.
    """
    if not actor_id or product is None:
        return False
    if product.is_deleted:
        return False
    return product.is_owned_by(actor_id)


def has_any_role(actor_roles: set[str], required_roles: set[str]) -> bool:
    return bool(actor_roles & required_roles)
