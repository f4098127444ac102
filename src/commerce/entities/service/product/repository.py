"""Product repository."""

from decimal import Decimal

from loguru import logger
from sqlmodel import Session, col, select

from src.commerce.entities.core._base import utcnow

from .entity import Product, Visibility
from .table import ProductTable


class ProductRepository:
    """Data-access layer for products.

    Default reads only ever see ``Visibility.ACTIVE`` rows. Writes are flushed
    but not committed: the caller owns the unit of work.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _visible(self):
        return select(ProductTable).where(ProductTable.visibility == Visibility.ACTIVE)

    def get(self, product_id: str) -> Product | None:
        statement = self._visible().where(ProductTable.id == product_id)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Product.model_validate(row, from_attributes=True)

    def list_all(self) -> list[Product]:
        rows = self._session.exec(self._visible().order_by(col(ProductTable.created_at)))
        return [Product.model_validate(row, from_attributes=True) for row in rows]

    def search(
        self,
        name: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        availability: bool | None = None,
    ) -> list[Product]:
        """Search visible products; every supplied filter must match."""
        statement = self._visible()

        if name is not None and name.strip():
            statement = statement.where(col(ProductTable.name).icontains(name.strip(), autoescape=True))
        if min_price is not None:
            statement = statement.where(ProductTable.price >= min_price)
        if max_price is not None:
            statement = statement.where(ProductTable.price <= max_price)
        if availability is not None:
            statement = statement.where(ProductTable.availability == availability)

        rows = self._session.exec(statement.order_by(col(ProductTable.created_at)))
        return [Product.model_validate(row, from_attributes=True) for row in rows]

    def create(self, product: Product) -> Product:
        row = ProductTable(**product.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def update(self, product: Product) -> Product:
        """Overwrite the stored record with the entity's current field values."""
        row = self._session.get(ProductTable, product.id)
        if row is None:
            raise ValueError(f"Product {product.id} not found")

        row.name = product.name
        row.description = product.description
        row.price = product.price
        row.availability = product.availability
        row.visibility = product.visibility
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Product.model_validate(row, from_attributes=True)

    def soft_delete_by_owner(self, owner_id: str) -> int:
        """Soft-delete every visible product of ``owner_id``.

        Returns the number of products that changed state; zero when the owner
        is unknown or already has no visible products.
        """
        return self._set_owner_visibility(
            owner_id, current=Visibility.ACTIVE, target=Visibility.SOFT_DELETED
        )

    def restore_by_owner(self, owner_id: str) -> int:
        """Restore every soft-deleted product of ``owner_id``."""
        return self._set_owner_visibility(
            owner_id, current=Visibility.SOFT_DELETED, target=Visibility.ACTIVE
        )

    def _set_owner_visibility(
        self, owner_id: str, *, current: Visibility, target: Visibility
    ) -> int:
        # Bypasses the default visibility filter.
        statement = select(ProductTable).where(
            ProductTable.user_id == owner_id, ProductTable.visibility == current
        )
        rows = self._session.exec(statement).all()
        if not rows:
            return 0

        now = utcnow()
        for row in rows:
            row.visibility = target
            row.updated_at = now
            self._session.add(row)
        self._session.flush()

        logger.debug(
            "Changed visibility of {} products of owner {} to {}", len(rows), owner_id, target
        )
        return len(rows)
