from loguru import logger
from sqlmodel import Session

from src.commerce.core.models.product import ProductCreate, ProductSearch, ProductUpdate
from src.commerce.core.policies import can_mutate_product
from src.commerce.entities.service.product import Product, ProductRepository, Visibility


class ProductService:
    """Product use cases with ownership and soft-delete rules.

    ``update`` and ``delete`` report a negative result instead of raising when
    the product is absent, soft-deleted, or owned by someone else; the three
    cases are indistinguishable to the caller.
    """

    def __init__(self, db_session: Session):
        self._repo = ProductRepository(db_session)
        self._db_session = db_session

    def get_by_id(self, product_id: str) -> Product | None:
        return self._repo.get(product_id)

    def list_all(self) -> list[Product]:
        return self._repo.list_all()

    def search(self, filters: ProductSearch) -> list[Product]:
        return self._repo.search(
            name=filters.name,
            min_price=filters.min_price,
            max_price=filters.max_price,
            availability=filters.availability,
        )

    def create(self, data: ProductCreate, owner_id: str) -> Product:
        product = Product(
            name=data.name,
            description=data.description,
            price=data.price,
            availability=data.availability,
            user_id=owner_id,
        )
        try:
            created = self._repo.create(product)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info("Product {} created by {}", created.id, owner_id)
        return created

    def update(self, data: ProductUpdate, owner_id: str) -> Product | None:
        """Overwrite name, description, price and availability.

        Returns the updated product, or ``None`` when the caller may not mutate it.
        """
        product = self._repo.get(data.id)
        if not can_mutate_product(owner_id, product):
            logger.debug("Update of product {} by {} refused", data.id, owner_id)
            return None

        changed = product.model_copy(
            update={
                "name": data.name,
                "description": data.description,
                "price": data.price,
                "availability": data.availability,
            }
        )
        try:
            updated = self._repo.update(changed)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        return updated

    def delete(self, product_id: str, owner_id: str) -> bool:
        """Soft-delete a product owned by ``owner_id``. Returns ``False`` when refused."""
        product = self._repo.get(product_id)
        if not can_mutate_product(owner_id, product):
            logger.debug("Delete of product {} by {} refused", product_id, owner_id)
            return False

        try:
            self._repo.update(product.model_copy(update={"visibility": Visibility.SOFT_DELETED}))
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info("Product {} soft-deleted by {}", product_id, owner_id)
        return True

    def soft_delete_by_owner(self, owner_id: str) -> int:
        """Soft-delete every visible product of ``owner_id`` in one transaction."""
        try:
            affected = self._repo.soft_delete_by_owner(owner_id)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        logger.info("Soft-deleted {} products of user {}", affected, owner_id)
        return affected

    def restore_by_owner(self, owner_id: str) -> int:
        """Restore every soft-deleted product of ``owner_id`` in one transaction."""
        try:
            affected = self._repo.restore_by_owner(owner_id)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        logger.info("Restored {} products of user {}", affected, owner_id)
        return affected
