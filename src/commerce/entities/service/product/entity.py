"""Entity: Product."""

from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import Field

from src.commerce.entities.core._base import Entity


class Visibility(StrEnum):
    """Visibility state of a product.

    Soft-deleted products stay in the store but are excluded from every
    default read; only the owner-wide restore brings them back.
    """

    ACTIVE = "active"
    SOFT_DELETED = "soft_deleted"


class Product(Entity):
    """Product entity representing a catalog item owned by a user.

    This is the domain model that contains business logic and validation.
    It inherits from Entity to get auto-generated UUID identifiers.
    """

    name: str = Field(description="Product name")
    description: str = Field(default="", description="Product description")
    price: Decimal = Field(ge=0, description="Unit price")
    availability: bool = Field(default=True, description="Whether the product is available")
    user_id: str = Field(description="Identifier of the owning user")
    visibility: Visibility = Field(default=Visibility.ACTIVE)

    @property
    def is_deleted(self) -> bool:
        return self.visibility is Visibility.SOFT_DELETED

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.description == other.description
            and self.price == other.price
            and self.availability == other.availability
            and self.user_id == other.user_id
            and self.visibility == other.visibility
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.description,
            self.price,
            self.availability,
            self.user_id,
            self.visibility,
        ))
