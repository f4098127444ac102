"""Product request and response models."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from src.commerce.entities.service.product import Product

# Prices travel as JSON numbers, not strings.
JsonPrice = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ProductCreate(BaseModel):
    """Input for creating a product."""

    name: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=10, max_length=500)
    price: Decimal = Field(gt=0, max_digits=18, decimal_places=2)
    availability: bool


class ProductUpdate(ProductCreate):
    """Input for updating a product; only these fields are overwritten."""

    id: str = Field(min_length=1)


class ProductSearch(BaseModel):
    """Optional, conjunctive search filters."""

    name: str | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    availability: bool | None = None


class ProductRead(BaseModel):
    """Product as returned to API callers."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    price: JsonPrice
    availability: bool
    user_id: str
    created_at: datetime
    is_deleted: bool = False

    @classmethod
    def from_entity(cls, product: Product) -> "ProductRead":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            availability=product.availability,
            user_id=product.user_id,
            created_at=product.created_at,
            is_deleted=product.is_deleted,
        )


class BulkVisibilityResult(BaseModel):
    """Outcome of an owner-wide soft-delete or restore."""

    user_id: str
    affected: int
