"""Product database table model."""

from decimal import Decimal

from sqlalchemy import Column, Numeric, String
from sqlmodel import Field

from src.commerce.entities.core._base import EntityTable

from .entity import Visibility


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    This represents how the Product entity is stored in the database.
    There is no foreign key to the user table: products may reference owners
    that live in another service's database.
    """

    name: str = Field(sa_column=Column(String(100), nullable=False, index=True))
    description: str = Field(default="", sa_column=Column(String(500), nullable=False))
    price: Decimal = Field(sa_column=Column(Numeric(18, 2), nullable=False))
    availability: bool = Field(default=True, nullable=False)
    user_id: str = Field(index=True, nullable=False)
    visibility: Visibility = Field(default=Visibility.ACTIVE, nullable=False, index=True)
