"""Entities module with hybrid entity-centric structure.

This module organizes entities by business concept rather than technical layer.
Each entity has its own package containing:
- entity.py: Domain model with business logic
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .core.user import User, UserRepository, UserTable
from .service.product import Product, ProductRepository, ProductTable, Visibility

__all__ = [
    "User",
    "UserTable",
    "UserRepository",
    "Product",
    "ProductTable",
    "ProductRepository",
    "Visibility",
]
