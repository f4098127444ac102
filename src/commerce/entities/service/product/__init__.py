"""Entity package: Product."""

from .entity import Product, Visibility
from .repository import ProductRepository
from .table import ProductTable

__all__ = ["Product", "ProductRepository", "ProductTable", "Visibility"]
