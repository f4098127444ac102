from .cascade import HttpProductCascade, LocalProductCascade, ProductCascade
from .product_service import ProductService

__all__ = ["HttpProductCascade", "LocalProductCascade", "ProductCascade", "ProductService"]
