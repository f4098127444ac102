"""Core services exports."""

from .database.db_manage import DbManageService
from .database.db_session import DbSessionService
from .email.email_sender import EmailSender
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService
from .product.cascade import HttpProductCascade, LocalProductCascade, ProductCascade
from .product.product_service import ProductService
from .user.data_seeder import DataSeeder
from .user.user_service import UserService

__all__ = [
    "DataSeeder",
    "DbManageService",
    "DbSessionService",
    "EmailSender",
    "HttpProductCascade",
    "JwtGeneratorService",
    "JwtVerificationService",
    "LocalProductCascade",
    "ProductCascade",
    "ProductService",
    "UserService",
]
