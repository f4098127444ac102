from .claims import TokenClaims
from .product import (
    BulkVisibilityResult,
    ProductCreate,
    ProductRead,
    ProductSearch,
    ProductUpdate,
)
from .user import (
    CascadeStatus,
    LoginRequest,
    PasswordResetRequest,
    ResetPassword,
    TokenResponse,
    UserCreate,
    UserRead,
    UserUpdate,
    UserUpdateResult,
)

__all__ = [
    "BulkVisibilityResult",
    "CascadeStatus",
    "LoginRequest",
    "PasswordResetRequest",
    "ProductCreate",
    "ProductRead",
    "ProductSearch",
    "ProductUpdate",
    "ResetPassword",
    "TokenClaims",
    "TokenResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "UserUpdateResult",
]
