from fastapi import APIRouter, Depends

from src.commerce.api.http.deps import get_user_service
from src.commerce.core.models.user import LoginRequest, TokenResponse
from src.commerce.core.services import UserService

router = APIRouter(prefix="/api/login", tags=["auth"])


@router.post("/authenticate", response_model=TokenResponse)
def authenticate(
    credentials: LoginRequest,
    service: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Exchange email and password for a bearer access token."""
    return service.login(credentials)
