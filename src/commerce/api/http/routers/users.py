"""User and identity endpoints."""

from fastapi import APIRouter, Depends, Query, Request, Response, status

from src.commerce.api.http.deps import (
    get_bearer_token,
    get_user_service,
    require_admin,
    require_known_role,
)
from src.commerce.core.exceptions import ConflictError, NotFoundError
from src.commerce.core.models.claims import TokenClaims
from src.commerce.core.models.user import (
    PasswordResetRequest,
    ResetPassword,
    UserCreate,
    UserRead,
    UserUpdate,
    UserUpdateResult,
)
from src.commerce.core.services import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: UserCreate,
    request: Request,
    response: Response,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Public registration. The new user is active and must confirm the email."""
    user = await service.create(payload)
    response.headers["Location"] = str(request.url_for("get_user", user_id=user.id))
    return UserRead.from_entity(user)


@router.get("", response_model=list[UserRead])
def list_users(
    _: TokenClaims = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> list[UserRead]:
    return [UserRead.from_entity(u) for u in service.list_all()]


@router.get("/confirm-email", response_model=UserRead)
def confirm_email(
    user_id: str = Query(min_length=1),
    token: str = Query(min_length=1),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    return UserRead.from_entity(service.confirm_email(user_id, token))


@router.post("/request-password-reset", status_code=status.HTTP_202_ACCEPTED)
async def request_password_reset(
    payload: PasswordResetRequest,
    service: UserService = Depends(get_user_service),
) -> dict[str, str]:
    await service.request_password_reset(payload.email)
    return {"status": "sent"}


@router.post("/reset-password", status_code=status.HTTP_204_NO_CONTENT)
def reset_password(
    payload: ResetPassword,
    service: UserService = Depends(get_user_service),
) -> Response:
    service.reset_password(payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: str,
    _: TokenClaims = Depends(require_known_role),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    user = service.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return UserRead.from_entity(user)


@router.put("/{user_id}", response_model=UserUpdateResult)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    request: Request,
    _: TokenClaims = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> UserUpdateResult:
    """Update a user. Changing ``is_active`` hides or restores the user's products.

    The response carries the cascade outcome; a failed cascade does not undo
    the user update.
    """
    if payload.id != user_id:
        raise ConflictError(user_id, payload.id)
    return await service.update(payload, auth_token=get_bearer_token(request))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    _: TokenClaims = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> Response:
    service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
