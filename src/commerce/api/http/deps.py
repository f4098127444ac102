"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.commerce.api.http.app_data import ApplicationDependencies
from src.commerce.core.exceptions import ForbiddenError, UnauthorizedError
from src.commerce.core.models.claims import TokenClaims
from src.commerce.core.policies import has_any_role
from src.commerce.core.services import (
    EmailSender,
    JwtGeneratorService,
    JwtVerificationService,
    ProductCascade,
    ProductService,
    UserService,
)
from src.commerce.runtime.context import get_config


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Yield a database session that is closed when the request finishes."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_jwt_verify_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return app_deps.jwt_verify_service


def get_jwt_generation_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> JwtGeneratorService:
    """Get the JWT generation service instance."""
    return app_deps.jwt_generation_service


def get_product_cascade(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> ProductCascade:
    return app_deps.product_cascade


def get_email_sender(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> EmailSender:
    return app_deps.email_sender


def get_product_service(db: Session = Depends(get_db_session)) -> ProductService:
    return ProductService(db)


def get_user_service(
    db: Session = Depends(get_db_session),
    cascade: ProductCascade = Depends(get_product_cascade),
    jwt_gen: JwtGeneratorService = Depends(get_jwt_generation_service),
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
    email_sender: EmailSender = Depends(get_email_sender),
) -> UserService:
    return UserService(db, cascade, jwt_gen, jwt_verify, email_sender)


def get_bearer_token(request: Request) -> str | None:
    """Return the raw bearer token of the request, if any."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


async def get_current_claims(
    request: Request,
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> TokenClaims:
    """Authenticate the request using a Bearer access token."""
    token = get_bearer_token(request)
    if token is None:
        raise UnauthorizedError("Missing Bearer token")

    claims = jwt_verify.verify_jwt(token)
    request.state.claims = claims
    request.state.roles = set(claims.roles)
    return claims


async def get_current_user_id(claims: TokenClaims = Depends(get_current_claims)) -> str:
    return claims.subject


async def require_known_role(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    """Require one of the configured identity roles, the admin role included."""
    identity = get_config().identity
    known_roles = list(dict.fromkeys([*identity.roles, identity.admin_role]))
    if not has_any_role(set(claims.roles), set(known_roles)):
        raise ForbiddenError(
            f"Missing required role: {' or '.join(known_roles)}", required_roles=known_roles
        )
    return claims


async def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    """Require the configured administrator role."""
    admin_role = get_config().identity.admin_role
    if not claims.has_role(admin_role):
        raise ForbiddenError(f"Missing required role: {admin_role}", required_roles=[admin_role])
    return claims
