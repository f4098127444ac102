import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from loguru import logger

from src.commerce.core.exceptions import CommerceError
from src.commerce.runtime.config.config_data import ConfigData
from src.commerce.runtime.context import get_config

_REGISTERED_CLAIMS = {"iss", "sub", "aud", "exp", "iat", "nbf", "jti"}


class JwtGeneratorService:
    """Service for generating JWT tokens for API authentication."""

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
        algorithm: str = "HS256",
        include_jti: bool = True,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim, the user id
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime (defaults to the configured access token lifetime)
            algorithm: Signing algorithm, must be in the configured allowlist
            include_jti: Whether to include a unique JWT ID claim

        Returns:
            Signed JWT token string

        Raises:
            CommerceError: If the secret is missing, the algorithm is not allowed
                or encoding fails
        """
        config: ConfigData = get_config()
        secret = config.jwt.signing_secret
        if not secret:
            raise CommerceError("JWT signing secret not configured")

        if algorithm not in config.jwt.allowed_algorithms:
            logger.debug(
                "Attempted to use disallowed algorithm: {}, only {} are allowed",
                algorithm,
                config.jwt.allowed_algorithms,
            )
            raise CommerceError(f"Algorithm {algorithm} not allowed")

        now = int(time.time())
        ttl = expires_in_seconds or config.jwt.access_token_ttl_seconds
        audiences = config.jwt.audiences or ["commerce-api"]

        payload: dict[str, Any] = {
            "iss": config.jwt.issuer,
            "sub": subject,
            "aud": audiences[0] if len(audiences) == 1 else audiences,
            "exp": now + ttl,
            "iat": now,
            "nbf": now,
        }
        if include_jti:
            payload["jti"] = generate_token(16)

        if claims:
            payload.update({k: v for k, v in claims.items() if k not in _REGISTERED_CLAIMS})

        try:
            header = {"alg": algorithm, "typ": "JWT"}
            token = jwt.encode(header, payload, secret)
            return token.decode() if isinstance(token, bytes) else token
        except JoseError as e:
            raise CommerceError(f"JWT encoding failed: {e}") from e

    def generate_access_token(
        self,
        user_id: str,
        roles: list[str] | None = None,
        email: str | None = None,
        expires_in_seconds: int | None = None,
        **extra_claims,
    ) -> str:
        """Generate an access token carrying the user's roles and email.

        Example:
            token = generate_access_token(
                user_id="user123",
                roles=["User"],
                email="user@example.com",
            )
        """
        config = get_config()
        claims: dict[str, Any] = {}

        if roles:
            claims[config.jwt.roles_claim] = roles
        if email:
            claims[config.jwt.email_claim] = email

        claims.update(extra_claims)
        return self.generate_jwt(subject=user_id, claims=claims, expires_in_seconds=expires_in_seconds)

    def generate_purpose_token(
        self,
        user_id: str,
        purpose: str,
        expires_in_seconds: int,
        **extra_claims,
    ) -> str:
        """Generate a short-lived token usable only for ``purpose``.

        Used for email confirmation and password reset links.
        """
        claims = {"purpose": purpose, **extra_claims}
        return self.generate_jwt(
            subject=user_id, claims=claims, expires_in_seconds=expires_in_seconds
        )
