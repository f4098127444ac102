"""JWT verification service."""

import time
from typing import Final

from authlib.jose import JoseError, JsonWebToken
from loguru import logger

from src.commerce.core.exceptions import UnauthorizedError
from src.commerce.core.models.claims import TokenClaims
from src.commerce.runtime.context import get_config

MAX_JWT_CHARS: Final = 4096


class JwtVerificationService:
    """Verifies tokens issued by :class:`JwtGeneratorService`."""

    def verify_jwt(self, token: str, *, expected_purpose: str | None = None) -> TokenClaims:
        """Verify signature, issuer, audience and lifetime of ``token``.

        Access tokens carry no ``purpose`` claim; single-use tokens must carry
        exactly ``expected_purpose``.

        Raises:
            UnauthorizedError: If the token is malformed, expired, or fails any check
        """
        cfg = get_config()

        if not token or len(token) > MAX_JWT_CHARS or token.count(".") != 2:
            raise UnauthorizedError("Invalid JWT format")

        if not cfg.jwt.signing_secret:
            raise UnauthorizedError("JWT signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "values": [cfg.jwt.issuer]},
            "aud": {"essential": True, "values": list(cfg.jwt.audiences)},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }

        decoder = JsonWebToken(cfg.jwt.allowed_algorithms)
        try:
            claims = decoder.decode(token, cfg.jwt.signing_secret, claims_options=claims_options)
            claims.validate(leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("JWT rejected: {}", exc)
            raise UnauthorizedError(f"JWT error: {exc}") from exc

        iat = claims.get("iat")
        if iat is not None and int(iat) > int(time.time()) + cfg.jwt.clock_skew:
            raise UnauthorizedError("Invalid iat with skew")

        if claims.get("purpose") != expected_purpose:
            raise UnauthorizedError("Token not valid for this operation")

        return TokenClaims.from_jwt_payload(
            dict(claims),
            raw_token=token,
            roles_claim=cfg.jwt.roles_claim,
            email_claim=cfg.jwt.email_claim,
        )
