"""Structured view of verified JWT claims."""

from typing import Any

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Structured representation of JWT token claims."""

    # Token metadata
    raw_token: str = Field(default="", description="Original JWT token")
    token_type: str = Field(default="access_token", description="Token type")

    # Registered claims
    issuer: str = Field(description="Issuer")
    subject: str = Field(description="Subject (user ID)")
    audience: str | list[str] = Field(description="Audience")
    expires_at: int = Field(description="Expiration time")
    issued_at: int = Field(description="Issued at")
    not_before: int | None = Field(default=None, description="Not before")
    jti: str | None = Field(default=None, description="JWT ID (unique token identifier)")

    # User claims
    email: str | None = Field(default=None, description="Email address")
    name: str | None = Field(default=None, description="Display name")
    roles: list[str] = Field(default_factory=list, description="User roles")
    purpose: str | None = Field(default=None, description="Single-use token purpose")

    custom_claims: dict[str, Any] = Field(
        default_factory=dict, description="Custom or additional claims"
    )

    all_claims: dict[str, Any] = Field(
        default_factory=dict, description="All claims (including custom claims)"
    )

    @classmethod
    def from_jwt_payload(
        cls,
        payload: dict[str, Any],
        raw_token: str = "",
        roles_claim: str = "roles",
        email_claim: str = "email",
    ) -> "TokenClaims":
        """Create TokenClaims from JWT payload dictionary."""
        claim_mapping = {
            "iss": "issuer",
            "sub": "subject",
            "aud": "audience",
            "exp": "expires_at",
            "iat": "issued_at",
            "nbf": "not_before",
            roles_claim: "roles",
            email_claim: "email",
        }
        known_fields = set(cls.model_fields) - {
            "custom_claims",
            "all_claims",
            "raw_token",
            "token_type",
        }

        extracted: dict[str, Any] = {"all_claims": dict(payload)}
        extra: dict[str, Any] = {}

        for key, value in payload.items():
            mapped_field = claim_mapping.get(key, key)
            if mapped_field in known_fields:
                extracted[mapped_field] = value
            else:
                extra[key] = value

        roles = extracted.get("roles")
        if isinstance(roles, str):
            extracted["roles"] = [roles]

        extracted["raw_token"] = raw_token
        extracted["token_type"] = "purpose_token" if extracted.get("purpose") else "access_token"
        extracted["custom_claims"] = extra

        return cls(**extracted)

    def has_role(self, role: str) -> bool:
        return role in self.roles
