"""Unit tests for JWT generation and verification."""

import time

import pytest
from authlib.jose import jwt

from src.commerce.core.exceptions import UnauthorizedError
from src.commerce.core.models.claims import TokenClaims
from src.commerce.core.services import JwtGeneratorService, JwtVerificationService
from src.commerce.runtime.config.config_data import ConfigData, JWTConfig
from src.commerce.runtime.context import get_config, with_context


def _encode(payload: dict, secret: str | None = None, alg: str = "HS256") -> str:
    token = jwt.encode({"alg": alg}, payload, secret or get_config().jwt.signing_secret)
    return token.decode() if isinstance(token, bytes) else token


def _valid_payload(**overrides) -> dict:
    cfg = get_config().jwt
    now = int(time.time())
    payload = {
        "iss": cfg.issuer,
        "sub": "user-1",
        "aud": cfg.audiences[0],
        "iat": now,
        "exp": now + 60,
        "roles": ["User"],
    }
    payload.update(overrides)
    return payload


class TestJwtRoundTrip:
    def test_access_token_claims(self):
        token = JwtGeneratorService().generate_access_token(
            user_id="user-1", roles=["Admin"], email="a@example.com"
        )

        claims = JwtVerificationService().verify_jwt(token)

        assert isinstance(claims, TokenClaims)
        assert claims.subject == "user-1"
        assert claims.roles == ["Admin"]
        assert claims.email == "a@example.com"
        assert claims.issuer == get_config().jwt.issuer
        assert claims.jti
        assert claims.raw_token == token
        assert claims.token_type == "access_token"

    def test_purpose_token_requires_matching_purpose(self):
        token = JwtGeneratorService().generate_purpose_token("user-1", "password_reset", 60)
        verifier = JwtVerificationService()

        assert verifier.verify_jwt(token, expected_purpose="password_reset").purpose == "password_reset"
        with pytest.raises(UnauthorizedError):
            verifier.verify_jwt(token)
        with pytest.raises(UnauthorizedError):
            verifier.verify_jwt(token, expected_purpose="email_confirmation")


class TestJwtRejections:
    @pytest.mark.parametrize(
        "token", ["", "not-a-jwt", "a.b", "a.b.c.d", "x" * 5000]
    )
    def test_malformed(self, token):
        with pytest.raises(UnauthorizedError):
            JwtVerificationService().verify_jwt(token)

    def test_wrong_signature(self):
        with pytest.raises(UnauthorizedError):
            JwtVerificationService().verify_jwt(_encode(_valid_payload(), secret="another-secret"))

    def test_expired(self):
        past = int(time.time()) - 3600
        token = _encode(_valid_payload(iat=past - 60, exp=past))

        with pytest.raises(UnauthorizedError):
            JwtVerificationService().verify_jwt(token)

    def test_wrong_issuer(self):
        with pytest.raises(UnauthorizedError):
            JwtVerificationService().verify_jwt(_encode(_valid_payload(iss="https://evil.example")))

    def test_wrong_audience(self):
        with pytest.raises(UnauthorizedError):
            JwtVerificationService().verify_jwt(_encode(_valid_payload(aud="other-api")))

    def test_missing_subject(self):
        payload = _valid_payload()
        del payload["sub"]

        with pytest.raises(UnauthorizedError):
            JwtVerificationService().verify_jwt(_encode(payload))

    def test_disallowed_algorithm(self):
        token = _encode(_valid_payload(), alg="HS512")

        with pytest.raises(UnauthorizedError):
            JwtVerificationService().verify_jwt(token)

    def test_issued_in_the_future(self):
        future = int(time.time()) + 3600
        token = _encode(_valid_payload(iat=future, exp=future + 60))

        with pytest.raises(UnauthorizedError):
            JwtVerificationService().verify_jwt(token)

    def test_token_from_other_secret_config(self):
        token = JwtGeneratorService().generate_access_token(user_id="user-1")

        with with_context(ConfigData(jwt=JWTConfig(signing_secret="rotated-secret"))):
            with pytest.raises(UnauthorizedError):
                JwtVerificationService().verify_jwt(token)


def test_claims_from_payload_maps_custom_claims():
    claims = TokenClaims.from_jwt_payload(
        {
            "iss": "i",
            "sub": "s",
            "aud": "a",
            "exp": 2,
            "iat": 1,
            "roles": "Admin",
            "tenant": "acme",
        }
    )

    assert claims.roles == ["Admin"]
    assert claims.custom_claims == {"tenant": "acme"}
    assert claims.all_claims["tenant"] == "acme"
    assert claims.has_role("Admin")
