"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./commerce.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class JWTConfig(BaseModel):
    """JWT issuance and validation configuration."""

    signing_secret: str = Field(
        default="dev-signing-secret-change-me",
        description="HMAC secret used to sign and verify access tokens",
    )
    issuer: str = Field(default="commerce-identity", description="Issuer (iss) claim")
    audiences: list[str] = Field(
        default_factory=lambda: ["commerce-api"],
        description="Accepted audiences; the first one is used when issuing",
    )
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"], description="Allowed signing algorithms"
    )
    access_token_ttl_seconds: int = Field(
        default=1800, description="Access token lifetime (30 minutes)"
    )
    clock_skew: int = Field(default=30, description="Allowed clock skew in seconds")
    roles_claim: str = Field(default="roles", description="Claim name for user roles")
    email_claim: str = Field(default="email", description="Claim name for email address")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["plain", "json"] = Field(
        default="plain", description="Format used for the file sink"
    )
    file: str | None = Field(default=None, description="Optional log file path")
    max_size_mb: int = Field(default=10, description="Rotate the log file at this size")
    backup_count: int = Field(default=5, description="Number of rotated files to keep")


class CascadeConfig(BaseModel):
    """How user activation changes reach the product store."""

    mode: Literal["local", "http"] = Field(
        default="local",
        description="local: same process and database; http: call the product service",
    )
    product_service_url: str = Field(
        default="http://localhost:8000", description="Base URL of the product service"
    )
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout for cascade calls")


class EmailConfig(BaseModel):
    """Outbound email provider configuration."""

    enabled: bool = Field(default=False, description="Send emails through the provider")
    api_url: str | None = Field(default=None, description="HTTP mail provider endpoint")
    api_key: str | None = Field(default=None, description="Provider API key")
    sender: str = Field(default="no-reply@example.com", description="From address")
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout for the provider")


class AdminSeedConfig(BaseModel):
    """Default administrator created by the data seeder."""

    enabled: bool = Field(default=True, description="Create the administrator if missing")
    name: str = Field(default="Administrator")
    email: str = Field(default="admin@example.com")
    password: str = Field(default="ChangeMe123!")


class IdentityConfig(BaseModel):
    """User identity configuration."""

    roles: list[str] = Field(
        default_factory=lambda: ["Admin", "User"], description="Known user roles"
    )
    admin_role: str = Field(default="Admin", description="Role allowed to manage users")
    public_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL used in confirmation and password reset links",
    )
    email_confirmation_ttl_seconds: int = Field(default=86400)
    password_reset_ttl_seconds: int = Field(default=3600)
    admin_seed: AdminSeedConfig = Field(default_factory=AdminSeedConfig)


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    cascade: CascadeConfig = Field(
        default_factory=CascadeConfig, description="Product cascade configuration"
    )
    email: EmailConfig = Field(
        default_factory=EmailConfig, description="Email configuration"
    )
    identity: IdentityConfig = Field(
        default_factory=IdentityConfig, description="Identity configuration"
    )
