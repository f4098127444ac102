"""User request and response models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from src.commerce.entities.core.user import User


class UserCreate(BaseModel):
    """Public registration payload."""

    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    role: str = Field(min_length=1)


class UserUpdate(BaseModel):
    """Administrative update payload; the body id must match the path id."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    role: str = Field(min_length=1)
    is_active: bool


class UserRead(BaseModel):
    """User as returned to API callers. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: str
    is_active: bool
    email_confirmed: bool
    created_at: datetime
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def _updated_not_before_created(self) -> "UserRead":
        if self.updated_at is not None and self.updated_at < self.created_at:
            raise ValueError("updated_at cannot be earlier than created_at")
        return self

    @classmethod
    def from_entity(cls, user: User) -> "UserRead":
        return cls.model_validate(user, from_attributes=True)


class CascadeStatus(StrEnum):
    """What happened to the user's products after an update."""

    NONE = "none"
    APPLIED = "applied"
    FAILED = "failed"


class UserUpdateResult(BaseModel):
    """Outcome of an update: the committed user plus the cascade outcome."""

    user: UserRead
    cascade: CascadeStatus = CascadeStatus.NONE
    cascade_action: str | None = None
    affected_products: int | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class PasswordResetRequest(BaseModel):
    email: EmailStr


class ResetPassword(BaseModel):
    user_id: str = Field(min_length=1)
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=128)
