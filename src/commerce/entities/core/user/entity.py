"""User domain entity."""

from typing import Any

from pydantic import Field

from src.commerce.entities.core._base import Entity


class User(Entity):
    """User entity representing an identity that can own products.

    This is the domain model that contains business logic and validation.
    It inherits from Entity to get auto-generated UUID identifiers.
    """

    name: str = Field(description="User's display name")
    email: str = Field(description="User's email address, unique across users")
    role: str = Field(default="User", description="Role granted to the user")
    is_active: bool = Field(default=True, description="Whether the user is active")
    email_confirmed: bool = Field(default=False, description="Whether the email was confirmed")
    password_hash: str | None = Field(default=None, exclude=True, repr=False)

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.email == other.email
            and self.role == other.role
            and self.is_active == other.is_active
            and self.email_confirmed == other.email_confirmed
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.email,
            self.role,
            self.is_active,
            self.email_confirmed,
        ))
