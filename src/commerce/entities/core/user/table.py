"""User database table model."""

from sqlalchemy import Column, Index, String, func
from sqlmodel import Field

from src.commerce.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    name: str = Field(sa_column=Column(String(50), nullable=False))
    email: str = Field(sa_column=Column(String(320), nullable=False))
    role: str = Field(default="User", sa_column=Column(String(64), nullable=False))
    is_active: bool = Field(default=True, nullable=False)
    email_confirmed: bool = Field(default=False, nullable=False)
    password_hash: str | None = Field(default=None, sa_column=Column(String(512), nullable=True))


# Emails are unique regardless of case, matching UserRepository.get_by_email.
Index("uq_user_email_lower", func.lower(UserTable.__table__.c.email), unique=True)
