from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from src.commerce.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
    LocalProductCascade,
)
from src.commerce.entities.core.user import User, UserRepository
from src.commerce.runtime.config.config_data import EmailConfig
from src.commerce.runtime.context import get_config
from tests.fixtures.dummies import RecordingEmailSender

# Models will be imported within fixtures to control timing


@pytest.fixture
def engine() -> Generator[Engine]:
    """In-memory database shared by every session of one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from src.commerce.entities.core.user import UserTable  # noqa: F401
    from src.commerce.entities.service.product import ProductTable  # noqa: F401

    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session]:
    """Create a fresh database session for testing."""
    with Session(engine) as session:
        try:
            yield session
        finally:
            session.rollback()
            session.close()


@pytest.fixture
def database_service(engine: Engine) -> DbSessionService:
    return DbSessionService(engine=engine)


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender(EmailConfig(enabled=False))


@pytest.fixture
def user_factory(session: Session) -> Callable[..., User]:
    """Persist a user directly through the repository."""

    def _make_user(
        name: str = "Test User",
        email: str | None = None,
        role: str = "User",
        is_active: bool = True,
    ) -> User:
        repo = UserRepository(session)
        user = User(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}.{len(repo.list_all())}@example.com",
            role=role,
            is_active=is_active,
        )
        created = repo.create(user)
        session.commit()
        return created

    return _make_user


@pytest.fixture
def token_factory() -> Callable[..., str]:
    """Issue access tokens the application accepts."""
    generator = JwtGeneratorService()

    def _make_token(user_id: str, roles: list[str] | None = None, email: str | None = None) -> str:
        return generator.generate_access_token(user_id=user_id, roles=roles or ["User"], email=email)

    return _make_token


@pytest.fixture
def auth_headers(token_factory: Callable[..., str]) -> Callable[..., dict[str, str]]:
    def _headers(user_id: str, roles: list[str] | None = None) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_factory(user_id, roles)}"}

    return _headers


@pytest.fixture
def admin_headers(auth_headers: Callable[..., dict[str, str]]) -> dict[str, str]:
    return auth_headers("admin-actor", [get_config().identity.admin_role])


@pytest.fixture
def client(
    database_service: DbSessionService, email_sender: RecordingEmailSender
) -> Generator[TestClient]:
    """TestClient wired to the in-memory database and a recording email sender."""
    from src.commerce.api.http.app import app
    from src.commerce.api.http.app_data import ApplicationDependencies

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        jwt_verify_service=JwtVerificationService(),
        jwt_generation_service=JwtGeneratorService(),
        product_cascade=LocalProductCascade(database_service),
        email_sender=email_sender,
    )
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.state.app_dependencies = None
