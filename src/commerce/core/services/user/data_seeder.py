from loguru import logger
from sqlmodel import Session

from src.commerce.core.security import hash_password
from src.commerce.entities.core.user import User, UserRepository
from src.commerce.runtime.context import get_config


class DataSeeder:
    """Creates the default administrator on an empty user store."""

    def __init__(self, db_session: Session):
        self._db_session = db_session
        self._user_repo = UserRepository(db_session)

    def seed(self) -> User | None:
        """Create the configured administrator unless that email already exists.

        Returns the created user, or ``None`` when nothing was done.
        """
        identity = get_config().identity
        seed = identity.admin_seed
        if not seed.enabled:
            logger.info("Admin seeding disabled")
            return None

        if self._user_repo.get_by_email(seed.email) is not None:
            logger.debug("Admin user {} already present", seed.email)
            return None

        admin = User(
            name=seed.name,
            email=seed.email,
            role=identity.admin_role,
            is_active=True,
            email_confirmed=True,
            password_hash=hash_password(seed.password),
        )
        try:
            created = self._user_repo.create(admin)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info("Seeded admin user {}", created.email)
        return created
