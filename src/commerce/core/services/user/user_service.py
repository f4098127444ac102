import asyncio
import hashlib
from collections.abc import Callable
from urllib.parse import urlencode

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from src.commerce.core.exceptions import (
    NotFoundError,
    UnauthorizedError,
    UpstreamCascadeError,
    ValidationFailedError,
)
from src.commerce.core.models.user import (
    CascadeStatus,
    LoginRequest,
    ResetPassword,
    TokenResponse,
    UserCreate,
    UserRead,
    UserUpdate,
    UserUpdateResult,
)
from src.commerce.core.security import hash_password, needs_rehash, verify_password
from src.commerce.core.services.email.email_sender import EmailSender
from src.commerce.core.services.jwt.jwt_gen import JwtGeneratorService
from src.commerce.core.services.jwt.jwt_verify import JwtVerificationService
from src.commerce.core.services.product.cascade import RESTORE, SOFT_DELETE, ProductCascade
from src.commerce.entities.core._base import utcnow
from src.commerce.entities.core.user import User, UserRepository
from src.commerce.runtime.context import get_config

EMAIL_CONFIRMATION = "email_confirmation"
PASSWORD_RESET = "password_reset"


def cascade_action_for(previously_active: bool, requested_active: bool) -> str | None:
    """Map an activation transition to the product cascade it requires.

    Only a change of the flag triggers a cascade; keeping it as is never does.
    """
    if previously_active and not requested_active:
        return SOFT_DELETE
    if not previously_active and requested_active:
        return RESTORE
    return None


def _password_fingerprint(password_hash: str | None) -> str:
    # Changes whenever the password does, so a reset token works only once.
    return hashlib.sha256((password_hash or "").encode("utf-8")).hexdigest()[:16]


class UserService:
    def __init__(
        self,
        db_session: Session,
        cascade: ProductCascade,
        jwt_generator: JwtGeneratorService | None = None,
        jwt_verifier: JwtVerificationService | None = None,
        email_sender: EmailSender | None = None,
    ):
        self._db_session = db_session
        self._user_repo = UserRepository(db_session)
        self._cascade = cascade
        self._jwt_generator = jwt_generator or JwtGeneratorService()
        self._jwt_verifier = jwt_verifier or JwtVerificationService()
        self._email_sender = email_sender or EmailSender()

    def get_by_id(self, user_id: str) -> User | None:
        return self._user_repo.get(user_id)

    def list_all(self) -> list[User]:
        return self._user_repo.list_all()

    def _check_role(self, role: str) -> None:
        roles = get_config().identity.roles
        if role not in roles:
            raise ValidationFailedError("role", f"Role must be one of: {', '.join(roles)}")

    def _check_email_free(self, email: str, user_id: str | None = None) -> None:
        existing = self._user_repo.get_by_email(email)
        if existing is not None and existing.id != user_id:
            raise ValidationFailedError("email", "Email is already registered")

    def _commit(self) -> None:
        try:
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

    async def create(self, data: UserCreate) -> User:
        """Register a new user: active, email unconfirmed, never cascades."""
        created = await run_in_threadpool(self._insert_user, data)
        logger.info("User {} registered with role {}", created.id, created.role)

        await self._send_confirmation(created)
        return created

    def _insert_user(self, data: UserCreate) -> User:
        self._check_role(data.role)
        self._check_email_free(data.email)

        user = User(
            name=data.name,
            email=data.email,
            role=data.role,
            is_active=True,
            email_confirmed=False,
            password_hash=hash_password(data.password),
        )
        return self._write(lambda: self._user_repo.create(user))

    def _write(self, operation: Callable[[], User]) -> User:
        """Run a repository write and commit it.

        A unique-email violation raced in by another request surfaces as the
        same validation failure as the up-front check.
        """
        try:
            result = operation()
            self._db_session.commit()
        except IntegrityError as exc:
            self._db_session.rollback()
            raise ValidationFailedError("email", "Email is already registered") from exc
        except Exception:
            self._db_session.rollback()
            raise
        return result

    async def update(self, data: UserUpdate, auth_token: str | None = None) -> UserUpdateResult:
        """Apply an administrative update, then cascade an activation change.

        The user row is committed before the product cascade runs. A cascade
        failure does not undo the update; it is logged and reported as
        ``CascadeStatus.FAILED`` in the result.

        Raises:
            NotFoundError: If no user has ``data.id``
            ValidationFailedError: If the role is unknown or the email is taken
        """
        previously_active, updated = await run_in_threadpool(self._apply_update, data)

        action = cascade_action_for(previously_active, data.is_active)
        if action is None:
            return UserUpdateResult(user=UserRead.from_entity(updated))

        logger.info(
            "User {} activation {} -> {}, cascading {}",
            updated.id,
            previously_active,
            data.is_active,
            action,
        )
        # The cascade keeps running if the request is cancelled while awaiting it.
        status, affected = await asyncio.shield(self._run_cascade(action, updated.id, auth_token))
        return UserUpdateResult(
            user=UserRead.from_entity(updated),
            cascade=status,
            cascade_action=action,
            affected_products=affected,
        )

    def _apply_update(self, data: UserUpdate) -> tuple[bool, User]:
        existing = self._user_repo.get(data.id)
        if existing is None:
            raise NotFoundError("User", data.id)

        self._check_role(data.role)
        self._check_email_free(data.email, user_id=existing.id)

        changed = existing.model_copy(
            update={
                "name": data.name,
                "email": data.email,
                "role": data.role,
                "is_active": data.is_active,
                "updated_at": utcnow(),
            }
        )
        return existing.is_active, self._write(lambda: self._user_repo.update(changed))

    async def _run_cascade(
        self, action: str, user_id: str, auth_token: str | None
    ) -> tuple[CascadeStatus, int | None]:
        try:
            if action == SOFT_DELETE:
                affected = await self._cascade.soft_delete_by_owner(user_id, auth_token)
            else:
                affected = await self._cascade.restore_by_owner(user_id, auth_token)
        except UpstreamCascadeError as exc:
            logger.opt(exception=exc).error(
                "Cascade {} failed for user {}; user update stays committed", action, user_id
            )
            return CascadeStatus.FAILED, None
        except Exception as exc:
            # Nobody may be awaiting a shielded cascade, so it must not raise.
            logger.opt(exception=exc).error(
                "Unexpected error in cascade {} for user {}", action, user_id
            )
            return CascadeStatus.FAILED, None

        logger.info("Cascade {} applied for user {}: {} products", action, user_id, affected)
        return CascadeStatus.APPLIED, affected

    def delete(self, user_id: str) -> None:
        try:
            deleted = self._user_repo.delete(user_id)
        except Exception:
            self._db_session.rollback()
            raise
        if not deleted:
            raise NotFoundError("User", user_id)
        self._commit()
        logger.info("User {} deleted", user_id)

    def login(self, credentials: LoginRequest) -> TokenResponse:
        """Exchange email and password for an access token.

        Unknown email, wrong password and a deactivated account all fail the
        same way.
        """
        user = self._user_repo.get_by_email(credentials.email)
        if user is None or not verify_password(credentials.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        if not user.is_active:
            raise UnauthorizedError("Invalid email or password")

        if needs_rehash(user.password_hash):
            self._user_repo.update(user.model_copy(update={"password_hash": hash_password(credentials.password)}))
            self._commit()

        ttl = get_config().jwt.access_token_ttl_seconds
        token = self._jwt_generator.generate_access_token(
            user_id=user.id, roles=[user.role], email=user.email, expires_in_seconds=ttl
        )
        return TokenResponse(access_token=token, expires_in=ttl)

    def _link(self, path: str, **params: str) -> str:
        base = get_config().identity.public_base_url.rstrip("/")
        return f"{base}{path}?{urlencode(params)}"

    async def _send_confirmation(self, user: User) -> None:
        token = self._jwt_generator.generate_purpose_token(
            user.id,
            EMAIL_CONFIRMATION,
            get_config().identity.email_confirmation_ttl_seconds,
            email=user.email,
        )
        link = self._link("/api/users/confirm-email", user_id=user.id, token=token)
        await self._email_sender.send(
            user.email,
            "Confirm your email",
            f"Please confirm your account by <a href='{link}'>clicking here</a>.",
        )

    def _verify_purpose_token(self, token: str, purpose: str, user_id: str):
        try:
            claims = self._jwt_verifier.verify_jwt(token, expected_purpose=purpose)
        except UnauthorizedError as exc:
            raise ValidationFailedError("token", "Invalid or expired token") from exc
        if claims.subject != user_id:
            raise ValidationFailedError("token", "Invalid or expired token")
        return claims

    def confirm_email(self, user_id: str, token: str) -> User:
        claims = self._verify_purpose_token(token, EMAIL_CONFIRMATION, user_id)
        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        if claims.email is None or claims.email.lower() != user.email.lower():
            raise ValidationFailedError("token", "Invalid or expired token")

        if user.email_confirmed:
            return user

        confirmed = self._user_repo.update(
            user.model_copy(update={"email_confirmed": True, "updated_at": utcnow()})
        )
        self._commit()
        logger.info("User {} confirmed email", user_id)
        return confirmed

    async def request_password_reset(self, email: str) -> None:
        user = await run_in_threadpool(self._user_repo.get_by_email, email)
        if user is None:
            raise NotFoundError("User")

        token = self._jwt_generator.generate_purpose_token(
            user.id,
            PASSWORD_RESET,
            get_config().identity.password_reset_ttl_seconds,
            pwd=_password_fingerprint(user.password_hash),
        )
        link = self._link("/reset-password", user_id=user.id, token=token)
        await self._email_sender.send(
            user.email,
            "Reset your password",
            f"Reset your password by <a href='{link}'>clicking here</a>.",
        )

    def reset_password(self, data: ResetPassword) -> None:
        claims = self._verify_purpose_token(data.token, PASSWORD_RESET, data.user_id)
        user = self._user_repo.get(data.user_id)
        if user is None:
            raise NotFoundError("User", data.user_id)
        if claims.custom_claims.get("pwd") != _password_fingerprint(user.password_hash):
            raise ValidationFailedError("token", "Invalid or expired token")

        self._user_repo.update(
            user.model_copy(
                update={"password_hash": hash_password(data.new_password), "updated_at": utcnow()}
            )
        )
        self._commit()
        logger.info("User {} reset password", data.user_id)
