"""Transports that carry a user's activation change into the product store."""

from abc import ABC, abstractmethod

import httpx
from loguru import logger
from starlette.concurrency import run_in_threadpool

from src.commerce.core.exceptions import UpstreamCascadeError
from src.commerce.core.services.database.db_session import DbSessionService
from src.commerce.entities.service.product import ProductRepository

SOFT_DELETE = "soft-delete-by-owner"
RESTORE = "restore-by-owner"


class ProductCascade(ABC):
    @abstractmethod
    async def soft_delete_by_owner(self, user_id: str, auth_token: str | None) -> int:
        """Soft-delete every visible product of ``user_id``.

        Args:
            user_id: Owner whose products are hidden
            auth_token: Bearer token of the actor who triggered the change

        Returns:
            Number of products that changed state

        Raises:
            UpstreamCascadeError: If the product store could not apply the change
        """
        raise NotImplementedError

    @abstractmethod
    async def restore_by_owner(self, user_id: str, auth_token: str | None) -> int:
        """Restore every soft-deleted product of ``user_id``."""
        raise NotImplementedError


class LocalProductCascade(ProductCascade):
    """Applies the cascade directly to the product tables of this deployment.

    The database work runs in the threadpool, off the event loop.
    """

    def __init__(self, database_service: DbSessionService) -> None:
        self._database_service = database_service

    async def soft_delete_by_owner(self, user_id: str, auth_token: str | None) -> int:
        return await run_in_threadpool(self._apply, SOFT_DELETE, user_id)

    async def restore_by_owner(self, user_id: str, auth_token: str | None) -> int:
        return await run_in_threadpool(self._apply, RESTORE, user_id)

    def _apply(self, action: str, user_id: str) -> int:
        try:
            with self._database_service.session_scope() as session:
                repo = ProductRepository(session)
                if action == SOFT_DELETE:
                    return repo.soft_delete_by_owner(user_id)
                return repo.restore_by_owner(user_id)
        except Exception as exc:
            raise UpstreamCascadeError(user_id, action, str(exc)) from exc


class HttpProductCascade(ProductCascade):
    """Calls the product service's bulk endpoints, forwarding the caller's token."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def soft_delete_by_owner(self, user_id: str, auth_token: str | None) -> int:
        return await self._post(SOFT_DELETE, user_id, auth_token)

    async def restore_by_owner(self, user_id: str, auth_token: str | None) -> int:
        return await self._post(RESTORE, user_id, auth_token)

    async def _post(self, action: str, user_id: str, auth_token: str | None) -> int:
        if not auth_token:
            logger.warning("Skipping {} for user {}: no caller token to forward", action, user_id)
            raise UpstreamCascadeError(user_id, action, "no caller token to forward")

        url = f"{self._base_url}/api/products/{action}/{user_id}"
        headers = {
            "Authorization": f"Bearer {auth_token}",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(url, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamCascadeError(user_id, action, f"transport error: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise UpstreamCascadeError(
                user_id, action, f"product service returned {resp.status_code}: {resp.text[:200]}"
            )

        try:
            return int(resp.json().get("affected", 0))
        except (ValueError, AttributeError, TypeError):
            return 0
