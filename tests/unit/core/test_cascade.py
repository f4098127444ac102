"""Unit tests for the product cascade transports."""

import httpx
import pytest
from sqlmodel import SQLModel

from src.commerce.core.exceptions import UpstreamCascadeError
from src.commerce.core.services import HttpProductCascade, LocalProductCascade, ProductService
from tests.utils import make_product


class TestHttpProductCascade:
    async def test_forwards_caller_token(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"user_id": "u1", "affected": 3})

        cascade = HttpProductCascade("http://products.test/", transport=httpx.MockTransport(handler))

        affected = await cascade.soft_delete_by_owner("u1", "caller-token")

        assert affected == 3
        assert seen[0].method == "POST"
        assert str(seen[0].url) == "http://products.test/api/products/soft-delete-by-owner/u1"
        assert seen[0].headers["Authorization"] == "Bearer caller-token"

    async def test_restore_endpoint(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json={"affected": 0})

        cascade = HttpProductCascade("http://products.test", transport=httpx.MockTransport(handler))

        assert await cascade.restore_by_owner("u1", "caller-token") == 0
        assert seen == ["/api/products/restore-by-owner/u1"]

    @pytest.mark.parametrize("status", [401, 403, 500, 503])
    async def test_non_success_status_raises(self, status):
        cascade = HttpProductCascade(
            "http://products.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(status, text="nope")),
        )

        with pytest.raises(UpstreamCascadeError) as exc_info:
            await cascade.soft_delete_by_owner("u1", "caller-token")
        assert exc_info.value.details == {"user_id": "u1", "action": "soft-delete-by-owner"}

    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        cascade = HttpProductCascade("http://products.test", transport=httpx.MockTransport(handler))

        with pytest.raises(UpstreamCascadeError):
            await cascade.restore_by_owner("u1", "caller-token")

    async def test_without_caller_token_nothing_is_sent(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"affected": 1})

        cascade = HttpProductCascade("http://products.test", transport=httpx.MockTransport(handler))

        with pytest.raises(UpstreamCascadeError):
            await cascade.soft_delete_by_owner("u1", None)
        assert calls == []


class TestLocalProductCascade:
    async def test_applies_to_owner_products(self, session, database_service):
        product = make_product(session, "u1")
        make_product(session, "u2")
        cascade = LocalProductCascade(database_service)

        assert await cascade.soft_delete_by_owner("u1", None) == 1
        session.expire_all()
        assert ProductService(session).get_by_id(product.id) is None

        assert await cascade.restore_by_owner("u1", None) == 1
        session.expire_all()
        assert ProductService(session).get_by_id(product.id) is not None

    async def test_database_errors_become_cascade_errors(self, engine, database_service):
        cascade = LocalProductCascade(database_service)
        SQLModel.metadata.drop_all(engine)

        with pytest.raises(UpstreamCascadeError):
            await cascade.soft_delete_by_owner("u1", None)
