import json

import httpx

from src.commerce.core.services import EmailSender
from src.commerce.runtime.config.config_data import EmailConfig


def _config(**overrides) -> EmailConfig:
    values = {
        "enabled": True,
        "api_url": "https://mail.test/send",
        "api_key": "key-123",
        "sender": "shop@example.com",
    }
    values.update(overrides)
    return EmailConfig(**values)


async def test_disabled_sender_only_logs():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        raise AssertionError("should not be called")

    sender = EmailSender(EmailConfig(enabled=False), transport=httpx.MockTransport(handler))

    assert await sender.send("to@example.com", "Hi", "Body") is False


async def test_posts_payload_to_provider():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(202)

    sender = EmailSender(_config(), transport=httpx.MockTransport(handler))

    assert await sender.send("to@example.com", "Hi", "Body") is True

    request = seen[0]
    body = json.loads(request.content)
    assert request.headers["Authorization"] == "Bearer key-123"
    assert request.headers["Idempotency-Key"].startswith("email:")
    assert body["from"] == {"email": "shop@example.com"}
    assert body["personalizations"][0]["to"] == [{"email": "to@example.com"}]


async def test_same_message_gets_same_idempotency_key():
    keys = []

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers["Idempotency-Key"])
        return httpx.Response(200)

    sender = EmailSender(_config(), transport=httpx.MockTransport(handler))
    await sender.send("to@example.com", "Hi", "Body")
    await sender.send("to@example.com", "Hi", "Body")
    await sender.send("to@example.com", "Hi", "Other body")

    assert keys[0] == keys[1] != keys[2]


async def test_provider_failures_are_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/down":
            raise httpx.ConnectError("down", request=request)
        return httpx.Response(500, text="boom")

    transport = httpx.MockTransport(handler)

    assert await EmailSender(_config(), transport=transport).send("to@example.com", "Hi", "Body") is False
    assert (
        await EmailSender(_config(api_url="https://mail.test/down"), transport=transport).send(
            "to@example.com", "Hi", "Body"
        )
        is False
    )


async def test_missing_provider_settings():
    sender = EmailSender(_config(api_url=None))

    assert await sender.send("to@example.com", "Hi", "Body") is False
