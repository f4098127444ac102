import hashlib

import httpx
from loguru import logger

from src.commerce.runtime.config.config_data import EmailConfig
from src.commerce.runtime.context import get_config


def _idempotency_key(to: str, subject: str, body: str) -> str:
    """Stable key so the provider won't send duplicates across retries."""
    payload_hash = hashlib.sha256(
        (to + "\x1f" + subject + "\x1f" + body).encode("utf-8")
    ).hexdigest()
    return f"email:{payload_hash}"


class EmailSender:
    """Sends transactional email through an HTTP provider.

    Delivery problems are logged and reported through the return value; they
    never propagate to the caller.
    """

    def __init__(
        self,
        config: EmailConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or get_config().email
        self._transport = transport

    async def send(self, to: str, subject: str, body: str) -> bool:
        cfg = self._config
        if not cfg.enabled:
            logger.info("Email disabled; would send '{}' to {}:\n{}", subject, to, body)
            return False

        if not cfg.api_url or not cfg.api_key:
            logger.error("Email provider not configured; dropping '{}' to {}", subject, to)
            return False

        payload = {
            "from": {"email": cfg.sender},
            "personalizations": [{"to": [{"email": to}], "subject": subject}],
            "content": [{"type": "text/html", "value": body}],
        }
        headers = {
            "Authorization": f"Bearer {cfg.api_key}",
            "Idempotency-Key": _idempotency_key(to, subject, body),
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=cfg.timeout_seconds, transport=self._transport) as client:
                resp = await client.post(cfg.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Email to {} failed: {}", to, exc)
            return False

        if 200 <= resp.status_code < 300:
            logger.info("Email '{}' sent to {}", subject, to)
            return True

        logger.error("Email send failed {}: {}", resp.status_code, resp.text[:200])
        return False
