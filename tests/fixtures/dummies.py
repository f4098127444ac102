from __future__ import annotations

from dataclasses import dataclass

from src.commerce.core.exceptions import UpstreamCascadeError
from src.commerce.core.services import EmailSender, ProductCascade


@dataclass
class SentEmail:
    to: str
    subject: str
    body: str


class RecordingEmailSender(EmailSender):
    """Keeps every message instead of delivering it."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sent: list[SentEmail] = []

    async def send(self, to: str, subject: str, body: str) -> bool:
        self.sent.append(SentEmail(to, subject, body))
        return True


class FailingProductCascade(ProductCascade):
    """Cascade whose product store is always unreachable."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    async def soft_delete_by_owner(self, user_id: str, auth_token: str | None) -> int:
        self.calls.append(("soft-delete-by-owner", user_id))
        raise UpstreamCascadeError(user_id, "soft-delete-by-owner", "connection refused")

    async def restore_by_owner(self, user_id: str, auth_token: str | None) -> int:
        self.calls.append(("restore-by-owner", user_id))
        raise UpstreamCascadeError(user_id, "restore-by-owner", "connection refused")
