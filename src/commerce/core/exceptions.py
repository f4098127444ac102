"""Domain exception hierarchy.

Services raise these; the HTTP layer turns them into JSON error responses
through a single exception handler.
"""

from typing import Any

from fastapi import status


class CommerceError(Exception):
    """Base exception for the product and user services."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
            "status_code": self.status_code,
        }


class NotFoundError(CommerceError):
    """Record absent, soft-deleted, or owned by someone else.

    All three cases produce the same error.
    """

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: str | None = None):
        details = {"resource": resource}
        if resource_id is not None:
            details["id"] = resource_id
        super().__init__(f"{resource} not found", details)


class UnauthorizedError(CommerceError):
    """Missing or invalid caller identity."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(CommerceError):
    """Authenticated caller lacks the required role."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"

    def __init__(self, message: str = "Access denied", required_roles: list[str] | None = None):
        details = {"required_roles": required_roles} if required_roles else None
        super().__init__(message, details)


class ValidationFailedError(CommerceError):
    """Input constraint violation, reported per field."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "VALIDATION_FAILED"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, {"errors": {field: [message]}})


class ConflictError(CommerceError):
    """Identifier in the path does not match the identifier in the body."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "ID_MISMATCH"

    def __init__(self, path_id: str, body_id: str):
        super().__init__(
            "Identifier mismatch between path and body",
            {"path_id": path_id, "body_id": body_id},
        )


class UpstreamCascadeError(CommerceError):
    """The product store rejected or never received a cascade call."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "UPSTREAM_CASCADE_FAILURE"

    def __init__(self, user_id: str, action: str, reason: str):
        self.user_id = user_id
        self.action = action
        super().__init__(
            f"Product cascade '{action}' failed for user {user_id}: {reason}",
            {"user_id": user_id, "action": action},
        )
