"""Application error types shared by the services and the HTTP layer."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base class for errors that map onto an HTTP response.

    Subclasses fix the status code; ``code`` is the machine-readable
    identifier returned in the ``{"error": {...}}`` body.
    """

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: Any | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Body of the ``error`` member of an error response."""
        body: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    """Malformed or out-of-range input."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    """Requested entity does not exist."""

    status_code = 404
    default_code = "NOT_FOUND"


class InternalError(AppError):
    """Unexpected persistence or runtime failure; message stays generic."""

    status_code = 500
    default_code = "INTERNAL_ERROR"


def not_found(entity: str, entity_id: str) -> NotFoundError:
    """Return the error raised for a missing entity."""
    return NotFoundError(f"{entity} not found", details={"id": entity_id})
