"""Domain errors raised by the reminder pipeline.

Every error is tagged as either a client error (the caller can fix the
request) or a server error. The HTTP layer reads that tag to pick the status
code; the core never decides on a response itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import status


@dataclass(frozen=True)
class ErrorDetail:
    message: str
    path: str | None = None

    def as_dict(self) -> dict[str, str]:
        payload = {"message": self.message}
        if self.path is not None:
            payload["path"] = self.path
        return payload


class ReminderServiceError(Exception):
    """Base class for errors surfaced by the reminder service."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    client_error: bool = False
    default_message = "An error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: list[ErrorDetail] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details: list[ErrorDetail] = list(details or [])
        self.cause = cause
        self.context: list[str] = []
        if cause is not None:
            self.__cause__ = cause

    def add_context(self, message: str) -> ReminderServiceError:
        """Record the operation that was running when the error surfaced."""
        self.context.append(message)
        return self

    @property
    def display_message(self) -> str:
        # The outermost context names the operation the caller asked for.
        return self.context[-1] if self.context else self.message

    def to_response(self) -> dict[str, Any]:
        details = self.details or [ErrorDetail(self.message)]
        return {
            "message": self.display_message,
            "details": [detail.as_dict() for detail in details],
        }


class ValidationError(ReminderServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    client_error = True
    default_message = "A validation error occurred"


class NotFoundError(ReminderServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    client_error = True
    default_message = "Reminder not found"


class PersistenceError(ReminderServiceError):
    default_message = "The store returned an unexpected result"


class UpstreamLookupError(ReminderServiceError):
    default_message = "Related customer lookup failed"
