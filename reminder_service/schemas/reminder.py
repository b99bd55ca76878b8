"""Pydantic schemas for reminder resources."""
from __future__ import annotations

import re
import datetime as dt
from typing import Any

from pydantic import (BaseModel, ConfigDict, Field, ValidationInfo, field_serializer,
                      field_validator, model_serializer)
from pydantic import ValidationError as PydanticValidationError

from reminder_service.core.config import MAX_ID
from reminder_service.core.errors import ErrorDetail, ValidationError

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")

TRUTHY = (1, "1", "true")
FALSY = (0, "0", "false")


class CustomerMeta(BaseModel):
    """Lightweight customer projection attached to reminders."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    company: str | None = None
    email: str | None = None
    phone: str | None = None


class ReminderPayload(BaseModel):
    """Shape of a reminder accepted for create and update.

    ``max_id`` is read from the validation context so the identifier ceiling
    follows configuration.
    """

    model_config = ConfigDict(extra="forbid")

    id: int | None = None
    description: str = Field(min_length=1, max_length=2047)
    datetime: dt.datetime
    is_done: bool
    customer_id: int | None = None
    account_id: int

    @field_validator("id", "customer_id", "account_id", mode="before")
    @classmethod
    def reject_boolean_ids(cls, value: Any) -> Any:
        if isinstance(value, bool):
            msg = "must be a positive integer"
            raise ValueError(msg)
        return value

    @field_validator("id", "customer_id", "account_id")
    @classmethod
    def check_id_range(cls, value: int | None, info: ValidationInfo) -> int | None:
        if value is None:
            return None
        max_id = (info.context or {}).get("max_id", MAX_ID)
        if value < 1 or value > max_id:
            msg = f"must be between 1 and {max_id}"
            raise ValueError(msg)
        return value

    @field_validator("datetime", mode="before")
    @classmethod
    def parse_datetime(cls, value: Any) -> dt.datetime:
        if isinstance(value, dt.datetime):
            return value.replace(microsecond=0)
        if not isinstance(value, str) or not DATETIME_PATTERN.match(value):
            msg = "must be a datetime formatted as YYYY-MM-DD HH:MM:SS"
            raise ValueError(msg)
        return dt.datetime.strptime(value, DATETIME_FORMAT)

    @field_validator("is_done", mode="before")
    @classmethod
    def parse_is_done(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            value = value.strip().lower()
        if value in TRUTHY:
            return True
        if value in FALSY:
            return False
        msg = "must be a boolean, 1, '1', 0 or '0'"
        raise ValueError(msg)


class ReminderRead(BaseModel):
    """Displayable projection of a reminder."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    customer_id: int | None = None
    datetime: dt.datetime
    is_done: bool
    customer: CustomerMeta | None = None

    @field_serializer("datetime")
    def serialize_datetime(self, value: dt.datetime) -> str:
        return value.strftime(DATETIME_FORMAT)

    @model_serializer(mode="wrap")
    def drop_missing_customer(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if data.get("customer") is None:
            data.pop("customer", None)
        return data


def validate_reminder_payload(data: dict[str, Any], *, max_id: int = MAX_ID) -> ReminderPayload:
    """Validate a reminder payload, reporting every violated field at once."""
    try:
        return ReminderPayload.model_validate(data, context={"max_id": max_id})
    except PydanticValidationError as exc:
        details = [
            ErrorDetail(
                message=_clean_message(error["msg"]),
                path=".".join(str(part) for part in error["loc"]) or None,
            )
            for error in exc.errors()
        ]
        raise ValidationError("Invalid reminder", details=details, cause=exc) from exc


def _clean_message(message: str) -> str:
    return message.removeprefix("Value error, ")
