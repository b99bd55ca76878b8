"""Pydantic schemas for the reminder service."""

from .reminder import (CustomerMeta, ReminderPayload, ReminderRead,
                       validate_reminder_payload)

__all__ = [
    "CustomerMeta",
    "ReminderPayload",
    "ReminderRead",
    "validate_reminder_payload",
]
