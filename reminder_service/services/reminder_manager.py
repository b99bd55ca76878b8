"""Orchestration of reminder operations.

The manager validates input, dispatches to :class:`ReminderEntity`, attaches
customer metadata and annotates failures with the operation that was running.
Errors keep the classification they were raised with so the HTTP layer can
tell client mistakes from server failures.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from reminder_service.core.config import Settings, get_settings
from reminder_service.core.errors import (ErrorDetail, ReminderServiceError,
                                          ValidationError)
from reminder_service.entities.reminder import ReminderEntity, ReminderFields
from reminder_service.schemas import ReminderPayload, ReminderRead, validate_reminder_payload
from reminder_service.services.customers import CustomerDirectory
from reminder_service.services.validation import (validate_date, validate_enum, validate_id,
                                                  validate_month, validate_year)

logger = logging.getLogger(__name__)

QUERY_TYPES = ("all", "day", "month", "range")


class ReminderManager:
    """Run one logical reminder operation per call."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        customers: CustomerDirectory | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.entity = ReminderEntity(session)
        self.customers = customers or CustomerDirectory(session)

    def _error(self, error: ReminderServiceError, message: str) -> ReminderServiceError:
        logger.debug(
            "Reminder Manager: %s",
            message,
            extra={"error": error.message, "details": [d.as_dict() for d in error.details]},
        )
        return error.add_context(message)

    def _validate_id(self, value: Any, path: str) -> int:
        return validate_id(value, max_id=self.settings.max_id, path=path)

    def _validate_identity(self, data: Mapping[str, Any]) -> tuple[int, int]:
        """Validate ``id`` and ``account_id`` together, reporting both."""
        details: list[ErrorDetail] = []
        validated: dict[str, int] = {}
        for key in ("id", "account_id"):
            try:
                validated[key] = self._validate_id(data.get(key), key)
            except ValidationError as exc:
                details.extend(exc.details)
        if details:
            raise ValidationError("Invalid identifier", details=details)
        return validated["id"], validated["account_id"]

    def validate(self, data: Mapping[str, Any]) -> ReminderPayload:
        logger.debug("Reminder Manager: Validating data")
        return validate_reminder_payload(dict(data), max_id=self.settings.max_id)

    async def populate_customer(
        self, reminders: list[ReminderRead], account_id: int
    ) -> list[ReminderRead]:
        """Attach customer metadata to each reminder that references one."""
        try:
            account_id = self._validate_id(account_id, "account_id")
            for reminder in reminders:
                if reminder.customer_id and reminder.customer_id > 0:
                    reminder.customer = await self.customers.get_meta(
                        reminder.customer_id, account_id
                    )
        except ReminderServiceError as exc:
            raise self._error(
                exc, "An error occurred while populating customers in the reminders"
            )
        return reminders

    async def get(self, query: Mapping[str, Any]) -> list[ReminderRead]:
        """Fetch reminders by ``type``: ``all``, ``day``, ``month`` or ``range``.

        An unrecognised ``type`` returns no reminders unless
        ``strict_query_type`` is enabled, in which case it is rejected.
        """
        try:
            account_id = self._validate_id(query.get("account_id"), "account_id")
            query_type = query.get("type")
            if self.settings.strict_query_type:
                validate_enum(query_type, QUERY_TYPES)

            customer_id = None
            if query.get("customer_id") not in (None, ""):
                customer_id = self._validate_id(query["customer_id"], "customer_id")

            reminders: list[ReminderRead] = []
            if query_type == "all":
                reminders = await self.entity.all(account_id, customer_id)
                logger.debug("Reminder Manager: fetched all reminders")
            elif query_type == "day":
                day = validate_date(query.get("date"))
                reminders = await self.entity.get_by_date(day, account_id, customer_id)
                logger.debug("Reminder Manager: fetched reminders by date")
            elif query_type == "month":
                month = validate_month(query.get("month"))
                year = validate_year(query.get("year"))
                reminders = await self.entity.get_by_month(month, year, account_id, customer_id)
                logger.debug("Reminder Manager: fetched reminders by month")
            elif query_type == "range":
                from_date = validate_date(query.get("from"), path="from")
                to_date = validate_date(query.get("to"), path="to")
                reminders = await self.entity.get_by_range(
                    to_date, from_date, account_id, customer_id
                )
                logger.debug("Reminder Manager: fetched reminders by range")
            else:
                logger.info(
                    "Reminder Manager: unknown query type", extra={"query_type": query_type}
                )

            await self.populate_customer(reminders, account_id)
            return reminders
        except ReminderServiceError as exc:
            raise self._error(exc, "An error occurred while fetching the reminders")

    async def create(self, data: Mapping[str, Any]) -> ReminderRead:
        try:
            payload = self.validate(data)
            fields = ReminderFields.from_payload(payload)

            async with self.entity.context.start_transaction():
                reminder_id = await self.entity.save(fields)
                logger.debug(
                    "Reminder Manager: Created the reminder", extra={"reminder_id": reminder_id}
                )
                reminder = await self.entity.find_by_id(reminder_id, payload.account_id)

            await self.populate_customer([reminder], payload.account_id)
            return reminder
        except ReminderServiceError as exc:
            raise self._error(exc, "An error occurred while creating the reminder")

    async def update(self, data: Mapping[str, Any]) -> ReminderRead:
        try:
            reminder_id, account_id = self._validate_identity(data)
            payload = self.validate(data)
            fields = ReminderFields.from_payload(payload)

            async with self.entity.context.start_transaction():
                await self.entity.update(reminder_id, account_id, fields)
                logger.debug(
                    "Reminder Manager: Updated the reminder", extra={"reminder_id": reminder_id}
                )
                reminder = await self.entity.find_by_id(reminder_id, account_id)

            await self.populate_customer([reminder], account_id)
            return reminder
        except ReminderServiceError as exc:
            raise self._error(exc, "An error occurred while updating the reminder")

    async def remove(self, data: Mapping[str, Any]) -> None:
        try:
            reminder_id, account_id = self._validate_identity(data)
            async with self.entity.context.start_transaction():
                await self.entity.exists(reminder_id, account_id)
                await self.entity.remove(reminder_id, account_id)
            logger.debug("Reminder Manager: removed the reminder", extra={"reminder_id": reminder_id})
        except ReminderServiceError as exc:
            raise self._error(exc, "An error occurred while removing the reminder")

    async def mark_as_done(self, data: Mapping[str, Any]) -> None:
        try:
            reminder_id, account_id = self._validate_identity(data)
            async with self.entity.context.start_transaction():
                await self.entity.exists(reminder_id, account_id)
                await self.entity.mark_as_done(reminder_id, account_id)
            logger.debug(
                "Reminder Manager: Marked the reminder as done",
                extra={"reminder_id": reminder_id},
            )
        except ReminderServiceError as exc:
            raise self._error(exc, "An error occurred while marking the reminder as done")
