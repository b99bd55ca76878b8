"""Storage operations for reminders."""
from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, fields
from typing import Any

from sqlalchemy import Select, extract, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reminder_service.core.errors import NotFoundError, PersistenceError
from reminder_service.entities.context import EntityContext
from reminder_service.models import Reminder
from reminder_service.schemas import ReminderPayload, ReminderRead

DISPLAYABLE_COLUMNS = (
    Reminder.id,
    Reminder.description,
    Reminder.customer_id,
    Reminder.datetime,
    Reminder.is_done,
)


@dataclass(frozen=True)
class ReminderFields:
    """Every writable column of a reminder."""

    description: str
    datetime: dt.datetime
    is_done: bool
    account_id: int
    customer_id: int | None = None

    def __post_init__(self) -> None:
        if not self.description:
            msg = "description must not be empty"
            raise ValueError(msg)
        if not isinstance(self.is_done, bool):
            msg = "is_done must be a boolean"
            raise ValueError(msg)
        if self.account_id < 1:
            msg = "account_id must be positive"
            raise ValueError(msg)

    @classmethod
    def from_payload(cls, payload: ReminderPayload) -> ReminderFields:
        return cls(
            description=payload.description,
            datetime=payload.datetime,
            is_done=payload.is_done,
            account_id=payload.account_id,
            customer_id=payload.customer_id,
        )

    def as_values(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ReminderPatch:
    """A partial update touching only the flags that are set."""

    is_done: bool | None = None
    is_deleted: bool | None = None

    def __post_init__(self) -> None:
        if not self.as_values():
            msg = "A patch must set at least one field"
            raise ValueError(msg)

    def as_values(self) -> dict[str, Any]:
        values = {field.name: getattr(self, field.name) for field in fields(self)}
        return {key: value for key, value in values.items() if value is not None}


class ReminderEntity:
    """Builds and runs the SQL behind every reminder operation.

    All statements are scoped by ``account_id``; reads only ever return the
    displayable columns of rows that are not soft-deleted.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.context = EntityContext(session, "Reminder Entity")

    async def all(self, account_id: int, customer_id: int | None = None) -> list[ReminderRead]:
        stmt = self._visible(account_id, customer_id)
        return await self._fetch_all(stmt, "An error occurred while fetching the reminders")

    async def get_by_date(
        self, day: dt.date, account_id: int, customer_id: int | None = None
    ) -> list[ReminderRead]:
        stmt = self._visible(account_id, customer_id).where(
            func.date(Reminder.datetime) == day.isoformat()
        )
        return await self._fetch_all(
            stmt, "An error occurred while fetching the reminders by date"
        )

    async def get_by_month(
        self, month: int, year: int, account_id: int, customer_id: int | None = None
    ) -> list[ReminderRead]:
        stmt = self._visible(account_id, customer_id).where(
            extract("month", Reminder.datetime) == month,
            extract("year", Reminder.datetime) == year,
        )
        return await self._fetch_all(
            stmt, "An error occurred while fetching the reminders by month"
        )

    async def get_by_range(
        self,
        to_date: dt.date,
        from_date: dt.date,
        account_id: int,
        customer_id: int | None = None,
    ) -> list[ReminderRead]:
        """Return reminders whose date falls within ``[from_date, to_date]``."""
        stmt = self._visible(account_id, customer_id).where(
            func.date(Reminder.datetime) >= from_date.isoformat(),
            func.date(Reminder.datetime) <= to_date.isoformat(),
        )
        return await self._fetch_all(
            stmt, "An error occurred while fetching the reminders by range"
        )

    async def exists(self, reminder_id: int, account_id: int) -> ReminderRead:
        return await self.find_by_id(reminder_id, account_id)

    async def find_by_id(self, reminder_id: int, account_id: int) -> ReminderRead:
        stmt = self._visible(account_id).where(Reminder.id == reminder_id)
        async with self.context.wrap_errors("An error occurred while fetching the reminder"):
            result = await self.context.get_connection().execute(stmt)
            row = result.first()
            if row is None:
                raise NotFoundError(f"Reminder {reminder_id} not found")
            reminder = ReminderRead.model_validate(dict(row._mapping))
        self.context.logger.debug("Fetched the reminder", extra={"reminder_id": reminder.id})
        return reminder

    async def save(self, reminder: ReminderFields) -> int:
        """Insert ``reminder`` and return its generated id."""
        async with self.context.wrap_errors("An error occurred while saving the reminder"):
            result = await self.context.get_connection().execute(
                insert(Reminder).values(**reminder.as_values())
            )
            primary_key = result.inserted_primary_key
            if not primary_key or primary_key[0] is None:
                raise PersistenceError("Reminder was not created")
        return int(primary_key[0])

    async def update(self, reminder_id: int, account_id: int, reminder: ReminderFields) -> int:
        return await self._write(
            reminder_id,
            account_id,
            reminder.as_values(),
            "An error occurred while updating the reminder",
        )

    async def remove(self, reminder_id: int, account_id: int) -> int:
        """Soft-delete a reminder; the row stays with ``is_deleted`` set."""
        return await self._write(
            reminder_id,
            account_id,
            ReminderPatch(is_deleted=True).as_values(),
            "An error occurred while deleting the reminder",
        )

    async def mark_as_done(self, reminder_id: int, account_id: int) -> int:
        return await self._write(
            reminder_id,
            account_id,
            ReminderPatch(is_done=True).as_values(),
            "An error occurred while marking the reminder as done",
        )

    def _visible(self, account_id: int, customer_id: int | None = None) -> Select[Any]:
        stmt = select(*DISPLAYABLE_COLUMNS).where(
            Reminder.is_deleted.is_(False),
            Reminder.account_id == account_id,
        )
        if customer_id:
            stmt = stmt.where(Reminder.customer_id == customer_id)
        return stmt

    async def _fetch_all(self, stmt: Select[Any], message: str) -> list[ReminderRead]:
        stmt = stmt.order_by(Reminder.datetime, Reminder.id)
        async with self.context.wrap_errors(message):
            result = await self.context.get_connection().execute(stmt)
            return [ReminderRead.model_validate(dict(row._mapping)) for row in result]

    async def _write(
        self, reminder_id: int, account_id: int, values: dict[str, Any], message: str
    ) -> int:
        # Exactly one live row of this account may match.
        stmt = (
            update(Reminder)
            .where(
                Reminder.id == reminder_id,
                Reminder.account_id == account_id,
                Reminder.is_deleted.is_(False),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        async with self.context.wrap_errors(message):
            result = await self.context.get_connection().execute(stmt)
            if result.rowcount != 1:
                raise PersistenceError(
                    f"Expected one reminder to change, {result.rowcount} changed"
                )
        return result.rowcount
