"""Storage capability shared by entities."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reminder_service.core.errors import PersistenceError, ReminderServiceError


class EntityContext:
    """Connection access, transactions and error wrapping for one entity.

    Entities hold an instance of this class rather than inheriting from a
    common base.
    """

    def __init__(self, session: AsyncSession, log_name: str) -> None:
        self._session = session
        self.log_name = log_name
        self.logger = logging.getLogger(__name__)

    def get_connection(self) -> AsyncSession:
        return self._session

    @asynccontextmanager
    async def start_transaction(self) -> AsyncIterator[AsyncSession]:
        """Commit everything executed inside the block, or roll it back."""
        try:
            yield self._session
        except BaseException:
            await self._session.rollback()
            raise
        else:
            await self._session.commit()

    def error_wrap(self, error: BaseException, message: str) -> ReminderServiceError:
        """Turn ``error`` into a domain error annotated with ``message``.

        Domain errors keep their classification and are left for the
        application handler to log; anything else becomes a
        :class:`PersistenceError` carrying the underlying cause.
        """
        if isinstance(error, ReminderServiceError):
            return error.add_context(message)
        self.logger.error("%s: %s", self.log_name, message, extra={"error": repr(error)})
        return PersistenceError(message, cause=error)

    @asynccontextmanager
    async def wrap_errors(self, message: str) -> AsyncIterator[None]:
        try:
            yield
        except ReminderServiceError as exc:
            self.error_wrap(exc, message)
            raise
        except SQLAlchemyError as exc:
            raise self.error_wrap(exc, message) from exc
