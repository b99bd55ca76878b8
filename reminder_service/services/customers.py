"""Read-only customer lookups used to enrich reminders."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from reminder_service.core.errors import UpstreamLookupError
from reminder_service.models import Customer
from reminder_service.schemas import CustomerMeta

logger = logging.getLogger(__name__)


class CustomerDirectory:
    """Resolve customer metadata for the account that owns the customer."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_meta(self, customer_id: int, account_id: int) -> CustomerMeta:
        stmt = select(
            Customer.id, Customer.name, Customer.company, Customer.email, Customer.phone
        ).where(
            Customer.id == customer_id,
            Customer.account_id == account_id,
            Customer.is_deleted.is_(False),
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error(
                "Customer lookup failed",
                extra={"customer_id": customer_id, "account_id": account_id},
            )
            raise UpstreamLookupError(
                f"An error occurred while fetching customer {customer_id}", cause=exc
            ) from exc

        row = result.first()
        if row is None:
            raise UpstreamLookupError(f"Customer {customer_id} could not be resolved")
        return CustomerMeta.model_validate(dict(row._mapping))
