"""Reminder API routes."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from reminder_service.api.auth import require_account_id
from reminder_service.core.config import Settings, get_settings
from reminder_service.core.db import get_session
from reminder_service.schemas import ReminderRead
from reminder_service.services.reminder_manager import ReminderManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reminder", tags=["reminders"])

WRITABLE_KEYS = ("description", "customer_id", "datetime", "is_done")


def get_reminder_manager(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> ReminderManager:
    return ReminderManager(session, settings=settings)


def _pick_writable(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: payload[key] for key in WRITABLE_KEYS if key in payload}


@router.get("")
async def list_reminders(
    query_type: str | None = Query(None, alias="type"),
    date: str | None = None,
    from_date: str | None = Query(None, alias="from"),
    to_date: str | None = Query(None, alias="to"),
    customer_id: str | None = None,
    month: str | None = None,
    year: str | None = None,
    account_id: int = Depends(require_account_id),
    manager: ReminderManager = Depends(get_reminder_manager),
) -> list[ReminderRead]:
    """List reminders of the caller's account for a day, month, range or all."""

    query = {
        "type": query_type,
        "date": date,
        "from": from_date,
        "to": to_date,
        "customer_id": customer_id,
        "month": month,
        "year": year,
        "account_id": account_id,
    }
    logger.debug("Received request for reminders", extra={"query": query})
    return await manager.get(query)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_reminder(
    payload: dict[str, Any] = Body(...),
    account_id: int = Depends(require_account_id),
    manager: ReminderManager = Depends(get_reminder_manager),
) -> ReminderRead:
    """Create a reminder for the caller's account."""

    data = {**_pick_writable(payload), "account_id": account_id}
    reminder = await manager.create(data)
    logger.info("Created reminder", extra={"reminder_id": reminder.id, "account_id": account_id})
    return reminder


@router.put("/{reminder_id}")
async def update_reminder(
    reminder_id: str,
    payload: dict[str, Any] = Body(...),
    account_id: int = Depends(require_account_id),
    manager: ReminderManager = Depends(get_reminder_manager),
) -> ReminderRead:
    """Replace every writable field of a reminder."""

    data = {**_pick_writable(payload), "id": reminder_id, "account_id": account_id}
    return await manager.update(data)


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reminder(
    reminder_id: str,
    account_id: int = Depends(require_account_id),
    manager: ReminderManager = Depends(get_reminder_manager),
) -> Response:
    """Soft-delete a reminder."""

    await manager.remove({"id": reminder_id, "account_id": account_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/done/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def mark_reminder_done(
    reminder_id: str,
    account_id: int = Depends(require_account_id),
    manager: ReminderManager = Depends(get_reminder_manager),
) -> Response:
    """Mark a reminder as done."""

    await manager.mark_as_done({"id": reminder_id, "account_id": account_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
