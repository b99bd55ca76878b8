"""HTTP routes for the reminder service."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from reminder_service.api.reminders import router as reminders_router
from reminder_service.core.config import Settings, get_settings

router = APIRouter()
router.include_router(reminders_router)


@router.get("/health", tags=["health"])
async def health_check(settings: Settings = Depends(get_settings)) -> dict[str, dict[str, str]]:
    """Report the service health information."""
    return {"data": {"status": "ok", "version": settings.version}}
