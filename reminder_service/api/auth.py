"""Bearer token authentication for reminder routes."""
from __future__ import annotations

import hmac
import logging

from fastapi import Depends, HTTPException, Request, status

from reminder_service.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def extract_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "").strip()
    if not auth_header.lower().startswith("bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def require_account_id(
    request: Request, settings: Settings = Depends(get_settings)
) -> int:
    """Resolve the caller's account from its bearer token or reject with 403."""
    token = extract_token(request)
    if token:
        for known_token, account_id in settings.api_tokens.items():
            if hmac.compare_digest(token.encode(), known_token.encode()):
                return account_id

    logger.info("Rejected request without a valid token", extra={"path": request.url.path})
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or missing token")
