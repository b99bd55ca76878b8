"""Run the reminder service with uvicorn."""
from __future__ import annotations

import os


def main() -> None:
    """Start uvicorn against the application factory module."""

    import uvicorn

    uvicorn.run(
        "reminder_service.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
