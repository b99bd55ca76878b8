"""Application entrypoint for the reminder service."""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reminder_service.api import router as api_router
from reminder_service.core.config import Settings, get_settings
from reminder_service.core.db import DatabaseRegistry
from reminder_service.core.errors import ReminderServiceError
from reminder_service.core.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = settings or get_settings()
    configure_logging(settings)

    application = FastAPI(title="Reminder Service", version=settings.version)

    registry = DatabaseRegistry()
    application.state.settings = settings
    application.state.databases = registry
    application.state.database = registry.open(settings.async_database_url)

    _configure_cors(application, settings)
    _configure_exception_handlers(application)

    application.include_router(api_router, prefix="/api")

    @application.on_event("startup")
    async def _on_startup() -> None:  # pragma: no cover - exercised via tests
        await application.state.database.create_all()

    @application.on_event("shutdown")
    async def _on_shutdown() -> None:  # pragma: no cover - exercised via tests
        await registry.close_all()

    return application


def _configure_cors(application: FastAPI, settings: Settings) -> None:
    if not settings.cors_origins:
        return

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _configure_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(ReminderServiceError, _service_exception_handler)
    application.add_exception_handler(HTTPException, _http_exception_handler)
    application.add_exception_handler(RequestValidationError, _validation_exception_handler)
    application.add_exception_handler(Exception, _unhandled_exception_handler)


async def _service_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ReminderServiceError)
    if exc.client_error:
        logger.info("Client error", extra={"error": exc.message, "context": exc.context})
    else:
        logger.error(
            "Server error",
            exc_info=exc.cause or exc,
            extra={"error": exc.message, "context": exc.context},
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, HTTPException)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(message, exc.status_code)


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    logger.info("Validation error", extra={"errors": exc.errors()})
    details = [
        {
            "message": error["msg"],
            "path": ".".join(str(part) for part in error["loc"]),
        }
        for error in exc.errors()
    ]
    return _error_response("A validation error occurred", 400, details)


async def _unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled application error")
    return _error_response("Internal server error", status_code=500)


def _error_response(
    message: str, status_code: int, details: list[dict[str, str]] | None = None
) -> JSONResponse:
    content = {"message": message, "details": details or [{"message": message}]}
    return JSONResponse(status_code=status_code, content=content)


app = create_app()
