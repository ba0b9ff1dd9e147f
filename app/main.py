"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.config import settings
from app.core.exceptions import AppException, ConfigurationError, ConflictError
from app.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from app.repositories.base import CalendarRepository
from app.services.calendar_import_service import CalendarImportService

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_application(
    calendar_repository: CalendarRepository | None = None,
    calendar_import_service: CalendarImportService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        calendar_repository: Storage for calendar events; defaults to the
            SQL repository on the configured database
        calendar_import_service: iCal fetcher; defaults to a fresh service
    """
    owns_database = calendar_repository is None
    if owns_database:
        from app.database import async_session_maker
        from app.repositories.sql import SqlCalendarRepository

        calendar_repository = SqlCalendarRepository(async_session_maker)
    import_service = calendar_import_service or CalendarImportService()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan events."""
        if owns_database:
            from app.database import close_db, init_db

            await init_db()

        yield

        await import_service.close()
        if owns_database:
            await close_db()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="CrewStay - Booking Economics & Availability API",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.calendar_repository = calendar_repository
    app.state.calendar_import_service = import_service

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle custom application exceptions."""
        content: dict = {"detail": exc.detail}
        if isinstance(exc, ConflictError):
            content["reason"] = exc.reason.value
            content["day"] = exc.day.isoformat() if exc.day else None
        elif isinstance(exc, ConfigurationError):
            logger.error(f"Fee configuration error on {request.url.path}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed request input as 400."""
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": "Validation failed", "errors": errors})

    # Middleware (order matters - first added = last executed)
    # 1. Security headers (outermost)
    app.add_middleware(SecurityHeadersMiddleware)

    # 2. Request logging
    app.add_middleware(RequestLoggingMiddleware)

    # 3. CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 4. Gzip compression (innermost)
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Include API routes
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    @app.get("/")
    async def root() -> dict:
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs" if settings.debug else None,
        }

    return app


configure_logging()
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
    )
