"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workforce_payroll import __version__
from workforce_payroll.api.routes import (
    commissions_router,
    health_router,
    payroll_router,
    purchase_orders_router,
    tasks_router,
)
from workforce_payroll.api.schemas import ErrorResponse
from workforce_payroll.config import get_settings
from workforce_payroll.database import create_schema, dispose_db, init_db
from workforce_payroll.exceptions import (
    ConcurrencyConflictError,
    EngineError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from workforce_payroll.notifications import (
    LoggingNotificationDispatcher,
    build_notification_emitter,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[EngineError], int] = {
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    ConcurrencyConflictError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: 422,
}


def status_code_for(exc: EngineError) -> int:
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()
    init_db()
    if settings.auto_create_schema:
        await create_schema()
        logger.info("Database schema created")
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title="Workforce Payroll API",
        description="Task commissions and per-period employee payroll",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.emitter = build_notification_emitter(
        LoggingNotificationDispatcher(settings.notification_sender)
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(EngineError)
    async def engine_error_handler(request: Request, exc: EngineError) -> JSONResponse:
        """Map engine failures to their HTTP status."""
        code = status_code_for(exc)
        logger.info("%s %s failed with %s: %s", request.method, request.url.path, exc.code, exc)
        return JSONResponse(
            status_code=code,
            content=ErrorResponse(
                detail=exc.message,
                code=exc.code,
                context=exc.context or None,
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(tasks_router, prefix="/api/v1")
    app.include_router(purchase_orders_router, prefix="/api/v1")
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(commissions_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
