"""Application configuration and router setup."""

import fastapi
from fastapi import Request, status
from fastapi.middleware import cors
from fastapi.responses import JSONResponse

from components.core import init_db
from components.core.config import get_settings
from components.core.exceptions import NotFoundError, StoreError, ValidationError
from components.core.log import configure_logging, get_logger
from restapi.endpoints import health_check, item, payment, project, quote

logger = get_logger(__name__)


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        logger.warning(
            "request_failed",
            path=request.url.path,
            error=type(exc).__name__,
            detail=str(exc),
        )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging()

    app = fastapi.FastAPI(
        title=settings.APP_TITLE,
        description="Installment schedules, financial summaries and quote selection for renovation projects",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=init_db.lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Map ledger errors to HTTP responses
    app.add_exception_handler(ValidationError, _error_handler(status.HTTP_400_BAD_REQUEST))
    app.add_exception_handler(NotFoundError, _error_handler(status.HTTP_404_NOT_FOUND))
    app.add_exception_handler(StoreError, _error_handler(status.HTTP_503_SERVICE_UNAVAILABLE))

    # Include routers
    app.include_router(health_check.router)
    app.include_router(project.router)
    app.include_router(payment.router)
    app.include_router(item.router)
    app.include_router(quote.router)

    return app
