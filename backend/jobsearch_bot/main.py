"""FastAPI application entry point.

This module creates and configures the webhook service, including:
- Lifespan wiring of the wizard and its collaborators
- Exception handlers for wizard errors
- API v1 router mounting (Telegram webhook)
- Health check endpoint
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from jobsearch_bot.adapters.backend import BackendClient
from jobsearch_bot.adapters.catalog import HHCatalogClient
from jobsearch_bot.adapters.telegram import TelegramTransport
from jobsearch_bot.api.v1.router import router as v1_router
from jobsearch_bot.bot import BotRouter
from jobsearch_bot.core.config import settings
from jobsearch_bot.core.errors import WizardError
from jobsearch_bot.core.responses import ErrorDetail, ErrorResponse
from jobsearch_bot.wizard.dispatch import ResultDispatcher
from jobsearch_bot.wizard.engine import WizardEngine
from jobsearch_bot.wizard.options import OptionProvider
from jobsearch_bot.wizard.sessions import InMemorySessionStore

logger = structlog.get_logger()


def build_bot_router(client: httpx.AsyncClient) -> BotRouter:
    """Wire the wizard and its collaborators around one HTTP client.

    Args:
        client: Shared async HTTP client for Telegram, hh.ru and the backend.

    Returns:
        Router ready to receive parsed Telegram events.
    """
    transport = TelegramTransport(client)
    backend = BackendClient(client)
    options = OptionProvider(HHCatalogClient(client), backend)
    engine = WizardEngine(
        store=InMemorySessionStore(),
        options=options,
        transport=transport,
        dispatcher=ResultDispatcher(transport, backend),
    )
    return BotRouter(engine, transport)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the shared HTTP client and build the bot router.

    A router already placed on app.state (tests) is left alone.
    """
    logging.basicConfig(level=settings.log_level)
    async with httpx.AsyncClient() as client:
        if getattr(app.state, "bot_router", None) is None:
            app.state.bot_router = build_bot_router(client)
        logger.info("bot_started", environment=settings.environment)
        yield
    logger.info("bot_stopped")


def wizard_error_handler(_request: Request, exc: WizardError) -> JSONResponse:
    """Handle wizard errors that escape an endpoint.

    Args:
        request: The incoming request.
        exc: The WizardError that was raised.

    Returns:
        JSONResponse with error envelope and the error's status code.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(code=exc.code, message=exc.message)
        ).model_dump(),
    )


def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions.

    Returns 500 INTERNAL_ERROR without exposing stack traces; details go to
    the log.

    Args:
        request: The incoming request.
        exc: The unhandled exception.

    Returns:
        JSONResponse with generic error message (500).
    """
    logger.exception("Unhandled exception", exc_info=exc, path=str(request.url.path))

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
            )
        ).model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Job Search Bot",
        version="1.0.0",
        description="Telegram wizard that builds and runs hh.ru vacancy searches",
        lifespan=lifespan,
    )

    # Order matters: specific handlers first, then catch-all
    app.add_exception_handler(WizardError, wizard_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health")
    def health_check() -> dict:
        """Health check endpoint for monitoring.

        Returns:
            {"status": "healthy"} if service is running.
        """
        return {"status": "healthy"}

    return app


# Used by uvicorn: uvicorn jobsearch_bot.main:app
app = create_app()
