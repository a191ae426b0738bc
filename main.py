"""
Chat Relay
FastAPI application that streams Azure OpenAI / OpenAI chat completions to a
browser UI over Server-Sent Events, with a mock mode when no key is set.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_relay import __version__
from chat_relay.config.logging import configure_logging
from chat_relay.config.settings import get_settings
from chat_relay.api.routers import api_router
from chat_relay.api.endpoints import frontend
from chat_relay.controllers.chat_controller import InvalidMessageFormat
from chat_relay.middleware.request_logging import RequestLoggingMiddleware
from chat_relay.middleware.error_handling import (
    ErrorHandlingMiddleware,
    invalid_message_format_handler,
)
from chat_relay.services.completion import get_completion_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    # Startup
    settings = get_settings()
    logging.info(f"Starting {settings.app_name} ({settings.environment})")

    # Resolve the upstream once so every request shares the same client
    completion_client = get_completion_client()
    logging.info(f"Completion client mode: {completion_client.mode}")

    yield

    # Shutdown
    logging.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="SSE relay for Azure OpenAI / OpenAI chat completions",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware, enabled=settings.enable_request_logging)

    app.add_exception_handler(InvalidMessageFormat, invalid_message_format_handler)

    # Include API router
    app.include_router(api_router, prefix="/api")

    # Static assets and SPA fallback; must be registered last
    app.include_router(frontend.router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=get_settings().port,
    )
