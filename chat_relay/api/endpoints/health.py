"""
Health check endpoints.
Simple endpoints for monitoring application health and status.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from chat_relay import __version__
from chat_relay.config.settings import Settings, get_settings
from chat_relay.services.completion import CompletionClient, get_completion_client

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    version: str
    environment: str
    mode: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    completion_client: CompletionClient = Depends(get_completion_client),
):
    """Basic health check endpoint, including which upstream is in use."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=settings.environment,
        mode=completion_client.mode,
    )
