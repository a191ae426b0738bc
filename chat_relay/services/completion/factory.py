"""
Completion client factory.

Resolves the environment into one of two upstream endpoint shapes once per
process and builds the matching CompletionClient. Without an API key the
relay runs in mock mode.
"""
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from openai import AsyncOpenAI

from chat_relay.config.settings import Settings, get_settings
from chat_relay.services.completion.client import (
    CompletionClient,
    LiveCompletionClient,
    MockCompletionClient,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AzureClientConfig:
    """Azure OpenAI deployment, authenticated with the api-key header."""

    api_key: str
    endpoint: str
    deployment: str
    api_version: str
    model: str
    kind: str = "azure"

    @property
    def base_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/openai/deployments/{self.deployment}"


@dataclass(frozen=True)
class OpenAIClientConfig:
    """Default public OpenAI API, authenticated with the key directly."""

    api_key: str
    model: str
    kind: str = "openai"


ClientConfig = Union[AzureClientConfig, OpenAIClientConfig]


def resolve_client_config(settings: Settings) -> Optional[ClientConfig]:
    """
    Pick the upstream endpoint shape from settings.

    Returns:
        AzureClientConfig when an Azure endpoint is set, OpenAIClientConfig
        when only a key is set, None when no key is configured
    """
    api_key = settings.api_key
    if not api_key:
        return None

    if settings.azure_openai_endpoint:
        return AzureClientConfig(
            api_key=api_key,
            endpoint=settings.azure_openai_endpoint,
            deployment=settings.azure_openai_deployment_name,
            api_version=settings.azure_openai_api_version,
            model=settings.openai_model_name,
        )

    return OpenAIClientConfig(api_key=api_key, model=settings.openai_model_name)


def build_completion_client(
    config: Optional[ClientConfig], mock_delay: float = 0.05
) -> CompletionClient:
    """Build the CompletionClient for a resolved config. No network I/O."""
    if config is None:
        return MockCompletionClient(delay=mock_delay)

    if isinstance(config, AzureClientConfig):
        client = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            default_query={"api-version": config.api_version},
            default_headers={"api-key": config.api_key},
        )
    else:
        client = AsyncOpenAI(api_key=config.api_key)

    return LiveCompletionClient(client=client, model=config.model, mode=config.kind)


@lru_cache()
def get_completion_client() -> CompletionClient:
    """Get the process-wide completion client (FastAPI dependency)."""
    settings = get_settings()
    config = resolve_client_config(settings)
    if config is None:
        logger.warning(
            "No AZURE_OPENAI_API_KEY or OPENAI_API_KEY configured, serving mock responses"
        )
    elif isinstance(config, AzureClientConfig) and not config.deployment:
        logger.warning(
            "AZURE_OPENAI_ENDPOINT is set without AZURE_OPENAI_DEPLOYMENT_NAME"
        )
    return build_completion_client(config, mock_delay=settings.mock_chunk_delay)
