from .client import CompletionClient, LiveCompletionClient, MockCompletionClient
from .factory import (
    AzureClientConfig,
    ClientConfig,
    OpenAIClientConfig,
    build_completion_client,
    get_completion_client,
    resolve_client_config,
)

__all__ = [
    "CompletionClient",
    "LiveCompletionClient",
    "MockCompletionClient",
    "AzureClientConfig",
    "OpenAIClientConfig",
    "ClientConfig",
    "build_completion_client",
    "get_completion_client",
    "resolve_client_config",
]
