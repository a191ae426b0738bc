"""
Application configuration and settings.
Centralized configuration management using Pydantic Settings.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Field names double as env var names (case-insensitive),
    # e.g. azure_openai_api_key <- AZURE_OPENAI_API_KEY
    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        env_file=[".env", ".env.local"],  # .env.local overrides .env
    )

    # Application settings
    app_name: str = "Chat Relay"
    environment: str = Field(default="local", validation_alias="SYSTEM_ENVIRONMENT")
    port: int = 3000
    public_dir: str = "public"

    # CORS settings
    allowed_origins: Optional[List[str]] = None

    # Logging settings
    log_level: str = "INFO"
    enable_request_logging: bool = True

    # Azure OpenAI settings
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_deployment_name: str = ""
    azure_openai_api_version: str = "2024-02-15-preview"

    # OpenAI settings
    openai_api_key: str = ""
    openai_model_name: str = "gpt-3.5-turbo"

    # Seconds between fragments when no credentials are configured
    mock_chunk_delay: float = 0.05

    @property
    def api_key(self) -> str:
        """Completion API key, preferring the Azure-specific one."""
        return self.azure_openai_api_key or self.openai_api_key

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_local(self) -> bool:
        """Check if running in local development environment."""
        return self.environment == "local"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
