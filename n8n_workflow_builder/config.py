"""Application configuration using Pydantic Settings."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App settings
    app_name: str = "n8n-workflow-builder"
    log_level: str = "INFO"
    log_json: bool = True

    # n8n Configuration
    # Base URL of the public API, including the version prefix
    n8n_host: str = "http://localhost:5678/api/v1"
    n8n_api_key: str = ""
    request_timeout: float = 30.0

    # Number of recent executions summarized by the execution-stats resource
    execution_stats_limit: int = 100

    def has_api_key(self) -> bool:
        """Check if the n8n API key is configured."""
        return bool(self.n8n_api_key.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
