"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Orca"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Databricks AI Gateway (for Gemini models)
    databricks_host: str = ""
    # Required: the service refuses to start without it
    databricks_token: str = Field(..., min_length=1)

    # Model endpoints
    chat_endpoint: str = "/serving-endpoints/databricks-gemini-3-pro/invocations"
    analysis_endpoint: str = "/serving-endpoints/databricks-gemini-flash/invocations"
    request_timeout_seconds: float = 60.0
    chat_temperature: float = 0.7
    analysis_temperature: float = 0.2
    chat_max_tokens: int = 2048
    analysis_max_tokens: int = 512

    # Langfuse tracing
    langfuse_enabled: bool = False
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    # Interview settings
    allowed_question_counts: list[int] = Field(default_factory=lambda: [5, 10, 15])
    default_question_count: int = 15
    ticker_interval_seconds: float = 1.0

    # History persistence
    history_path: str = "data/orca-interview-history.json"

    # CORS - stored as comma-separated string in env
    # Uses validation_alias to read from CORS_ORIGINS env var
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Raises:
        pydantic.ValidationError: If the API credential is not configured
    """
    return Settings()
