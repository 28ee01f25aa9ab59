"""Application configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Subtitle Translator"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Cache database
    database_url: str = "sqlite+aiosqlite:///./subtrans.db"

    # Generation endpoint
    llm_provider: str = "gemini"
    llm_model: str = "gemini-2.0-flash"
    llm_base_url: Optional[str] = None
    gemini_api_key: Optional[str] = None
    temperature: float = 0.1
    max_tokens: int = 4096

    # Batching
    batch_size: int = 5  # cues translated per request
    context_size: int = 2  # neighbouring cues shown on each side
    batch_delay: float = 0.1  # seconds between requests
    rate_limit_delay: float = 2.0  # seconds to wait after a 429
    max_rate_limit_retries: Optional[int] = 30  # None retries until cancelled

    # Source retrieval
    source_fetch_timeout: float = 30.0

    # Languages
    default_target_language: str = "uk"

    # CORS
    cors_origins: list[str] = ["*"]

    # Authentication (optional - for network-exposed deployments)
    # Set API_AUTH_TOKEN to enable authentication on mutating endpoints
    api_auth_token: Optional[str] = None
    # If True, require auth on all endpoints; if False, only on mutating ones
    require_auth_all: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
