"""
EDU360 Application Settings

Configuration management using Pydantic Settings.
All sensitive values are loaded from environment variables.

SECURITY: Never log or expose settings containing secrets.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration for the SQL event store backend."""

    model_config = SettingsConfigDict(env_prefix="EDU360_DB_")

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    name: str = Field(default="edu360_db", description="Database name")
    user: str = Field(default="edu360_user", description="Database user")
    password: SecretStr = Field(default=SecretStr("dev_password"), description="Database password")
    pool_size: int = Field(default=10, ge=1, le=100, description="Connection pool size")
    max_overflow: int = Field(default=20, ge=0, le=100, description="Max overflow connections")
    url_override: Optional[str] = Field(
        default=None,
        description="Full async URL, bypasses host/port/name (e.g. sqlite+aiosqlite:///./edu360.db)",
    )

    @property
    def async_url(self) -> str:
        """Generate async database URL for SQLAlchemy."""
        if self.url_override:
            return self.url_override
        password = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{password}@{self.host}:{self.port}/{self.name}"

    @property
    def sync_url(self) -> str:
        """Generate sync database URL for Alembic migrations."""
        password = self.password.get_secret_value()
        return f"postgresql://{self.user}:{password}@{self.host}:{self.port}/{self.name}"


class OpenAISettings(BaseSettings):
    """OpenAI API configuration."""

    model_config = SettingsConfigDict(env_prefix="EDU360_OPENAI_")

    api_key: SecretStr = Field(default=SecretStr(""), description="OpenAI API key")
    model: str = Field(default="gpt-4o", description="Model identifier")
    max_tokens: int = Field(default=500, ge=50, le=4096)
    chat_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    analysis_temperature: float = Field(default=0.3, ge=0.0, le=2.0)


class RealtimeSettings(BaseSettings):
    """Server-Sent Events and broadcaster configuration."""

    model_config = SettingsConfigDict(env_prefix="EDU360_REALTIME_")

    heartbeat_interval_seconds: float = Field(default=30.0, gt=0, le=300)
    subscriber_queue_size: int = Field(default=256, ge=1, le=10000)


class EscalationSettings(BaseSettings):
    """Escalation engine and classifier configuration."""

    model_config = SettingsConfigDict(env_prefix="EDU360_ESCALATION_")

    classifier_timeout_seconds: float = Field(default=5.0, gt=0, le=60)
    notify_parents: bool = Field(default=True, description="Fan flagged events out to parents")


class Settings(BaseSettings):
    """
    Main application settings.

    All configuration is loaded from environment variables with EDU360_ prefix.
    Sensitive values use SecretStr to prevent accidental logging.

    Usage:
        settings = get_settings()
        timeout = settings.escalation.classifier_timeout_seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="EDU360_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode - NEVER enable in production")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    api_version: str = Field(default="v1", description="API version prefix")
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:5050"],
        description="Allowed CORS origins"
    )

    # Storage
    store_backend: Literal["memory", "sql"] = Field(
        default="memory",
        description="Event store backend"
    )
    snapshot_path: Optional[str] = Field(
        default=None,
        description="JSON snapshot file for the memory backend (disabled when unset)"
    )
    seed_sample_data: bool = Field(
        default=False,
        description="Create a sample admin and counselor on startup"
    )

    # Monitoring
    sentry_dsn: SecretStr = Field(default=SecretStr(""), description="Sentry DSN")

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    realtime: RealtimeSettings = Field(default_factory=RealtimeSettings)
    escalation: EscalationSettings = Field(default_factory=EscalationSettings)

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.
    For testing, construct Settings directly and pass it to create_application.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
