"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from photoflow.domain.models import DatabaseConfig

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_SESSION_SECRET = "fallback-secret-key-for-photoflow-app"  # noqa: S105


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    db_host: str | None = None
    db_port: int = 3306
    db_user: str | None = None
    db_password: str | None = None
    db_database: str | None = None
    db_pool_size: int = 10
    json_db_path: str = "db.json"
    session_secret: str = DEFAULT_SESSION_SECRET
    session_ttl_hours: int = 24
    bcrypt_rounds: int = 12
    admin_token: str
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Return True when running in the production environment."""
        return self.environment == "production"

    def database_config(self) -> DatabaseConfig | None:
        """Return SQL connection settings when DB_HOST is configured."""
        if not self.db_host:
            return None
        return DatabaseConfig(
            host=self.db_host,
            port=self.db_port,
            user=self.db_user,
            password=self.db_password,
            database=self.db_database,
        )
