"""Configuration management for tender."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="data/tender.db", description="Path to the SQLite database file")
    legacy_table_name: str = Field(
        default="shitty_instances",
        description="Table holding rows written by the previous server, imported by the migration script",
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Interface the HTTP server binds to")  # noqa: S104
    port: int = Field(default=3000, description="Port the HTTP server listens on")
    environment: str = Field(default="development", description="Deployment environment name")

    # PWA Configuration
    app_version: str = Field(default="v1.0.7", description="Client app version reported to installed PWAs")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment.lower() == "production"


# Application Constants
class Constants:
    """Application-wide constants."""

    # Instance defaults
    DEFAULT_CHORE_NAME: str = "Water the plants"
    DEFAULT_CHORE_ICON: str = "🪴"
    SCHEMA_VERSION: int = 1

    # Generated ids: {prefix}_{epochMillis}_{suffix}
    ID_SUFFIX_ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyz"
    ID_SUFFIX_LENGTH: int = 5
    CARETAKER_ID_PREFIX: str = "c"
    CHORE_ID_PREFIX: str = "chore"
    HISTORY_ID_PREFIX: str = "h"

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent
    TEMPLATES_DIR: Path = PROJECT_ROOT / "templates"
    DIST_DIR: Path = PROJECT_ROOT / "dist"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
