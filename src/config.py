"""Configuration management using Pydantic Settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    log_level: str = "INFO"
    api_title: str = "Aggregator Host"
    api_version: str = "1.0.0"
    api_description: str = "Host service guarded by API key authentication"
    host: str = "127.0.0.1"
    port: int = 5320

    # Authentication
    api_key_header: str = "X-Api-Key"
    authentication_scheme: str = "ApiKey"

    # Local state directory
    state_dir: str | None = None  # Overrides the per-user local data location
    app_dir_name: str = "aggregator-cli"
    key_store_filename: str = "apikeys.json"

    @field_validator("state_dir", mode="before")
    @classmethod
    def convert_empty_string_to_none(cls, v):
        """Treat an empty STATE_DIR as unset so the OS default applies."""
        if v is None:
            return None
        if isinstance(v, str) and v.strip() == "":
            return None
        return v


# Global settings instance
settings = Settings()
