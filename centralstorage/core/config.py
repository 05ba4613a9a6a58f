"""
Configuration Management

Centralized configuration using Pydantic Settings.
All settings loaded from CENTRALSTORAGE_* environment variables (or .env)
with sensible defaults.
"""
import logging
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CENTRALSTORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ============================================================
    # Storage Server
    # ============================================================
    server: Optional[str] = Field(None, description="Central storage API base URL")
    front: Optional[str] = Field(
        None,
        description="URL end users load assets from (defaults to server)"
    )
    version: Optional[str] = Field("1", description="Asset version appended to URLs as _v")
    timeout: float = Field(30.0, description="HTTP timeout in seconds")

    # ============================================================
    # Credentials
    # ============================================================
    key: Optional[str] = Field(None, description="Consumer key (sent in centralstorage-key)")
    secret: Optional[str] = Field(None, description="Consumer secret (never transmitted)")
    algorithm: str = Field("sha256", description="Signature hash: sha256, sha384 or sha512")

    # ============================================================
    # Server-side verification
    # ============================================================
    consumers_file: str = Field(
        "consumers.yaml",
        description="Consumer registry file name, resolved against CONFIG_DIR"
    )

    # ============================================================
    # Local asset records
    # ============================================================
    database_url: str = Field("sqlite:///./assets.db", description="SQLAlchemy URL for asset rows")

    # ============================================================
    # Logging Configuration
    # ============================================================
    log_level: str = Field("INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string"
    )

    @property
    def front_url(self) -> Optional[str]:
        """URL used for end-user asset links."""
        return self.front or self.server

    def configure_logging(self) -> None:
        """Apply log_level/log_format to the root logger."""
        logging.basicConfig(
            level=getattr(logging, self.log_level.upper(), logging.INFO),
            format=self.log_format,
        )
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings():
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
