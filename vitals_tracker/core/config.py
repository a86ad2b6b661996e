"""
Configuration module for the Vitals Tracker service.
Uses Pydantic BaseSettings for validation - app fails fast if config is invalid.
"""
import logging
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("sqlite", "memory")


class Settings(BaseSettings):
    """
    Application settings with validation.
    Invalid values cause the app to fail fast at import time.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage Configuration
    vitals_db_dir: str = Field(default="data", description="Database directory")
    vitals_db_file: str = Field(default="vitals.db", description="Database filename")
    vitals_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")
    vitals_store_backend: str = Field(default="sqlite", description="Record store backend (sqlite or memory)")

    # Calendar Configuration
    vitals_timezone: str = Field(default="UTC", description="IANA timezone used to resolve calendar days")

    # API Configuration
    vitals_host: str = Field(default="0.0.0.0", description="API host")
    vitals_port: int = Field(default=8000, description="API port")
    vitals_reload: bool = Field(default=False, description="Enable hot reload")

    # Report Configuration
    vitals_report_title: str = Field(default="Health Report", description="Title printed on PDF reports")
    vitals_report_include_charts: bool = Field(default=True, description="Embed chart images in PDF reports")

    @field_validator("vitals_store_backend")
    @classmethod
    def validate_backend(cls, value: str) -> str:
        """Reject unknown store backends at startup."""
        backend = value.strip().lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(
                f"Unknown store backend '{value}', expected one of: {', '.join(STORE_BACKENDS)}"
            )
        return backend

    @field_validator("vitals_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject timezones the zoneinfo database does not know."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{value}'") from e
        return value

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.vitals_db_dir) / self.vitals_db_file)

    @property
    def tzinfo(self) -> ZoneInfo:
        """Timezone used when resolving 'today' and other calendar windows."""
        return ZoneInfo(self.vitals_timezone)

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        if self.vitals_store_backend == "sqlite":
            Path(self.vitals_db_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if config is invalid
# Directories are created at application startup, not on import
settings = Settings()

DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.vitals_db_busy_timeout

API_HOST = settings.vitals_host
API_PORT = settings.vitals_port
API_RELOAD = settings.vitals_reload
