"""
Configuration module for the Patient Records API service.
Uses Pydantic BaseSettings for validation - app fails fast if required config is missing.
"""
import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Required fields will cause the app to fail fast if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    records_svc_db_dir: str = Field(default="data", description="Database directory")
    records_svc_db_file: str = Field(default="records.db", description="Database filename")
    records_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # API Configuration
    records_svc_host: str = Field(default="0.0.0.0", description="API host")
    records_svc_port: int = Field(default=8000, description="API port")
    records_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # Logging Configuration
    records_svc_log_level: str = Field(default="INFO", description="Root log level")
    records_svc_log_json: bool = Field(default=True, description="Emit single-line JSON logs")

    # Listing Configuration
    records_svc_default_page_size: int = Field(default=5, ge=1, description="Page size used when a list request omits one")

    # Token Authentication Configuration
    records_svc_jwt_secret: str = Field(
        ...,  # Required - no default means fail fast if missing
        description="Secret used to sign and verify access tokens",
        min_length=32,
    )
    records_svc_jwt_issuer: str = Field(default="records-svc", description="Token issuer claim")
    records_svc_jwt_audience: str = Field(default="records-svc-clients", description="Token audience claim")
    records_svc_jwt_algorithm: str = Field(default="HS256", description="Token signing algorithm")
    records_svc_jwt_expire_minutes: int = Field(default=60, ge=1, description="Access token lifetime in minutes")

    # Bootstrap administrator (optional, created at startup when both are set)
    records_svc_admin_username: Optional[str] = Field(default=None, description="Administrator username to create on startup")
    records_svc_admin_password: Optional[str] = Field(default=None, description="Administrator password to create on startup")

    @model_validator(mode="after")
    def validate_secrets(self) -> "Settings":
        """Warn about half-configured optional features at startup."""
        if self.records_svc_jwt_algorithm not in {"HS256", "HS384", "HS512"}:
            raise ValueError(
                f"Unsupported JWT algorithm: {self.records_svc_jwt_algorithm}"
            )

        if bool(self.records_svc_admin_username) != bool(self.records_svc_admin_password):
            logger.warning(
                "Only one of RECORDS_SVC_ADMIN_USERNAME / RECORDS_SVC_ADMIN_PASSWORD is set - "
                "administrator bootstrap will be skipped"
            )

        return self

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.records_svc_db_dir) / self.records_svc_db_file)

    @property
    def bootstrap_admin_enabled(self) -> bool:
        return bool(self.records_svc_admin_username and self.records_svc_admin_password)

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.records_svc_db_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if required config is missing
settings = Settings()

# Ensure directories exist on import
settings.ensure_directories()

# Plain constants for modules that read configuration at import time
DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.records_svc_db_busy_timeout

API_HOST = settings.records_svc_host
API_PORT = settings.records_svc_port
API_RELOAD = settings.records_svc_reload

DEFAULT_PAGE_SIZE = settings.records_svc_default_page_size
