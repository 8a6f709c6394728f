"""
Core module for application configuration, logging, and shared utilities.

This module provides:
- Settings: Application configuration via pydantic-settings
- Exceptions: Domain error kinds and the HTTP exception handler
- Datetime utilities: UTC-first date/datetime handling

Dependency injection and authentication live in core.dependencies and
core.auth; they import the service layer and are not re-exported here.
"""
from core.config import settings, Settings

# Exception classes for consistent error handling
from core.exceptions import (
    ErrorKind,
    RecordsServiceError,
    NotFoundError,
    ConflictError,
    InvalidReferenceError,
    StoreError,
    AuthenticationError,
    STATUS_BY_KIND,
    setup_exception_handlers,
)

# UTC datetime utilities
from core.datetime_utils import (
    utc_now,
    to_utc,
    parse_datetime,
    parse_date,
    format_iso,
    format_date,
    to_db_value,
)
from core.config import (
    DATABASE_PATH,
    DATABASE_BUSY_TIMEOUT,
    API_HOST,
    API_PORT,
    API_RELOAD,
    DEFAULT_PAGE_SIZE,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Exceptions
    "ErrorKind",
    "RecordsServiceError",
    "NotFoundError",
    "ConflictError",
    "InvalidReferenceError",
    "StoreError",
    "AuthenticationError",
    "STATUS_BY_KIND",
    "setup_exception_handlers",
    # Datetime utilities
    "utc_now",
    "to_utc",
    "parse_datetime",
    "parse_date",
    "format_iso",
    "format_date",
    "to_db_value",
    # Configuration exports
    "DATABASE_PATH",
    "DATABASE_BUSY_TIMEOUT",
    "API_HOST",
    "API_PORT",
    "API_RELOAD",
    "DEFAULT_PAGE_SIZE",
]
