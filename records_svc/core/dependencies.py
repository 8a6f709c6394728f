"""
FastAPI Dependency Injection configuration for the Patient Records API.

This module provides the dependency injection (DI) infrastructure. It enables:
- Clean separation between API, Service, and Repository layers
- Easy testing with fake dependencies
- Request-scoped units of work with guaranteed cleanup
- Centralized configuration of all dependencies

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (Business Logic)
         ↓ Injected
    UnitOfWork (one connection + one Repository per entity)
         ↓ Injected
    Database (SQLite)

Usage in Routers:
    from core.dependencies import get_patient_service

    @router.get("/{patient_id}")
    def get_patient(
        patient_id: int,
        patient_service: PatientService = Depends(get_patient_service)
    ):
        return patient_service.get_patient(patient_id)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_database] = lambda: test_database
"""
import logging
from typing import Generator, Optional

from fastapi import Depends

from core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE DEPENDENCY
# =============================================================================

_database_instance: Optional["Database"] = None


def get_database() -> "Database":
    """
    Get the database instance (process-wide singleton).

    The schema is created on first use; every connection is configured
    with WAL mode, a busy timeout and foreign key enforcement.

    Returns:
        Database: The configured database instance.

    Note:
        Import here to avoid circular imports with repositories.
    """
    global _database_instance

    if _database_instance is None:
        from repositories.base import Database

        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.records_svc_db_busy_timeout
        )
        logger.info("Database initialized successfully")

    return _database_instance


def reset_database() -> None:
    """
    Reset the database instance (for testing only).

    This allows tests to inject a fresh database instance.
    """
    global _database_instance
    _database_instance = None


# =============================================================================
# UNIT OF WORK DEPENDENCY
# =============================================================================

def get_unit_of_work(
    db: "Database" = Depends(get_database),
) -> Generator["UnitOfWork", None, None]:
    """
    Open a UnitOfWork for the duration of one request.

    The connection is released after the response is produced; anything
    staged but not committed is discarded.

    Yields:
        UnitOfWork: Session shared by every service in the request.
    """
    from repositories import UnitOfWork

    uow = UnitOfWork(db)
    try:
        yield uow
    finally:
        uow.close()


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_patient_service(
    uow: "UnitOfWork" = Depends(get_unit_of_work),
) -> "PatientService":
    """
    Get a PatientService bound to the request's unit of work.

    Returns:
        PatientService: Service for patient operations.
    """
    from services import PatientService

    return PatientService(unit_of_work=uow)


def get_doctor_service(
    uow: "UnitOfWork" = Depends(get_unit_of_work),
) -> "DoctorService":
    """
    Get a DoctorService bound to the request's unit of work.

    Returns:
        DoctorService: Service for doctor operations.
    """
    from services import DoctorService

    return DoctorService(unit_of_work=uow)


def get_medical_history_service(
    uow: "UnitOfWork" = Depends(get_unit_of_work),
) -> "MedicalHistoryService":
    """
    Get a MedicalHistoryService bound to the request's unit of work.

    Returns:
        MedicalHistoryService: Service for medical history operations.
    """
    from services import MedicalHistoryService

    return MedicalHistoryService(unit_of_work=uow)


def get_auth_service(
    uow: "UnitOfWork" = Depends(get_unit_of_work),
) -> "AuthService":
    """
    Get an AuthService configured from settings.

    Returns:
        AuthService: Service for login and token verification.
    """
    from services import AuthService

    return AuthService(unit_of_work=uow, config=settings)


# =============================================================================
# DEPENDENCY OVERRIDE HELPERS (FOR TESTING)
# =============================================================================

class DependencyOverrides:
    """
    Context manager for temporarily overriding dependencies in tests.

    Usage:
        with DependencyOverrides(app) as overrides:
            overrides.set(get_database, lambda: test_database)
            # Run tests with overridden dependency
        # Dependencies restored after context exits
    """

    def __init__(self, app):
        self.app = app
        self._original_overrides = {}

    def __enter__(self):
        self._original_overrides = self.app.dependency_overrides.copy()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.app.dependency_overrides = self._original_overrides

    def set(self, dependency, override):
        """Set a dependency override."""
        self.app.dependency_overrides[dependency] = override

    def clear(self):
        """Clear all overrides."""
        self.app.dependency_overrides = self._original_overrides.copy()
