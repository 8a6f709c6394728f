"""
FastAPI application entry point for the Patient Records API.

This module configures and creates the FastAPI application with:
- Structured JSON Logging: Request/response logging with request ids
- Dependency Injection: Services and units of work injected via Depends()
- Exception Handling: Consistent error responses via setup_exception_handlers()
- Bearer Authentication: JWT access tokens from /api/v1/auth/login
- Lifespan Management: Database initialization and administrator bootstrap

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware Stack (order matters!)                          │
    │    ├── LoggingMiddleware  - Request logging & request ids   │
    │    └── CORSMiddleware     - Cross-origin support            │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py             - /health, /ready              │
    │    ├── auth.py               - Login                        │
    │    ├── patients.py           - Patient CRUD                 │
    │    ├── doctors.py            - Doctor CRUD                  │
    │    └── medical_histories.py  - Medical history CRUD         │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)     ← Injected via Depends()          │
    │    ├── Patient/Doctor/MedicalHistoryService                 │
    │    ├── AuthService        - Passwords and tokens            │
    │    ├── IntegrityGuard     - Uniqueness / reference checks   │
    │    └── compose_page       - Filter, sort, count, paginate   │
    ├─────────────────────────────────────────────────────────────┤
    │  UnitOfWork (repositories/)     ← One per request           │
    │    └── Repository[T] per entity, Query builder              │
    ├─────────────────────────────────────────────────────────────┤
    │  Database (SQLite)                                          │
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from core.config import API_HOST, API_PORT, API_RELOAD, settings
from core.dependencies import get_database
from core.exceptions import setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import (
    auth_router,
    doctors_router,
    health_router,
    medical_histories_router,
    patients_router,
)
from repositories import Database, UnitOfWork
from services import AuthService


def bootstrap_admin(db: Database) -> None:
    """Create the configured administrator account if it does not exist yet."""
    logger = logging.getLogger(__name__)
    if not settings.bootstrap_admin_enabled:
        logger.info("No administrator credentials configured; skipping bootstrap")
        return

    with UnitOfWork(db) as uow:
        created = AuthService(uow, config=settings).ensure_user(
            settings.records_svc_admin_username,
            settings.records_svc_admin_password,
            role="admin",
        )
    if created:
        logger.info(
            "Administrator account created",
            extra={"username": settings.records_svc_admin_username}
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Startup:
        - Configures structured JSON logging
        - Initializes the database (triggers schema creation)
        - Creates the administrator account when configured

    Shutdown:
        - Logs shutdown message
    """
    # Configure structured logging FIRST (before any other logging)
    setup_logging(level=settings.records_svc_log_level, json_format=settings.records_svc_log_json)

    logger = logging.getLogger(__name__)
    logger.info("Starting Patient Records API...")

    db = get_database()
    logger.info(
        "Database initialized",
        extra={"db_path": db.db_path}
    )
    bootstrap_admin(db)

    yield  # Application runs here

    logger.info("Patient Records API shutting down...")


# Create FastAPI app with lifespan context
app = FastAPI(
    title="Patient Records API",
    description="REST API for managing patients, doctors and their medical histories, "
                "with filtered, sorted and paginated listings.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================
# RecordsServiceError subclasses are converted to HTTP responses by error kind.
setup_exception_handlers(app)

# =============================================================================
# MIDDLEWARE
# =============================================================================
# Middleware is executed in REVERSE order of registration.

# 1. CORS Middleware (innermost - closest to routes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. Logging Middleware (outermost - captures all requests)
app.add_middleware(LoggingMiddleware)

# =============================================================================
# ROUTERS
# =============================================================================
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(patients_router)
app.include_router(doctors_router)
app.include_router(medical_histories_router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )
