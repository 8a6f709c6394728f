"""
API routers module.

This module contains all API route definitions organized by domain.
"""
from api.routers.auth import router as auth_router
from api.routers.doctors import router as doctors_router
from api.routers.health import router as health_router
from api.routers.medical_histories import router as medical_histories_router
from api.routers.patients import router as patients_router

__all__ = [
    "auth_router",
    "doctors_router",
    "health_router",
    "medical_histories_router",
    "patients_router",
]
