"""
Service layer for business logic.

This module contains all business logic and orchestration services.
Every service is constructed over a request-scoped UnitOfWork.
"""
from services.auth_service import AuthService
from services.doctor_service import DoctorService
from services.integrity import IntegrityGuard
from services.medical_history_service import MedicalHistoryService
from services.patient_service import PatientService
from services.query_composer import Page, Sort, SortOptions, compose_page

__all__ = [
    "AuthService",
    "DoctorService",
    "IntegrityGuard",
    "MedicalHistoryService",
    "PatientService",
    "Page",
    "Sort",
    "SortOptions",
    "compose_page",
]
