"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.auth import LoginRequest, TokenClaims, TokenResponse
from schemas.doctor import DoctorCreate, DoctorFilter, DoctorPage, DoctorResponse, DoctorUpdate
from schemas.medical_history import (
    MedicalHistoryCreate,
    MedicalHistoryFilter,
    MedicalHistoryPage,
    MedicalHistoryResponse,
    MedicalHistoryUpdate,
)
from schemas.pagination import ListParams, PageResponse
from schemas.patient import PatientCreate, PatientFilter, PatientPage, PatientResponse, PatientUpdate

__all__ = [
    # Auth schemas
    "LoginRequest",
    "TokenClaims",
    "TokenResponse",
    # Patient schemas
    "PatientCreate",
    "PatientFilter",
    "PatientPage",
    "PatientResponse",
    "PatientUpdate",
    # Doctor schemas
    "DoctorCreate",
    "DoctorFilter",
    "DoctorPage",
    "DoctorResponse",
    "DoctorUpdate",
    # Medical history schemas
    "MedicalHistoryCreate",
    "MedicalHistoryFilter",
    "MedicalHistoryPage",
    "MedicalHistoryResponse",
    "MedicalHistoryUpdate",
    # Paging
    "ListParams",
    "PageResponse",
]
