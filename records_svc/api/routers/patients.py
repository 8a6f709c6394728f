"""
Patients router - patient management endpoints.

This router handles patient CRUD operations via RESTful endpoints.
All endpoints require a bearer token.

Architecture:
    HTTP Request → Router (this file) → PatientService → UnitOfWork → Database

Dependency Injection:
    Services are injected via FastAPI's Depends() mechanism.
    The DI chain is defined in core/dependencies.py.
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from core.auth import get_current_user
from core.dependencies import get_patient_service
from schemas import PatientCreate, PatientFilter, PatientPage, PatientResponse, PatientUpdate
from services import PatientService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/patients",
    tags=["Patients"],
    dependencies=[Depends(get_current_user)],  # Require a bearer token for all endpoints
)


# =============================================================================
# ENDPOINTS
# =============================================================================
# Domain errors (NotFoundError, ConflictError) propagate to the handlers
# registered by setup_exception_handlers().

@router.get(
    "",
    response_model=PatientPage,
    summary="List patients",
    description="Filter by name (case-insensitive) and identification number, sort by name or birthdate, and page the results."
)
def list_patients(
    filters: Annotated[PatientFilter, Query()],
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Get one page of patients.

    Query Parameters:
    - **name**: substring of the name, case-insensitive
    - **id_number**: substring of the identification number
    - **sort_by**: `name` (default) or `birthdate`; unknown keys fall back to `name`
    - **sort_descending**: reverse the order
    - **page_number** / **page_size**: 1-based page and rows per page
    """
    return patient_service.list_patients(filters)


@router.get(
    "/{patient_id}",
    response_model=PatientResponse,
    summary="Get a patient",
)
def get_patient(
    patient_id: int,
    patient_service: PatientService = Depends(get_patient_service)
):
    """Return the patient, or 404 "Patient not found."."""
    return patient_service.get_patient(patient_id)


@router.post(
    "",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new patient",
    description="Add a new patient. The identification number must be unique (409 otherwise)."
)
def create_patient(
    patient: PatientCreate,
    response: Response,
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Create a new patient.

    Returns the created patient with its id and a Location header.
    Raises 409 "IdNumber already exists." for a duplicate identification number.
    """
    created = patient_service.create_patient(patient)
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return created


@router.put(
    "/{patient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update a patient",
)
def update_patient(
    patient_id: int,
    patient: PatientUpdate,
    patient_service: PatientService = Depends(get_patient_service)
):
    """
    Replace a patient.

    Raises 409 "ID mismatch." if the body id differs from the path id,
    404 if the patient does not exist, and 409 if another patient holds the
    identification number.
    """
    patient_service.update_patient(patient_id, patient)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{patient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a patient",
    description="Delete a patient together with their medical histories."
)
def delete_patient(
    patient_id: int,
    patient_service: PatientService = Depends(get_patient_service)
):
    """Delete the patient, or 404 "Patient not found."."""
    patient_service.delete_patient(patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
