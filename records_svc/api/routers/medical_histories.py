"""
Medical histories router - consultation record endpoints.

All endpoints require a bearer token.

Architecture:
    HTTP Request → Router (this file) → MedicalHistoryService → UnitOfWork → Database
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from core.auth import get_current_user
from core.dependencies import get_medical_history_service
from schemas import (
    MedicalHistoryCreate,
    MedicalHistoryFilter,
    MedicalHistoryPage,
    MedicalHistoryResponse,
    MedicalHistoryUpdate,
)
from services import MedicalHistoryService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/medical-histories",
    tags=["Medical Histories"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=MedicalHistoryPage,
    summary="List medical histories",
    description="Filter by patient, doctor, date range (inclusive) and diagnosis; sort by date or diagnosis; page the results."
)
def list_medical_histories(
    filters: Annotated[MedicalHistoryFilter, Query()],
    history_service: MedicalHistoryService = Depends(get_medical_history_service)
):
    """
    Get one page of medical histories.

    Query Parameters:
    - **patient_id** / **doctor_id**: exact match
    - **start_date** / **end_date**: inclusive bounds on the consultation date
    - **diagnosis**: substring, case-insensitive
    - **sort_by**: `date` (default) or `diagnosis`
    """
    return history_service.list_medical_histories(filters)


@router.get("/{history_id}", response_model=MedicalHistoryResponse, summary="Get a medical history")
def get_medical_history(
    history_id: int,
    history_service: MedicalHistoryService = Depends(get_medical_history_service)
):
    return history_service.get_medical_history(history_id)


@router.post(
    "",
    response_model=MedicalHistoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a medical history",
    description="Record a consultation. Returns 400 if the patient or doctor does not exist."
)
def create_medical_history(
    history: MedicalHistoryCreate,
    response: Response,
    history_service: MedicalHistoryService = Depends(get_medical_history_service)
):
    """
    Create a medical history entry.

    Raises 400 "Invalid PatientId." or "Invalid DoctorId." for unknown references.
    """
    created = history_service.create_medical_history(history)
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return created


@router.put(
    "/{history_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update a medical history",
)
def update_medical_history(
    history_id: int,
    history: MedicalHistoryUpdate,
    history_service: MedicalHistoryService = Depends(get_medical_history_service)
):
    history_service.update_medical_history(history_id, history)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{history_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a medical history",
)
def delete_medical_history(
    history_id: int,
    history_service: MedicalHistoryService = Depends(get_medical_history_service)
):
    history_service.delete_medical_history(history_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
