"""
Doctors router - doctor management endpoints.

All endpoints require a bearer token.

Architecture:
    HTTP Request → Router (this file) → DoctorService → UnitOfWork → Database
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from core.auth import get_current_user
from core.dependencies import get_doctor_service
from schemas import DoctorCreate, DoctorFilter, DoctorPage, DoctorResponse, DoctorUpdate
from services import DoctorService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/doctors",
    tags=["Doctors"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=DoctorPage,
    summary="List doctors",
    description="Filter by name, license number and specialty, sort by name or specialty, and page the results."
)
def list_doctors(
    filters: Annotated[DoctorFilter, Query()],
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    """Get one page of doctors. Unknown `sort_by` keys fall back to `name`."""
    return doctor_service.list_doctors(filters)


@router.get("/{doctor_id}", response_model=DoctorResponse, summary="Get a doctor")
def get_doctor(
    doctor_id: int,
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    return doctor_service.get_doctor(doctor_id)


@router.post(
    "",
    response_model=DoctorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new doctor",
    description="Add a new doctor. The license number must be unique (409 otherwise)."
)
def create_doctor(
    doctor: DoctorCreate,
    response: Response,
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    created = doctor_service.create_doctor(doctor)
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return created


@router.put(
    "/{doctor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Update a doctor",
)
def update_doctor(
    doctor_id: int,
    doctor: DoctorUpdate,
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    """
    Replace a doctor.

    Raises 409 on id mismatch or a duplicate license number, 404 if absent.
    """
    doctor_service.update_doctor(doctor_id, doctor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{doctor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a doctor",
    description="Delete a doctor together with the medical histories they recorded."
)
def delete_doctor(
    doctor_id: int,
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    doctor_service.delete_doctor(doctor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
