"""
Service layer for doctor operations.

Architecture:
    API Layer (routers) → DoctorService → UnitOfWork.doctors → Database
"""
import logging
from typing import List

from core.exceptions import NotFoundError
from models import Doctor
from repositories import Condition, Field, UnitOfWork
from schemas import DoctorCreate, DoctorFilter, DoctorPage, DoctorResponse, DoctorUpdate
from services.integrity import IntegrityGuard
from services.query_composer import SortOptions, compose_page

logger = logging.getLogger(__name__)

DOCTOR_SORT = SortOptions(
    allowed={"name": "name", "specialty": "specialty"},
    default="name",
)

DOCTOR_COLUMNS = ("id", "name", "license_number", "specialty", "email")


def doctor_conditions(filters: DoctorFilter) -> List[Condition]:
    conditions: List[Condition] = []
    if filters.name:
        conditions.append(Field("name").icontains(filters.name))
    if filters.license_number:
        conditions.append(Field("license_number").contains(filters.license_number))
    if filters.specialty:
        conditions.append(Field("specialty").icontains(filters.specialty))
    return conditions


class DoctorService:
    """Business logic for doctors: unique license numbers and paged listing."""

    def __init__(self, unit_of_work: UnitOfWork):
        self._uow = unit_of_work
        self._guard = IntegrityGuard(unit_of_work)

    def list_doctors(self, filters: DoctorFilter) -> DoctorPage:
        page = compose_page(
            self._uow.doctors.query().select(*DOCTOR_COLUMNS),
            conditions=doctor_conditions(filters),
            sort=DOCTOR_SORT.resolve(filters.sort_by, filters.sort_descending),
            page_number=filters.page_number,
            page_size=filters.page_size,
        )
        return DoctorPage.model_validate(page, from_attributes=True)

    def get_doctor(self, doctor_id: int) -> DoctorResponse:
        doctor = self._uow.doctors.get_by_id(doctor_id)
        if doctor is None:
            raise NotFoundError("Doctor not found.", doctor_id=doctor_id)
        return DoctorResponse.model_validate(doctor)

    def create_doctor(self, payload: DoctorCreate) -> DoctorResponse:
        """
        Add a new doctor.

        Raises:
            ConflictError: If the license number is already registered.
        """
        self._guard.ensure_unique(
            self._uow.doctors, "license_number", payload.license_number, "LicenseNumber"
        )

        doctor = Doctor(**payload.model_dump())
        self._uow.doctors.add(doctor)
        self._uow.commit()

        logger.info(f"Doctor created (id={doctor.id})")
        return DoctorResponse.model_validate(doctor)

    def update_doctor(self, doctor_id: int, payload: DoctorUpdate) -> None:
        """
        Replace a doctor's fields.

        Raises:
            ConflictError: On id mismatch or a license number held by another doctor.
            NotFoundError: If no doctor has this id.
        """
        self._guard.ensure_matching_id(doctor_id, payload.id)

        if self._uow.doctors.get_by_id(doctor_id) is None:
            raise NotFoundError("Doctor not found.", doctor_id=doctor_id)
        self._guard.ensure_unique(
            self._uow.doctors,
            "license_number",
            payload.license_number,
            "LicenseNumber",
            exclude_id=doctor_id,
        )

        self._uow.doctors.update(Doctor(**payload.model_dump()))
        self._uow.commit()
        logger.info(f"Doctor updated (id={doctor_id})")

    def delete_doctor(self, doctor_id: int) -> None:
        doctor = self._uow.doctors.get_by_id(doctor_id)
        if doctor is None:
            raise NotFoundError("Doctor not found.", doctor_id=doctor_id)

        self._uow.doctors.delete(doctor)
        self._uow.commit()
        logger.info(f"Doctor deleted (id={doctor_id})")
