"""
Service layer for patient operations.

This service contains business logic for patient management
and orchestrates calls to repositories through a unit of work.

Architecture:
    API Layer (routers) → PatientService → UnitOfWork.patients → Database

Dependency Injection:
    PatientService receives its unit of work via constructor injection.
    Use core.dependencies.get_patient_service() in routers with Depends().
"""
import logging
from typing import List

from core.exceptions import NotFoundError
from models import Patient
from repositories import Condition, Field, UnitOfWork
from schemas import PatientCreate, PatientFilter, PatientPage, PatientResponse, PatientUpdate
from services.integrity import IntegrityGuard
from services.query_composer import SortOptions, compose_page

logger = logging.getLogger(__name__)

PATIENT_SORT = SortOptions(
    allowed={"name": "name", "birthdate": "birth_date"},
    default="name",
)

# Columns projected for list responses
PATIENT_COLUMNS = ("id", "name", "id_number", "email", "birth_date")


def patient_conditions(filters: PatientFilter) -> List[Condition]:
    """Translate list filters into predicates; empty filters are skipped."""
    conditions: List[Condition] = []
    if filters.name:
        conditions.append(Field("name").icontains(filters.name))
    if filters.id_number:
        conditions.append(Field("id_number").contains(filters.id_number))
    return conditions


class PatientService:
    """
    Service layer for patient operations.

    Handles uniqueness of the identification number, identity checks on
    update, and paged listing.
    """

    def __init__(self, unit_of_work: UnitOfWork):
        """
        Initialize the patient service.

        Args:
            unit_of_work: Request-scoped UnitOfWork.
                          Injected via core.dependencies.get_patient_service().
        """
        self._uow = unit_of_work
        self._guard = IntegrityGuard(unit_of_work)

    def list_patients(self, filters: PatientFilter) -> PatientPage:
        """
        Get one page of patients.

        Args:
            filters: Name / identification filters plus paging and sorting.

        Returns:
            PatientPage: Matching patients and pagination metadata.
        """
        page = compose_page(
            self._uow.patients.query().select(*PATIENT_COLUMNS),
            conditions=patient_conditions(filters),
            sort=PATIENT_SORT.resolve(filters.sort_by, filters.sort_descending),
            page_number=filters.page_number,
            page_size=filters.page_size,
        )
        return PatientPage.model_validate(page, from_attributes=True)

    def get_patient(self, patient_id: int) -> PatientResponse:
        """
        Get a patient by id.

        Raises:
            NotFoundError: If no patient has this id.
        """
        patient = self._uow.patients.get_by_id(patient_id)
        if patient is None:
            raise NotFoundError("Patient not found.", patient_id=patient_id)
        return PatientResponse.model_validate(patient)

    def create_patient(self, payload: PatientCreate) -> PatientResponse:
        """
        Add a new patient.

        Raises:
            ConflictError: If the identification number is already registered.
        """
        self._guard.ensure_unique(self._uow.patients, "id_number", payload.id_number, "IdNumber")

        patient = Patient(**payload.model_dump())
        self._uow.patients.add(patient)
        self._uow.commit()

        logger.info(f"Patient created (id={patient.id})")
        return PatientResponse.model_validate(patient)

    def update_patient(self, patient_id: int, payload: PatientUpdate) -> None:
        """
        Replace a patient's fields.

        Raises:
            ConflictError: On id mismatch, or if another patient holds the
                identification number.
            NotFoundError: If no patient has this id.
        """
        self._guard.ensure_matching_id(patient_id, payload.id)

        if self._uow.patients.get_by_id(patient_id) is None:
            raise NotFoundError("Patient not found.", patient_id=patient_id)
        self._guard.ensure_unique(
            self._uow.patients, "id_number", payload.id_number, "IdNumber", exclude_id=patient_id
        )

        self._uow.patients.update(Patient(**payload.model_dump()))
        self._uow.commit()
        logger.info(f"Patient updated (id={patient_id})")

    def delete_patient(self, patient_id: int) -> None:
        """
        Delete a patient and, by cascade, their medical histories.

        Raises:
            NotFoundError: If no patient has this id.
        """
        patient = self._uow.patients.get_by_id(patient_id)
        if patient is None:
            raise NotFoundError("Patient not found.", patient_id=patient_id)

        self._uow.patients.delete(patient)
        self._uow.commit()
        logger.info(f"Patient deleted (id={patient_id})")
