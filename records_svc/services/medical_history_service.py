"""
Service layer for medical history operations.

A medical history entry links one patient to one doctor. Both references
are checked before any write; the store's foreign keys back that up at
commit time.

Architecture:
    API Layer (routers) → MedicalHistoryService → UnitOfWork → Database
"""
import logging
from typing import List

from core.datetime_utils import to_utc
from core.exceptions import NotFoundError
from models import MedicalHistory
from repositories import Condition, Field, UnitOfWork
from schemas import (
    MedicalHistoryCreate,
    MedicalHistoryFilter,
    MedicalHistoryPage,
    MedicalHistoryResponse,
    MedicalHistoryUpdate,
)
from services.integrity import IntegrityGuard
from services.query_composer import SortOptions, compose_page

logger = logging.getLogger(__name__)

MEDICAL_HISTORY_SORT = SortOptions(
    allowed={"date": "date", "diagnosis": "diagnosis"},
    default="date",
)

MEDICAL_HISTORY_COLUMNS = ("id", "patient_id", "doctor_id", "date", "diagnosis", "treatment")


def medical_history_conditions(filters: MedicalHistoryFilter) -> List[Condition]:
    """
    Translate list filters into predicates.

    Date bounds are inclusive and compared in UTC.
    """
    conditions: List[Condition] = []
    if filters.patient_id is not None:
        conditions.append(Field("patient_id") == filters.patient_id)
    if filters.doctor_id is not None:
        conditions.append(Field("doctor_id") == filters.doctor_id)
    if filters.start_date is not None:
        conditions.append(Field("date") >= to_utc(filters.start_date))
    if filters.end_date is not None:
        conditions.append(Field("date") <= to_utc(filters.end_date))
    if filters.diagnosis:
        conditions.append(Field("diagnosis").icontains(filters.diagnosis))
    return conditions


def _to_entity(payload: MedicalHistoryCreate) -> MedicalHistory:
    values = payload.model_dump()
    values["date"] = to_utc(values["date"])
    return MedicalHistory(**values)


class MedicalHistoryService:
    """Business logic for medical histories."""

    def __init__(self, unit_of_work: UnitOfWork):
        """
        Initialize the service.

        Args:
            unit_of_work: Request-scoped UnitOfWork.
                          Injected via core.dependencies.get_medical_history_service().
        """
        self._uow = unit_of_work
        self._guard = IntegrityGuard(unit_of_work)

    def list_medical_histories(self, filters: MedicalHistoryFilter) -> MedicalHistoryPage:
        """
        Get one page of medical histories.

        Default ordering is by date ascending; `sort_by="diagnosis"` orders
        by diagnosis instead.
        """
        page = compose_page(
            self._uow.medical_histories.query().select(*MEDICAL_HISTORY_COLUMNS),
            conditions=medical_history_conditions(filters),
            sort=MEDICAL_HISTORY_SORT.resolve(filters.sort_by, filters.sort_descending),
            page_number=filters.page_number,
            page_size=filters.page_size,
        )
        return MedicalHistoryPage.model_validate(page, from_attributes=True)

    def get_medical_history(self, history_id: int) -> MedicalHistoryResponse:
        history = self._uow.medical_histories.get_by_id(history_id)
        if history is None:
            raise NotFoundError("Medical history not found.", history_id=history_id)
        return MedicalHistoryResponse.model_validate(history)

    def create_medical_history(self, payload: MedicalHistoryCreate) -> MedicalHistoryResponse:
        """
        Record a consultation.

        Raises:
            InvalidReferenceError: If the patient or doctor does not exist.
        """
        self._guard.ensure_references(payload.patient_id, payload.doctor_id)

        history = _to_entity(payload)
        self._uow.medical_histories.add(history)
        self._uow.commit()

        logger.info(
            f"Medical history created (id={history.id})",
            extra={"patient_id": history.patient_id, "doctor_id": history.doctor_id}
        )
        return MedicalHistoryResponse.model_validate(history)

    def update_medical_history(self, history_id: int, payload: MedicalHistoryUpdate) -> None:
        """
        Replace a medical history entry.

        Raises:
            ConflictError: On id mismatch.
            NotFoundError: If the entry does not exist.
            InvalidReferenceError: If the patient or doctor does not exist.
        """
        self._guard.ensure_matching_id(history_id, payload.id)

        if self._uow.medical_histories.get_by_id(history_id) is None:
            raise NotFoundError("Medical history not found.", history_id=history_id)
        self._guard.ensure_references(payload.patient_id, payload.doctor_id)

        self._uow.medical_histories.update(_to_entity(payload))
        self._uow.commit()
        logger.info(f"Medical history updated (id={history_id})")

    def delete_medical_history(self, history_id: int) -> None:
        history = self._uow.medical_histories.get_by_id(history_id)
        if history is None:
            raise NotFoundError("Medical history not found.", history_id=history_id)

        self._uow.medical_histories.delete(history)
        self._uow.commit()
        logger.info(f"Medical history deleted (id={history_id})")
