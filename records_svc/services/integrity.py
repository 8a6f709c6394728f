"""
Pre-write integrity checks.

The checks run against the current unit of work before a change is staged.
They are advisory: two concurrent writers can both pass a uniqueness check,
in which case the store's UNIQUE constraint rejects the second commit and
UnitOfWork.commit() raises the same ConflictError.
"""
import logging
from typing import Any, Optional

from core.exceptions import ConflictError, InvalidReferenceError
from repositories import Field, Repository, UnitOfWork

logger = logging.getLogger(__name__)


class IntegrityGuard:
    """Uniqueness, referential and identity checks for create/update flows."""

    def __init__(self, unit_of_work: UnitOfWork):
        self._uow = unit_of_work

    def ensure_unique(
        self,
        repository: Repository,
        field: str,
        value: Any,
        label: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        """
        Fail if another row already holds `value` in `field`.

        Args:
            repository: Repository of the entity being written.
            field: Column that must be unique.
            value: Candidate value.
            label: Name used in the error message, e.g. "IdNumber".
            exclude_id: On update, the id of the row being updated.

        Raises:
            ConflictError: "<label> already exists."
        """
        condition = Field(field) == value
        if exclude_id is not None:
            condition = condition & (Field("id") != exclude_id)

        if repository.find_where(condition):
            logger.warning(
                f"{label} already exists",
                extra={"entity": repository.entity.__name__, "field": field}
            )
            raise ConflictError(f"{label} already exists.")

    def ensure_references(self, patient_id: int, doctor_id: int) -> None:
        """
        Fail unless both the patient and the doctor exist.

        The patient is checked first; the doctor is not looked up when the
        patient is missing.

        Raises:
            InvalidReferenceError: "Invalid PatientId." or "Invalid DoctorId."
        """
        if self._uow.patients.get_by_id(patient_id) is None:
            raise InvalidReferenceError("Invalid PatientId.", patient_id=patient_id)
        if self._uow.doctors.get_by_id(doctor_id) is None:
            raise InvalidReferenceError("Invalid DoctorId.", doctor_id=doctor_id)

    @staticmethod
    def ensure_matching_id(path_id: int, payload_id: Optional[int]) -> None:
        """
        Fail if the identity in the request path differs from the payload's.

        Runs before any store access.

        Raises:
            ConflictError: "ID mismatch."
        """
        if payload_id != path_id:
            raise ConflictError("ID mismatch.", path_id=path_id, payload_id=payload_id)
