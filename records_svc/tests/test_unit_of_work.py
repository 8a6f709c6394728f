"""
Tests for UnitOfWork transaction semantics.
"""
from datetime import datetime, timezone

import pytest

from conftest import make_doctor, make_history, make_patient
from core.exceptions import ConflictError, InvalidReferenceError, NotFoundError, StoreError
from repositories import Field, UnitOfWork


def test_commit_with_nothing_staged_returns_zero(uow):
    assert uow.commit() == 0


def test_commit_is_atomic(uow, temp_db):
    """Test that a failing change rolls back every change in the batch."""
    uow.patients.add(make_patient(id_number="X1"))
    uow.patients.add(make_patient(id_number="X1"))

    with pytest.raises(ConflictError, match="IdNumber already exists."):
        uow.commit()

    assert uow.pending == ()
    with UnitOfWork(temp_db) as other:
        assert other.patients.get_all() == []


def test_ids_not_assigned_on_failed_commit(uow):
    patient = make_patient(id_number="X1")
    duplicate = make_patient(id_number="X1")
    uow.patients.add(patient)
    uow.patients.add(duplicate)

    with pytest.raises(ConflictError):
        uow.commit()

    assert patient.id is None
    assert duplicate.id is None


def test_unique_violation_on_license_number(uow):
    uow.doctors.add(make_doctor(license_number="L1"))
    uow.doctors.add(make_doctor(license_number="L1"))
    with pytest.raises(ConflictError, match="LicenseNumber already exists."):
        uow.commit()


def test_update_of_missing_row_fails_at_commit(uow, saved_patient):
    uow.patients.delete(saved_patient)
    uow.commit()

    uow.patients.update(saved_patient)
    with pytest.raises(NotFoundError, match="Patient not found."):
        uow.commit()


def test_delete_of_missing_row_fails_at_commit(uow):
    ghost = make_history(1, 1)
    ghost.id = 42
    uow.medical_histories.delete(ghost)
    with pytest.raises(NotFoundError, match="Medical history not found."):
        uow.commit()


def test_foreign_key_violation_is_invalid_reference(uow):
    uow.medical_histories.add(make_history(patient_id=123, doctor_id=456))
    with pytest.raises(InvalidReferenceError):
        uow.commit()


def test_deleting_patient_cascades_to_histories(uow, saved_patient, saved_doctor):
    uow.medical_histories.add(make_history(saved_patient.id, saved_doctor.id))
    uow.commit()

    uow.patients.delete(saved_patient)
    uow.commit()

    assert uow.medical_histories.get_all() == []
    assert uow.doctors.get_by_id(saved_doctor.id) is not None


def test_committed_changes_visible_to_other_units(uow, temp_db):
    patient = make_patient()
    uow.patients.add(patient)
    uow.commit()

    with UnitOfWork(temp_db) as other:
        assert other.patients.get_by_id(patient.id).name == patient.name


def test_close_discards_pending_changes(temp_db):
    uow = UnitOfWork(temp_db)
    uow.patients.add(make_patient())
    uow.close()

    assert uow.closed
    with UnitOfWork(temp_db) as other:
        assert other.patients.get_all() == []


def test_use_after_close_raises_store_error(temp_db):
    with UnitOfWork(temp_db) as uow:
        pass
    with pytest.raises(StoreError):
        uow.patients.get_all()
    with pytest.raises(StoreError):
        uow.patients.add(make_patient())


def test_unit_of_work_is_reusable_after_failed_commit(uow):
    uow.patients.add(make_patient(id_number="X1"))
    uow.patients.add(make_patient(id_number="X1"))
    with pytest.raises(ConflictError):
        uow.commit()

    patient = make_patient(id_number="X2")
    uow.patients.add(patient)
    assert uow.commit() == 1
    assert patient.id is not None


def test_invalid_reference_rolls_back_whole_batch(uow, temp_db, saved_patient):
    """Test that a history with a missing doctor takes the rest of its batch down with it."""
    extra_patient = make_patient(id_number="NEW1")
    uow.patients.add(extra_patient)
    uow.medical_histories.add(make_history(saved_patient.id, doctor_id=999))

    with pytest.raises(InvalidReferenceError):
        uow.commit()

    with UnitOfWork(temp_db) as other:
        assert other.medical_histories.get_all() == []
        assert [p.id_number for p in other.patients.get_all()] == [saved_patient.id_number]


def test_duplicate_leaves_single_row(uow, saved_patient):
    uow.patients.add(make_patient(id_number=saved_patient.id_number))
    with pytest.raises(ConflictError):
        uow.commit()
    assert uow.patients.query().count() == 1


def test_dates_before_year_1000_round_trip(uow, saved_patient, saved_doctor):
    early = make_history(saved_patient.id, saved_doctor.id, date=datetime(999, 1, 1, tzinfo=timezone.utc))
    late = make_history(saved_patient.id, saved_doctor.id, date=datetime(2025, 1, 1, tzinfo=timezone.utc))
    uow.medical_histories.add(early)
    uow.medical_histories.add(late)
    uow.commit()

    assert uow.fetch_one("SELECT date FROM medical_histories WHERE id = ?", (early.id,)) == (
        "0999-01-01T00:00:00Z",
    )
    assert uow.medical_histories.get_by_id(early.id).date == datetime(999, 1, 1, tzinfo=timezone.utc)

    before_2000 = uow.medical_histories.find_where(
        Field("date") < datetime(2000, 1, 1, tzinfo=timezone.utc)
    )
    assert [h.id for h in before_2000] == [early.id]
