"""
Tests for the generic repository.
"""
import pytest

from conftest import make_doctor, make_patient
from repositories import Field


def test_add_is_staged_until_commit(uow):
    """Test that add() does not write and the id is assigned by commit()."""
    patient = make_patient()
    uow.patients.add(patient)

    assert patient.id is None
    assert uow.patients.get_all() == []
    assert len(uow.pending) == 1

    uow.commit()

    assert patient.id is not None
    assert uow.patients.get_by_id(patient.id) == patient


def test_get_by_id_missing_returns_none(uow):
    assert uow.patients.get_by_id(999) is None


def test_find_where(uow):
    uow.patients.add(make_patient(name="Alice", id_number="A1"))
    uow.patients.add(make_patient(name="Bob", id_number="B1"))
    uow.commit()

    found = uow.patients.find_where(Field("id_number") == "B1")
    assert [p.name for p in found] == ["Bob"]


def test_update_and_delete(uow, saved_patient):
    saved_patient.email = "new@example.com"
    uow.patients.update(saved_patient)
    uow.commit()
    assert uow.patients.get_by_id(saved_patient.id).email == "new@example.com"

    uow.patients.delete(saved_patient)
    uow.commit()
    assert uow.patients.get_by_id(saved_patient.id) is None


def test_add_rejects_persisted_entity(uow, saved_patient):
    with pytest.raises(ValueError, match="already has id"):
        uow.patients.add(saved_patient)


def test_update_and_delete_reject_unpersisted_entity(uow):
    with pytest.raises(ValueError):
        uow.patients.update(make_patient())
    with pytest.raises(ValueError):
        uow.patients.delete(make_patient())


def test_repository_rejects_other_entity_types(uow):
    with pytest.raises(TypeError):
        uow.patients.add(make_doctor())


def test_repositories_share_one_session(uow):
    """Test that one commit covers writes staged on different repositories."""
    uow.patients.add(make_patient())
    uow.doctors.add(make_doctor())
    assert len(uow.pending) == 2
    assert uow.commit() == 2
    assert len(uow.patients.get_all()) == 1
    assert len(uow.doctors.get_all()) == 1


def test_is_persisted_follows_commit(uow):
    patient = make_patient()
    assert not patient.is_persisted

    uow.patients.add(patient)
    assert not patient.is_persisted

    uow.commit()
    assert patient.is_persisted
