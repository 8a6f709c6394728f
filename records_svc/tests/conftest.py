"""
Shared pytest fixtures for repository, service and API tests.

Key patterns:

1. Database Isolation: Each test gets a fresh SQLite database under tmp_path
2. DI Override: Use app.dependency_overrides to inject test dependencies
3. Real Units of Work: Each API request opens its own UnitOfWork on the
   test database, exactly as in production

Fixture Hierarchy:
    temp_db → uow → services
    temp_db → test_app → client
"""
import os
import tempfile
from datetime import date, datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Set test configuration before importing config modules
# This must happen before any config imports
TEST_JWT_SECRET = "test-jwt-secret-for-testing-purposes-0123456789"
os.environ.setdefault("RECORDS_SVC_JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("RECORDS_SVC_DB_DIR", os.path.join(tempfile.gettempdir(), "records-svc-tests"))

from core import dependencies as deps
from core.auth import get_current_user
from core.exceptions import setup_exception_handlers
from models import Doctor, MedicalHistory, Patient
from repositories import Database, UnitOfWork
from schemas import TokenClaims
from services import AuthService, DoctorService, MedicalHistoryService, PatientService


@pytest.fixture
def temp_db(tmp_path):
    """
    Create a temporary database for testing.

    The schema is created on construction; tmp_path removes the file and
    its WAL side files afterwards.
    """
    return Database(db_path=str(tmp_path / "test.db"))


@pytest.fixture
def uow(temp_db):
    """A UnitOfWork over the test database, closed after the test."""
    with UnitOfWork(temp_db) as unit_of_work:
        yield unit_of_work


@pytest.fixture
def patient_service(uow):
    return PatientService(unit_of_work=uow)


@pytest.fixture
def doctor_service(uow):
    return DoctorService(unit_of_work=uow)


@pytest.fixture
def medical_history_service(uow):
    return MedicalHistoryService(unit_of_work=uow)


@pytest.fixture
def auth_service(uow):
    return AuthService(unit_of_work=uow)


# =============================================================================
# ENTITY FACTORIES
# =============================================================================

def make_patient(name="John Doe", id_number="AB123", email="john@example.com",
                 birth_date=date(1985, 4, 12)) -> Patient:
    return Patient(name=name, id_number=id_number, email=email, birth_date=birth_date)


def make_doctor(name="Gregory House", license_number="LIC1", specialty="Diagnostics",
                email="house@example.com") -> Doctor:
    return Doctor(name=name, license_number=license_number, specialty=specialty, email=email)


def make_history(patient_id, doctor_id, date=datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc),
                 diagnosis="Hypertension", treatment="Lisinopril") -> MedicalHistory:
    return MedicalHistory(
        patient_id=patient_id,
        doctor_id=doctor_id,
        date=date,
        diagnosis=diagnosis,
        treatment=treatment,
    )


@pytest.fixture
def saved_patient(uow):
    """A committed patient."""
    patient = make_patient()
    uow.patients.add(patient)
    uow.commit()
    return patient


@pytest.fixture
def saved_doctor(uow):
    """A committed doctor."""
    doctor = make_doctor()
    uow.doctors.add(doctor)
    uow.commit()
    return doctor


# =============================================================================
# API FIXTURES
# =============================================================================

def _build_app() -> FastAPI:
    from api.routers import (
        auth_router,
        doctors_router,
        health_router,
        medical_histories_router,
        patients_router,
    )

    app = FastAPI(title="Patient Records API Test")

    # Register exception handlers (same as production)
    setup_exception_handlers(app)

    # Include the real routers (not test copies)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(patients_router)
    app.include_router(doctors_router)
    app.include_router(medical_histories_router)
    return app


@pytest.fixture
def test_app(temp_db):
    """
    Create a FastAPI test app with dependency overrides.

    - Uses the real routers (testing actual endpoint code)
    - Every request gets its own UnitOfWork on the test database
    - Bearer authentication is replaced by a fixed identity
    """
    app = _build_app()

    # get_unit_of_work depends on get_database, so every service resolves
    # against the test database
    app.dependency_overrides[deps.get_database] = lambda: temp_db

    # Override auth to skip token verification in tests
    def skip_auth():
        return TokenClaims(username="tester", role="admin", jti="test")
    app.dependency_overrides[get_current_user] = skip_auth

    yield app

    # Cleanup: Clear dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)


@pytest.fixture
def secured_app(temp_db):
    """A test app that keeps real bearer token verification."""
    app = _build_app()
    app.dependency_overrides[deps.get_database] = lambda: temp_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def secured_client(secured_app):
    return TestClient(secured_app)


# =============================================================================
# API PAYLOAD HELPERS
# =============================================================================

@pytest.fixture
def create_patient(client):
    """Return a function that creates a patient via the API and returns its JSON."""
    counter = {"n": 0}

    def _create(**overrides):
        counter["n"] += 1
        payload = {
            "name": "John Doe",
            "id_number": f"ID{counter['n']:04d}",
            "email": f"patient{counter['n']}@example.com",
            "birth_date": "1985-04-12",
        }
        payload.update(overrides)
        response = client.post("/api/v1/patients", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_doctor(client):
    """Return a function that creates a doctor via the API and returns its JSON."""
    counter = {"n": 0}

    def _create(**overrides):
        counter["n"] += 1
        payload = {
            "name": "Gregory House",
            "license_number": f"LIC{counter['n']:04d}",
            "specialty": "Diagnostics",
            "email": f"doctor{counter['n']}@example.com",
        }
        payload.update(overrides)
        response = client.post("/api/v1/doctors", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
