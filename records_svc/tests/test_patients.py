"""
Tests for patient endpoints.
"""
# =============================================================================
# CREATE
# =============================================================================

def test_create_patient_success(client):
    """Test successful patient creation."""
    response = client.post(
        "/api/v1/patients",
        json={
            "name": "John Doe",
            "id_number": "AB123",
            "email": "John@Example.com",
            "birth_date": "1985-04-12",
        }
    )
    assert response.status_code == 201
    data = response.json()
    assert isinstance(data["id"], int)
    assert data["name"] == "John Doe"
    assert data["email"] == "john@example.com"
    assert data["birth_date"] == "1985-04-12"
    assert response.headers["Location"] == f"/api/v1/patients/{data['id']}"


def test_create_patient_sanitizes_input(client):
    """Test that markup and stray characters are removed before saving."""
    response = client.post(
        "/api/v1/patients",
        json={
            "name": "<b>Ana</b>   María 3",
            "id_number": "AB-12 3",
            "email": "ana@example.com",
            "birth_date": "1990-01-01",
        }
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Ana María"
    assert data["id_number"] == "AB123"


def test_create_patient_duplicate(client, create_patient):
    """Test creating a patient with a taken identification number returns 409."""
    create_patient(id_number="DUP1")

    response = client.post(
        "/api/v1/patients",
        json={
            "name": "Jane Doe",
            "id_number": "DUP1",
            "email": "jane@example.com",
            "birth_date": "1990-01-01",
        }
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "IdNumber already exists."


def test_create_patient_validation_missing_fields(client):
    """Test patient creation without required fields fails validation."""
    response = client.post("/api/v1/patients", json={"name": "John"})
    assert response.status_code == 422


def test_create_patient_validation_bad_email(client):
    response = client.post(
        "/api/v1/patients",
        json={"name": "John", "id_number": "A1", "email": "nope", "birth_date": "1990-01-01"}
    )
    assert response.status_code == 422


def test_create_patient_name_reduced_to_nothing(client):
    response = client.post(
        "/api/v1/patients",
        json={"name": "<i></i>123", "id_number": "A1", "email": "a@b.co", "birth_date": "1990-01-01"}
    )
    assert response.status_code == 422


# =============================================================================
# READ
# =============================================================================

def test_get_patient(client, create_patient):
    created = create_patient(name="Alice")
    response = client.get(f"/api/v1/patients/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


def test_get_patient_not_found(client):
    response = client.get("/api/v1/patients/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Patient not found."


def test_list_patients_empty(client):
    """Test listing patients when database is empty."""
    response = client.get("/api/v1/patients")
    assert response.status_code == 200
    assert response.json() == {
        "total_records": 0,
        "total_pages": 0,
        "page_number": 1,
        "page_size": 5,
        "data": [],
    }


def test_list_patients_sorted_by_name(client, create_patient):
    """Test that patients are returned sorted alphabetically by default."""
    create_patient(name="Bob")
    create_patient(name="Alice")
    create_patient(name="Carol")

    response = client.get("/api/v1/patients")
    assert response.status_code == 200
    assert [p["name"] for p in response.json()["data"]] == ["Alice", "Bob", "Carol"]


def test_list_patients_sorted_by_birthdate_descending(client, create_patient):
    create_patient(name="Old", birth_date="1950-01-01")
    create_patient(name="Young", birth_date="2000-01-01")
    create_patient(name="Middle", birth_date="1975-01-01")

    response = client.get(
        "/api/v1/patients",
        params={"sort_by": "birthdate", "sort_descending": "true"}
    )
    assert [p["name"] for p in response.json()["data"]] == ["Young", "Middle", "Old"]


def test_list_patients_unknown_sort_key_uses_name(client, create_patient):
    create_patient(name="Bob")
    create_patient(name="Alice")

    response = client.get("/api/v1/patients", params={"sort_by": "email"})
    assert response.status_code == 200
    assert [p["name"] for p in response.json()["data"]] == ["Alice", "Bob"]


def test_list_patients_filter_by_name(client, create_patient):
    create_patient(name="Alice")
    create_patient(name="Bob")

    response = client.get("/api/v1/patients", params={"name": "ali"})
    body = response.json()
    assert body["total_records"] == 1
    assert body["data"][0]["name"] == "Alice"


def test_list_patients_filter_by_id_number(client, create_patient):
    create_patient(id_number="XY100")
    create_patient(id_number="ZZ200")

    response = client.get("/api/v1/patients", params={"id_number": "XY"})
    assert [p["id_number"] for p in response.json()["data"]] == ["XY100"]


def test_list_patients_paging(client, create_patient):
    """Test 12 patients with page size 5: page 3 returns the last 2."""
    for i in range(12):
        create_patient(name=f"Patient {chr(65 + i)}")

    response = client.get("/api/v1/patients", params={"page_number": 3, "page_size": 5})
    body = response.json()
    assert body["total_records"] == 12
    assert body["total_pages"] == 3
    assert body["page_number"] == 3
    assert [p["name"] for p in body["data"]] == ["Patient K", "Patient L"]


def test_list_patients_rejects_non_positive_paging(client):
    assert client.get("/api/v1/patients", params={"page_number": 0}).status_code == 422
    assert client.get("/api/v1/patients", params={"page_size": 0}).status_code == 422


# =============================================================================
# UPDATE
# =============================================================================

def _update_payload(patient, **overrides):
    payload = dict(patient)
    payload.update(overrides)
    return payload


def test_update_patient(client, create_patient):
    patient = create_patient(name="Alice")

    response = client.put(
        f"/api/v1/patients/{patient['id']}",
        json=_update_payload(patient, name="Alicia")
    )
    assert response.status_code == 204
    assert client.get(f"/api/v1/patients/{patient['id']}").json()["name"] == "Alicia"


def test_update_patient_keeps_own_id_number(client, create_patient):
    """Test that a patient may be saved with its current identification number."""
    patient = create_patient(id_number="SAME1")
    response = client.put(
        f"/api/v1/patients/{patient['id']}",
        json=_update_payload(patient, email="changed@example.com")
    )
    assert response.status_code == 204


def test_update_patient_id_mismatch(client, create_patient):
    patient = create_patient()
    response = client.put(
        f"/api/v1/patients/{patient['id']}",
        json=_update_payload(patient, id=patient["id"] + 1)
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "ID mismatch."


def test_update_patient_duplicate_id_number(client, create_patient):
    create_patient(id_number="TAKEN1")
    patient = create_patient(id_number="MINE1")

    response = client.put(
        f"/api/v1/patients/{patient['id']}",
        json=_update_payload(patient, id_number="TAKEN1")
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "IdNumber already exists."


def test_update_patient_not_found(client):
    response = client.put(
        "/api/v1/patients/999",
        json={"id": 999, "name": "Ghost", "id_number": "G1", "email": "g@example.com", "birth_date": "1990-01-01"}
    )
    assert response.status_code == 404


# =============================================================================
# DELETE
# =============================================================================

def test_delete_patient(client, create_patient):
    patient = create_patient()
    assert client.delete(f"/api/v1/patients/{patient['id']}").status_code == 204
    assert client.get(f"/api/v1/patients/{patient['id']}").status_code == 404


def test_delete_patient_not_found(client):
    response = client.delete("/api/v1/patients/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Patient not found."
