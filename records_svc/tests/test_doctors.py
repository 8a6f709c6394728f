"""
Tests for doctor endpoints.
"""


def test_create_doctor_success(client):
    response = client.post(
        "/api/v1/doctors",
        json={
            "name": "Gregory House",
            "license_number": "LIC-001",
            "specialty": "Diagnostics",
            "email": "house@example.com",
        }
    )
    assert response.status_code == 201
    data = response.json()
    assert data["license_number"] == "LIC001"
    assert isinstance(data["id"], int)


def test_create_doctor_duplicate_license(client, create_doctor):
    create_doctor(license_number="LIC1")
    response = client.post(
        "/api/v1/doctors",
        json={"name": "Other", "license_number": "LIC1", "specialty": "X", "email": "o@example.com"}
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "LicenseNumber already exists."


def test_get_doctor_not_found(client):
    response = client.get("/api/v1/doctors/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Doctor not found."


def test_list_doctors_filters(client, create_doctor):
    create_doctor(name="Alice Smith", specialty="Cardiology")
    create_doctor(name="Bob Jones", specialty="Neurology")
    create_doctor(name="Carol White", specialty="cardiology")

    response = client.get("/api/v1/doctors", params={"specialty": "CARDIO"})
    body = response.json()
    assert body["total_records"] == 2
    assert [d["name"] for d in body["data"]] == ["Alice Smith", "Carol White"]


def test_list_doctors_filter_by_license_number(client, create_doctor):
    create_doctor(license_number="AAA1")
    create_doctor(license_number="BBB2")
    response = client.get("/api/v1/doctors", params={"license_number": "BBB"})
    assert [d["license_number"] for d in response.json()["data"]] == ["BBB2"]


def test_list_doctors_sorted_by_specialty(client, create_doctor):
    create_doctor(name="A", specialty="Surgery")
    create_doctor(name="B", specialty="Cardiology")
    create_doctor(name="C", specialty="Neurology")

    response = client.get("/api/v1/doctors", params={"sort_by": "specialty"})
    assert [d["specialty"] for d in response.json()["data"]] == ["Cardiology", "Neurology", "Surgery"]


def test_update_doctor(client, create_doctor):
    doctor = create_doctor()
    payload = dict(doctor, specialty="Oncology")
    assert client.put(f"/api/v1/doctors/{doctor['id']}", json=payload).status_code == 204
    assert client.get(f"/api/v1/doctors/{doctor['id']}").json()["specialty"] == "Oncology"


def test_update_doctor_id_mismatch(client, create_doctor):
    doctor = create_doctor()
    response = client.put(f"/api/v1/doctors/{doctor['id']}", json=dict(doctor, id=doctor["id"] + 1))
    assert response.status_code == 409
    assert response.json()["detail"] == "ID mismatch."


def test_update_doctor_duplicate_license(client, create_doctor):
    create_doctor(license_number="TAKEN")
    doctor = create_doctor(license_number="MINE")
    response = client.put(f"/api/v1/doctors/{doctor['id']}", json=dict(doctor, license_number="TAKEN"))
    assert response.status_code == 409


def test_delete_doctor(client, create_doctor):
    doctor = create_doctor()
    assert client.delete(f"/api/v1/doctors/{doctor['id']}").status_code == 204
    assert client.delete(f"/api/v1/doctors/{doctor['id']}").status_code == 404


def test_create_doctor_rejects_invalid_email(client):
    response = client.post(
        "/api/v1/doctors",
        json={"name": "Other", "license_number": "LIC9", "specialty": "X", "email": "house@"}
    )
    assert response.status_code == 422


def test_create_doctor_lower_cases_email(client):
    response = client.post(
        "/api/v1/doctors",
        json={"name": "Other", "license_number": "LIC9", "specialty": "X", "email": "House@Example.COM"}
    )
    assert response.status_code == 201
    assert response.json()["email"] == "house@example.com"
