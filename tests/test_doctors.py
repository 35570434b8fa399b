# tests/test_doctors.py
from decimal import Decimal

from tests._helpers import DOCTOR_PASSWORD, bearer, onboard_doctor, register_doctor, register_user


async def test_register_and_login(client):
    session = await register_doctor(client, email="asha.verma@gmail.com")
    assert session["doctor"]["phone"] == "9000000001"
    assert session["doctor"]["email"] == "asha.verma@gmail.com"

    response = await client.post("/doctors/login", json={"phone": "9000000001", "password": DOCTOR_PASSWORD})
    assert response.status_code == 200
    assert response.json()["data"]["accessToken"]


async def test_duplicate_doctor_conflicts(client):
    await register_doctor(client)
    response = await client.post("/doctors/register", json={"phone": "9000000001", "password": DOCTOR_PASSWORD})
    assert response.status_code == 409
    assert response.json()["errorCode"] == "DOCTOR_EXISTS"


async def test_doctor_login_wrong_password(client):
    await register_doctor(client)
    response = await client.post("/doctors/login", json={"phone": "9000000001", "password": "not-the-password"})
    assert response.status_code == 401


async def test_profile_requires_doctor_role(client):
    user = await register_user(client)
    response = await client.post(
        "/doctors/workday", json={"monday": True}, headers=bearer(user["tokens"]["accessToken"])
    )
    assert response.status_code == 403


async def test_workday_is_upserted(client):
    session = await register_doctor(client)
    headers = bearer(session["tokens"]["accessToken"])

    first = await client.post("/doctors/workday", json={"monday": True, "tuesday": True}, headers=headers)
    assert first.json()["data"]["monday"] is True

    second = await client.post("/doctors/workday", json={"friday": True}, headers=headers)
    data = second.json()["data"]
    assert data["friday"] is True
    assert data["monday"] is False

    profile = await client.get(f"/doctors/{session['doctor']['id']}")
    assert profile.json()["data"]["workSchedule"]["friday"] is True


async def test_education_and_registration(client):
    session = await register_doctor(client)
    headers = bearer(session["tokens"]["accessToken"])

    education = await client.post(
        "/doctors/education-details",
        json={"degree": "MBBS", "institute": "AIIMS Delhi", "yearOfCompletion": 2010},
        headers=headers,
    )
    assert education.status_code == 200
    assert education.json()["data"]["degree"] == "MBBS"

    registration = await client.post(
        "/doctors/registration-details",
        json={"registrationNumber": "MCI-12345", "registrationCouncil": "Medical Council of India", "registrationYear": 2011},
        headers=headers,
    )
    assert registration.status_code == 200


async def test_registration_number_is_unique(client):
    first = await register_doctor(client, phone="9000000001")
    second = await register_doctor(client, phone="9000000002")
    payload = {"registrationNumber": "MCI-12345", "registrationCouncil": "Medical Council of India", "registrationYear": 2011}

    ok = await client.post("/doctors/registration-details", json=payload, headers=bearer(first["tokens"]["accessToken"]))
    assert ok.status_code == 200

    clash = await client.post("/doctors/registration-details", json=payload, headers=bearer(second["tokens"]["accessToken"]))
    assert clash.status_code == 409


async def test_public_profile(client):
    doctor = await onboard_doctor(client, working_days=["monday", "wednesday"])
    response = await client.get(f"/doctors/{doctor['doctor_id']}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["details"]["name"] == "Dr. Asha Verma"
    assert Decimal(data["details"]["appointmentFee"]) == Decimal("500.00")
    assert data["clinic"]["city"] == "Pune"
    assert data["workSchedule"]["monday"] is True
    assert data["workSchedule"]["tuesday"] is False


async def test_unknown_doctor_profile(client):
    response = await client.get("/doctors/4242")
    assert response.status_code == 404
    assert response.json()["errorCode"] == "DOCTOR_NOT_FOUND"


async def test_invalid_clinic_pincode(client):
    session = await register_doctor(client)
    response = await client.post(
        "/doctors/clinic-details",
        json={
            "clinicName": "Care Clinic",
            "clinicContactNo": "02012345678",
            "clinicRegistrationNo": "CLN-1",
            "state": "Maharashtra",
            "district": "Pune",
            "city": "Pune",
            "pincode": "41",
        },
        headers=bearer(session["tokens"]["accessToken"]),
    )
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "pincode"


async def test_doctor_logout(client):
    session = await register_doctor(client)
    response = await client.post("/doctors/logout", headers=bearer(session["tokens"]["accessToken"]))
    assert response.status_code == 200
    refresh = await client.post("/doctors/refresh-token", json={"refreshToken": session["tokens"]["refreshToken"]})
    assert refresh.status_code == 403
