# tests/test_users.py
import re

from tests._helpers import USER_PASSWORD, bearer, register_user


async def test_register_returns_profile_and_tokens(client):
    data = await register_user(client)
    assert data["user"]["name"] == "Patient One"
    assert data["user"]["gender"] == "male"
    assert "passwordHash" not in data["user"]
    assert data["tokens"]["tokenType"] == "bearer"
    assert data["tokens"]["accessToken"] and data["tokens"]["refreshToken"]


async def test_register_envelope(client):
    response = await client.post(
        "/users/register",
        json={
            "name": "Patient Two",
            "email": "patient.two@gmail.com",
            "password": USER_PASSWORD,
            "phone": "9876500000",
            "dateOfBirth": "1985-01-01",
            "gender": "female",
        },
    )
    body = response.json()
    assert body["status"] == "Success"
    assert body["statusCode"] == 201


async def test_duplicate_phone_conflicts(client):
    await register_user(client)
    response = await client.post(
        "/users/register",
        json={
            "name": "Someone Else",
            "email": "someone.else@gmail.com",
            "password": USER_PASSWORD,
            "phone": "9876543210",
            "dateOfBirth": "1992-02-02",
            "gender": "other",
        },
    )
    assert response.status_code == 409
    assert response.json()["errorCode"] == "USER_EXISTS"


async def test_duplicate_email_conflicts(client):
    await register_user(client)
    response = await client.post(
        "/users/register",
        json={
            "name": "Someone Else",
            "email": "patient.one@gmail.com",
            "password": USER_PASSWORD,
            "phone": "9111111111",
            "dateOfBirth": "1992-02-02",
            "gender": "other",
        },
    )
    assert response.status_code == 409


async def test_weak_password_is_rejected_with_field_details(client):
    response = await client.post(
        "/users/register",
        json={
            "name": "Patient Weak",
            "email": "weak@gmail.com",
            "password": "password",
            "phone": "9222222222",
            "dateOfBirth": "1990-01-01",
            "gender": "male",
        },
    )
    assert response.status_code == 400
    body = response.json()
    assert body["errorCode"] == "VALIDATION_ERROR"
    assert "password" in [d["field"] for d in body["details"]]


async def test_bad_phone_is_rejected(client):
    response = await client.post("/users/login", json={"phone": "12345", "password": "x"})
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "phone"


async def test_login(client):
    await register_user(client)
    response = await client.post("/users/login", json={"phone": "9876543210", "password": USER_PASSWORD})
    assert response.status_code == 200
    assert response.json()["data"]["accessToken"]


async def test_login_wrong_password(client):
    await register_user(client)
    response = await client.post("/users/login", json={"phone": "9876543210", "password": "Wr0ng!pass"})
    assert response.status_code == 401
    assert response.json()["errorCode"] == "INVALID_CREDENTIALS"


async def test_login_unknown_phone(client):
    response = await client.post("/users/login", json={"phone": "9000012345", "password": USER_PASSWORD})
    assert response.status_code == 404
    assert response.json()["errorCode"] == "USER_NOT_FOUND"


async def test_otp_login(client, sms):
    await register_user(client)
    response = await client.post("/users/login/otp", json={"phone": "9876543210"})
    assert response.status_code == 202
    assert response.json()["status"] == "Pending"

    phone, message = sms.sent[-1]
    assert phone == "9876543210"
    otp = re.search(r"\b(\d{6})\b", message).group(1)

    verified = await client.post("/users/login/otp/verify", json={"phone": "9876543210", "otp": otp})
    assert verified.status_code == 200
    assert verified.json()["data"]["accessToken"]

    # single use
    again = await client.post("/users/login/otp/verify", json={"phone": "9876543210", "otp": otp})
    assert again.status_code == 401
    assert again.json()["errorCode"] == "INVALID_OTP"


async def test_wrong_otp(client, sms):
    await register_user(client)
    await client.post("/users/login/otp", json={"phone": "9876543210"})
    otp = re.search(r"\b(\d{6})\b", sms.sent[-1][1]).group(1)
    wrong = "000000" if otp != "000000" else "111111"
    response = await client.post("/users/login/otp/verify", json={"phone": "9876543210", "otp": wrong})
    assert response.status_code == 401


async def test_otp_discarded_after_repeated_wrong_guesses(client, sms, settings):
    await register_user(client)
    await client.post("/users/login/otp", json={"phone": "9876543210"})
    otp = re.search(r"\b(\d{6})\b", sms.sent[-1][1]).group(1)
    wrong = "000000" if otp != "000000" else "111111"
    for _ in range(settings.otp_max_attempts):
        response = await client.post("/users/login/otp/verify", json={"phone": "9876543210", "otp": wrong})
        assert response.status_code == 401

    response = await client.post("/users/login/otp/verify", json={"phone": "9876543210", "otp": otp})
    assert response.status_code == 401
    assert response.json()["errorCode"] == "INVALID_OTP"

    # a fresh code starts a fresh allowance
    await client.post("/users/login/otp", json={"phone": "9876543210"})
    otp = re.search(r"\b(\d{6})\b", sms.sent[-1][1]).group(1)
    response = await client.post("/users/login/otp/verify", json={"phone": "9876543210", "otp": otp})
    assert response.status_code == 200


async def test_otp_survives_a_few_wrong_guesses(client, sms, settings):
    await register_user(client)
    await client.post("/users/login/otp", json={"phone": "9876543210"})
    otp = re.search(r"\b(\d{6})\b", sms.sent[-1][1]).group(1)
    wrong = "000000" if otp != "000000" else "111111"
    for _ in range(settings.otp_max_attempts - 1):
        await client.post("/users/login/otp/verify", json={"phone": "9876543210", "otp": wrong})

    response = await client.post("/users/login/otp/verify", json={"phone": "9876543210", "otp": otp})
    assert response.status_code == 200
    assert response.json()["data"]["accessToken"]


async def test_otp_delivery_failure(client, sms):
    await register_user(client)
    sms.ok = False
    response = await client.post("/users/login/otp", json={"phone": "9876543210"})
    assert response.status_code == 502
    assert response.json()["errorCode"] == "SMS_DELIVERY_FAILED"


async def test_otp_for_unknown_phone(client, sms):
    response = await client.post("/users/login/otp", json={"phone": "9000012345"})
    assert response.status_code == 404
    assert sms.sent == []


async def test_me_returns_profile(client):
    data = await register_user(client)
    response = await client.get("/users/me", headers=bearer(data["tokens"]["accessToken"]))
    assert response.json()["data"]["email"] == "patient.one@gmail.com"
