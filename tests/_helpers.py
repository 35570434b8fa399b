# tests/_helpers.py
from datetime import date, datetime, timedelta, timezone

USER_PASSWORD = "Passw0rd!"
DOCTOR_PASSWORD = "doctorpass1"

def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}

def utc_today() -> date:
    return datetime.now(timezone.utc).date()

def next_weekday(weekday: int, start: date) -> date:
    """First date on or after ``start`` falling on ``weekday`` (Monday is 0)."""
    return start + timedelta(days=(weekday - start.weekday()) % 7)

async def register_user(client, phone="9876543210", email="patient.one@gmail.com", **overrides) -> dict:
    payload = {
        "name": "Patient One",
        "email": email,
        "password": USER_PASSWORD,
        "phone": phone,
        "dateOfBirth": "1990-05-01",
        "gender": "male",
    }
    payload.update(overrides)
    response = await client.post("/users/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]

async def register_doctor(client, phone="9000000001", email=None) -> dict:
    payload = {"phone": phone, "password": DOCTOR_PASSWORD}
    if email:
        payload["email"] = email
    response = await client.post("/doctors/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]

async def onboard_doctor(client, working_days=None, phone="9000000001", with_schedule=True) -> dict:
    """Register a doctor with details, clinic and a weekly schedule; returns ids and token."""
    session = await register_doctor(client, phone=phone)
    headers = bearer(session["tokens"]["accessToken"])

    details = await client.post(
        "/doctors/basic-details",
        json={"name": "Dr. Asha Verma", "gender": "FEMALE", "appointmentFee": "500.00", "experience": 12},
        headers=headers,
    )
    assert details.status_code == 200, details.text

    clinic = await client.post(
        "/doctors/clinic-details",
        json={
            "clinicName": "Care Clinic",
            "clinicContactNo": "02012345678",
            "clinicRegistrationNo": f"CLN-{phone}",
            "state": "Maharashtra",
            "district": "Pune",
            "city": "Pune",
            "pincode": "411001",
        },
        headers=headers,
    )
    assert clinic.status_code == 200, clinic.text

    if with_schedule:
        days = working_days if working_days is not None else [
            "sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday",
        ]
        schedule = await client.post("/doctors/workday", json={day: True for day in days}, headers=headers)
        assert schedule.status_code == 200, schedule.text

    return {
        "doctor_id": session["doctor"]["id"],
        "clinic_id": clinic.json()["data"]["id"],
        "access_token": session["tokens"]["accessToken"],
        "refresh_token": session["tokens"]["refreshToken"],
    }


async def seed_catalog(db) -> dict:
    """Two categories, two brands, one manufacturer and three medicines."""
    from decimal import Decimal

    from pharmacare.db.models import BrandModel, CategoryModel, ManufacturerModel, MedicineModel

    pain = CategoryModel(name="Pain Relief")
    vitamins = CategoryModel(name="Vitamins")
    cipla = BrandModel(name="Cipla")
    himalaya = BrandModel(name="Himalaya")
    maker = ManufacturerModel(name="Cipla Ltd")
    db.add_all([pain, vitamins, cipla, himalaya, maker])
    await db.flush()

    medicines = [
        MedicineModel(name="Paracetamol 500mg", price=Decimal("25.50"), stock_quantity=100,
                      category_id=pain.id, brand_id=cipla.id, manufacturer_id=maker.id),
        MedicineModel(name="Ibuprofen 400mg", price=Decimal("40.00"), stock_quantity=50, prescription_required=True,
                      category_id=pain.id, brand_id=himalaya.id, manufacturer_id=maker.id),
        MedicineModel(name="Vitamin C 500mg", price=Decimal("120.00"), stock_quantity=10,
                      category_id=vitamins.id, brand_id=himalaya.id, manufacturer_id=maker.id),
    ]
    db.add_all(medicines)
    await db.commit()
    return {
        "pain": pain.id,
        "vitamins": vitamins.id,
        "cipla": cipla.id,
        "himalaya": himalaya.id,
        "paracetamol": medicines[0].id,
        "ibuprofen": medicines[1].id,
        "vitamin_c": medicines[2].id,
    }
