# scripts/seed_database.py
import asyncio
import logging
import random
from datetime import date, timedelta
from decimal import Decimal
from typing import List

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacare.config.settings import get_settings
from pharmacare.core.auth import get_password_hash
from pharmacare.db.base import create_all, get_engine, get_session_factory
from pharmacare.db.models import (
    BrandModel,
    CategoryModel,
    ClinicModel,
    DoctorDetailsModel,
    DoctorModel,
    DoctorWorkDayModel,
    ManufacturerModel,
    MedicineModel,
    WEEKDAYS,
)

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_database")

# --- Configuration for Seed Data ---
NUM_DOCTORS = 10
NUM_MEDICINES = 60
COMMON_PASSWORD = "TestPassword123!"

CATEGORIES = ["Pain Relief", "Antibiotics", "Vitamins", "Cold & Flu", "Diabetes", "Skin Care"]
BRANDS = ["Cipla", "Sun Pharma", "Dr. Reddy's", "Lupin", "Himalaya", "Abbott"]
MANUFACTURERS = ["Cipla Ltd", "Sun Pharmaceutical Industries", "Lupin Ltd", "Abbott India"]
MEDICINE_NAMES = [
    "Paracetamol", "Ibuprofen", "Amoxicillin", "Azithromycin", "Cetirizine",
    "Metformin", "Vitamin C", "Vitamin D3", "Cough Syrup", "Diclofenac Gel",
]

DOCTOR_NAMES = ["Asha Verma", "Rohit Mehta", "Neha Iyer", "Vikram Rao", "Priya Nair", "Arjun Das"]
SPECIALIZATIONS = ["General Physician", "Dermatologist", "Pediatrician", "Cardiologist", "ENT"]
CITIES = [("Maharashtra", "Pune", "Pune"), ("Karnataka", "Bengaluru Urban", "Bengaluru"), ("Delhi", "New Delhi", "Delhi")]


async def clear_data(db: AsyncSession):
    logger.warning("Clearing existing catalog and doctor data...")
    for table in ("medicines", "categories", "brands", "manufacturers", "doctors"):
        await db.execute(text(f"DELETE FROM {table};"))
    await db.commit()
    logger.info("Relevant data cleared.")


async def seed_catalog(db: AsyncSession):
    logger.info("Seeding categories, brands and manufacturers...")
    lookups = []
    for model, names in ((CategoryModel, CATEGORIES), (BrandModel, BRANDS), (ManufacturerModel, MANUFACTURERS)):
        existing = set((await db.execute(select(model.name))).scalars().all())
        rows = [model(name=name) for name in names if name not in existing]
        db.add_all(rows)
        await db.flush()
        lookups.append((await db.execute(select(model.id))).scalars().all())
    category_ids, brand_ids, manufacturer_ids = lookups

    logger.info(f"Seeding {NUM_MEDICINES} medicines...")
    for i in range(NUM_MEDICINES):
        db.add(
            MedicineModel(
                name=f"{random.choice(MEDICINE_NAMES)} {random.choice([250, 500, 650])}mg",
                description="Seeded medicine for local development",
                price=Decimal(random.randint(20, 900)) + Decimal("0.50"),
                expiry_date=date.today() + timedelta(days=random.randint(90, 900)),
                prescription_required=random.random() < 0.3,
                stock_quantity=random.randint(0, 200),
                category_id=random.choice(category_ids),
                brand_id=random.choice(brand_ids),
                manufacturer_id=random.choice(manufacturer_ids),
            )
        )
    await db.commit()
    logger.info("Catalog committed.")


async def seed_doctors(db: AsyncSession) -> List[int]:
    created: List[int] = []
    password_hash = get_password_hash(COMMON_PASSWORD)

    logger.info(f"Seeding {NUM_DOCTORS} doctors...")
    for i in range(NUM_DOCTORS):
        phone = f"90000{i:05d}"
        if (await db.execute(select(DoctorModel.id).where(DoctorModel.phone == phone))).scalar_one_or_none():
            logger.info(f"Doctor {phone} already exists, skipping.")
            continue

        doctor = DoctorModel(phone=phone, email=f"doctor{i + 1}@example.com", password_hash=password_hash)
        db.add(doctor)
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error(f"Integrity error adding doctor {phone}: {e.orig}")
            continue

        state, district, city = random.choice(CITIES)
        db.add(
            DoctorDetailsModel(
                doctor_id=doctor.id,
                name=random.choice(DOCTOR_NAMES),
                gender=random.choice(["MALE", "FEMALE"]),
                appointment_fee=Decimal(random.choice([300, 500, 800])),
                experience=random.randint(1, 30),
                specialization=random.choice(SPECIALIZATIONS),
            )
        )
        working = random.sample(WEEKDAYS, k=random.randint(3, 6))
        db.add(DoctorWorkDayModel(doctor_id=doctor.id, **{day: day in working for day in WEEKDAYS}))
        db.add(
            ClinicModel(
                doctor_id=doctor.id,
                clinic_name=f"Care Clinic {i + 1}",
                clinic_contact_no=f"020{random.randint(10000000, 99999999)}",
                clinic_registration_no=f"CLN-{i + 1:04d}",
                state=state,
                district=district,
                city=city,
                pincode=f"{random.randint(110000, 999999)}",
            )
        )
        created.append(doctor.id)

    await db.commit()
    logger.info(f"Committed {len(created)} doctors (password: {COMMON_PASSWORD}).")
    return created


async def main(should_clear: bool):
    settings = get_settings()
    logger.info(f"Connecting to database at: {settings.database_url}")
    engine = await get_engine(settings.database_url)
    if settings.db_create_all:
        await create_all(engine)
    session_factory = await get_session_factory(engine)

    async with session_factory() as db:
        if should_clear:
            await clear_data(db)
        await seed_catalog(db)
        await seed_doctors(db)

    await engine.dispose()
    logger.info("Database connection closed.")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Seed the database with catalog and doctor data."
    )
    parser.add_argument(
        "--clear", action="store_true", help="Clear existing data before seeding."
    )
    args = parser.parse_args()
    asyncio.run(main(should_clear=args.clear))
