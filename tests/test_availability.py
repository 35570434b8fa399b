# tests/test_availability.py
from datetime import date, datetime, timedelta, timezone

import pytest

from pharmacare.core.errors import NotFound, ValidationError
from pharmacare.db.crud.appointment import check_booking_window, to_calendar_date
from pharmacare.db.crud.availability import is_doctor_available, weekday_name
from pharmacare.db.models.doctor import DoctorModel, DoctorWorkDayModel


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2024, 6, 2), "sunday"),
        (date(2024, 6, 3), "monday"),
        (date(2024, 6, 5), "wednesday"),
        (date(2024, 6, 8), "saturday"),
    ],
)
def test_weekday_name(day, expected):
    assert weekday_name(day) == expected


@pytest.mark.parametrize("offset", [0, 1, 7])
def test_booking_window_accepts(offset):
    today = date(2024, 6, 3)
    check_booking_window(today + timedelta(days=offset), today, 7)


@pytest.mark.parametrize("offset", [-1, 8, 30])
def test_booking_window_rejects(offset):
    today = date(2024, 6, 3)
    with pytest.raises(ValidationError) as exc:
        check_booking_window(today + timedelta(days=offset), today, 7)
    assert exc.value.error_code == "DATE_OUT_OF_RANGE"


def test_calendar_date_uses_configured_timezone():
    # 23:30 UTC on the 3rd is already the 4th in Kolkata
    moment = datetime(2024, 6, 3, 23, 30, tzinfo=timezone.utc)
    assert to_calendar_date(moment, "Asia/Kolkata") == date(2024, 6, 4)
    assert to_calendar_date(moment, "UTC") == date(2024, 6, 3)


def test_naive_datetime_keeps_its_day():
    assert to_calendar_date(datetime(2024, 6, 3, 23, 30), "Asia/Kolkata") == date(2024, 6, 3)


async def _doctor_with_schedule(db, **days):
    doctor = DoctorModel(phone="9000000009", password_hash="x")
    db.add(doctor)
    await db.flush()
    db.add(DoctorWorkDayModel(doctor_id=doctor.id, **days))
    await db.commit()
    return doctor.id


async def test_available_only_on_scheduled_days(db):
    doctor_id = await _doctor_with_schedule(db, monday=True, friday=True)
    assert await is_doctor_available(db, doctor_id, date(2024, 6, 3))  # monday
    assert await is_doctor_available(db, doctor_id, date(2024, 6, 7))  # friday
    assert not await is_doctor_available(db, doctor_id, date(2024, 6, 4))
    assert not await is_doctor_available(db, doctor_id, date(2024, 6, 9))


async def test_missing_schedule_is_not_found(db):
    with pytest.raises(NotFound):
        await is_doctor_available(db, 999, date(2024, 6, 3))
