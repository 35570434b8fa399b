from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacare.core.errors import NotFound
from pharmacare.db.models.doctor import WEEKDAYS, DoctorWorkDayModel


def weekday_name(on_date: date) -> str:
    """Gregorian day of week as used by the schedule columns, sunday..saturday."""
    return WEEKDAYS[on_date.isoweekday() % 7]


async def is_doctor_available(db: AsyncSession, doctor_id: int, on_date: date) -> bool:
    """
    True when the doctor's weekly schedule has the weekday of ``on_date`` set.

    Raises NotFound when the doctor has no schedule row at all.
    """
    result = await db.execute(select(DoctorWorkDayModel).where(DoctorWorkDayModel.doctor_id == doctor_id))
    schedule = result.scalar_one_or_none()
    if schedule is None:
        raise NotFound("Doctor has no work schedule", error_code="SCHEDULE_NOT_FOUND")
    return bool(getattr(schedule, weekday_name(on_date)))
