import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacare.config.settings import Settings
from pharmacare.core.middleware import get_app_settings, get_db, get_identity, require_doctor, require_user
from pharmacare.core.responses import ApiResponse
from pharmacare.db.crud.appointment import (
    change_status,
    create_appointment,
    get_appointment,
    list_appointments,
)
from pharmacare.schemas.appointment import AppointmentCreate, AppointmentOut, AppointmentReceipt
from pharmacare.schemas.shared import AppointmentStatus, Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("/", response_model=ApiResponse[AppointmentReceipt], status_code=status.HTTP_201_CREATED)
async def create_appointment_route(
    appointment: AppointmentCreate,
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Book an appointment for the current user"""
    receipt = await create_appointment(
        db,
        identity,
        appointment,
        tz_name=settings.appointment_timezone,
        window_days=settings.appointment_window_days,
    )
    return ApiResponse.ok(receipt, message="Appointment created successfully", status_code=status.HTTP_201_CREATED)


@router.get("/", response_model=ApiResponse[List[AppointmentOut]])
async def list_appointments_route(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Appointments booked by the caller, or booked with the calling doctor"""
    appointments = await list_appointments(db, identity, skip=skip, limit=limit)
    return ApiResponse.ok([AppointmentOut.model_validate(a) for a in appointments])


@router.get("/{appointment_id}", response_model=ApiResponse[AppointmentOut])
async def get_appointment_route(
    appointment_id: int = Path(..., gt=0),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    appointment = await get_appointment(db, identity, appointment_id)
    return ApiResponse.ok(AppointmentOut.model_validate(appointment))


@router.post("/{appointment_id}/confirm", response_model=ApiResponse[AppointmentOut])
async def confirm_appointment_route(
    appointment_id: int = Path(..., gt=0),
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    appointment = await change_status(db, identity, appointment_id, AppointmentStatus.CONFIRMED)
    return ApiResponse.ok(AppointmentOut.model_validate(appointment), message="Appointment confirmed")


@router.post("/{appointment_id}/cancel", response_model=ApiResponse[AppointmentOut])
async def cancel_appointment_route(
    appointment_id: int = Path(..., gt=0),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    appointment = await change_status(db, identity, appointment_id, AppointmentStatus.CANCELLED)
    return ApiResponse.ok(AppointmentOut.model_validate(appointment), message="Appointment cancelled")


@router.post("/{appointment_id}/complete", response_model=ApiResponse[AppointmentOut])
async def complete_appointment_route(
    appointment_id: int = Path(..., gt=0),
    identity: Identity = Depends(require_doctor),
    db: AsyncSession = Depends(get_db),
):
    appointment = await change_status(db, identity, appointment_id, AppointmentStatus.COMPLETED)
    return ApiResponse.ok(AppointmentOut.model_validate(appointment), message="Appointment completed")
