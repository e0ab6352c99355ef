"""Appointment router - FastAPI endpoints for appointments"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_groomer, get_current_user
from ...database import get_db
from ...models import Groomer, User
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    ConflictCheckResponse,
    SuggestDateResponse,
)
from .service import AppointmentService, to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("/check-conflict", response_model=ConflictCheckResponse)
async def check_conflict(
    date: str = Query(..., description="YYYY-MM-DD"),
    time: str = Query(..., description="HH:MM"),
    duration: int = Query(90, ge=1, le=24 * 60),
    excludeId: Optional[int] = Query(None),
    groomer: Groomer = Depends(get_current_groomer),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Check a proposed slot against the groomer's day and suggest the next free start"""
    return service.check_conflict(groomer, date, time, duration, excludeId)


@router.get("/suggest-date", response_model=SuggestDateResponse)
async def suggest_date(
    customerId: Optional[int] = Query(None),
    groomerId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Suggest a booking date from the days the groomer works the customer's area"""
    return service.suggest_date(current_user.account_id, customerId, groomerId)


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(
    date: str = Query(..., description="YYYY-MM-DD"),
    groomer: Groomer = Depends(get_current_groomer),
    service: AppointmentService = Depends(get_appointment_service),
):
    return [to_response(apt) for apt in service.list_for_day(groomer, date)]


@router.post("", response_model=AppointmentResponse)
async def create_appointment(
    data: AppointmentCreate,
    groomer: Groomer = Depends(get_current_groomer),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.create_appointment(groomer, data))


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    groomer: Groomer = Depends(get_current_groomer),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.get_appointment(appointment_id, groomer))


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    groomer: Groomer = Depends(get_current_groomer),
    service: AppointmentService = Depends(get_appointment_service),
):
    return to_response(service.update_appointment(appointment_id, groomer, data))


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    groomer: Groomer = Depends(get_current_groomer),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.delete_appointment(appointment_id, groomer)
