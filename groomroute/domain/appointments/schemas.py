"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import APPOINTMENT_STATUSES
from ...shared.validators import parse_date, validate_time


def _check_status(v):
    if v is not None and v not in APPOINTMENT_STATUSES:
        raise ValueError(f"status must be one of {', '.join(APPOINTMENT_STATUSES)}")
    return v


class AppointmentCreate(BaseModel):
    customerId: int
    petId: Optional[int] = None
    date: str
    time: str
    serviceMinutes: int = 60
    price: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        parse_date(v)
        return v

    @field_validator("time")
    @classmethod
    def validate_start_time(cls, v):
        return validate_time(v)

    @field_validator("serviceMinutes")
    @classmethod
    def validate_service_minutes(cls, v):
        if v < 1:
            raise ValueError("serviceMinutes must be at least 1")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v < 0:
            raise ValueError("price must not be negative")
        return v


class AppointmentUpdate(BaseModel):
    date: Optional[str] = None
    time: Optional[str] = None
    serviceMinutes: Optional[int] = None
    status: Optional[str] = None
    price: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        if v is not None:
            parse_date(v)
        return v

    @field_validator("time")
    @classmethod
    def validate_start_time(cls, v):
        if v is not None:
            return validate_time(v)
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _check_status(v)


class AppointmentResponse(BaseModel):
    id: int
    customerId: int
    customerName: Optional[str] = None
    petId: Optional[int] = None
    petName: Optional[str] = None
    groomerId: int
    startAt: datetime
    serviceMinutes: int
    status: str
    price: Optional[float] = None
    notes: Optional[str] = None


class ConflictingAppointment(BaseModel):
    id: int
    customerName: str
    petName: str
    startTime: str
    endTime: str


class NextAvailableSlot(BaseModel):
    time: str  # HH:MM
    timeFormatted: str


class ConflictCheckResponse(BaseModel):
    hasConflict: bool
    conflicts: list[ConflictingAppointment]
    proposedStart: str
    proposedEnd: str
    date: str
    time: str
    duration: int
    nextAvailable: Optional[NextAvailableSlot] = None


class SuggestDateCustomer(BaseModel):
    id: int
    name: str
    serviceAreaId: Optional[int] = None
    serviceAreaName: Optional[str] = None
    serviceAreaColor: Optional[str] = None


class SuggestDateResponse(BaseModel):
    success: bool = True
    customer: SuggestDateCustomer
    suggestedDays: list[int] = []  # 0=Sunday
    nextSuggestedDate: Optional[str] = None  # YYYY-MM-DD
    reason: Optional[str] = None
