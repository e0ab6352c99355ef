"""Appointment service - Business logic for appointments and conflict checks"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...benchmarks import format_clock_time
from ...models import Appointment, Customer, Groomer, Pet
from ...shared.dates import at_clock, utc_today
from ...shared.validators import parse_date, require_date, require_time
from ..areas.area_matcher import (
    find_next_area_day_date,
    format_day_names,
    get_groomer_area_days,
)
from .conflicts import (
    DEFAULT_WORK_END_HOUR,
    DEFAULT_WORK_START_HOUR,
    find_next_available,
    overlaps,
    work_hour,
)
from .repository import AppointmentRepository
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    ConflictCheckResponse,
    ConflictingAppointment,
    NextAvailableSlot,
    SuggestDateCustomer,
    SuggestDateResponse,
)

logger = logging.getLogger(__name__)


def _end_of(appointment: Appointment) -> datetime:
    return appointment.start_at + timedelta(minutes=appointment.service_minutes)


def to_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        customerId=appointment.customer_id,
        customerName=appointment.customer.name if appointment.customer else None,
        petId=appointment.pet_id,
        petName=appointment.pet.name if appointment.pet else None,
        groomerId=appointment.groomer_id,
        startAt=appointment.start_at,
        serviceMinutes=appointment.service_minutes,
        status=appointment.status,
        price=appointment.price,
        notes=appointment.notes,
    )


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def get_appointment(self, appointment_id: int, groomer: Groomer) -> Appointment:
        appointment = self.repo.get_by_id(self.db, appointment_id, groomer.account_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def list_for_day(self, groomer: Groomer, day: str) -> list[Appointment]:
        return self.repo.get_for_day(self.db, groomer.account_id, groomer.id, require_date(day))

    def _find_conflicts(
        self,
        groomer: Groomer,
        start: datetime,
        minutes: int,
        exclude_id: Optional[int] = None,
    ) -> list[Appointment]:
        end = start + timedelta(minutes=minutes)
        existing = self.repo.get_for_day(
            self.db,
            groomer.account_id,
            groomer.id,
            start.date(),
            blocking_only=True,
            exclude_id=exclude_id,
        )
        return [apt for apt in existing if overlaps(start, end, apt.start_at, _end_of(apt))]

    def create_appointment(self, groomer: Groomer, data: AppointmentCreate) -> Appointment:
        customer = (
            self.db.query(Customer)
            .filter(Customer.id == data.customerId, Customer.account_id == groomer.account_id)
            .first()
        )
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")

        if data.petId is not None:
            pet = (
                self.db.query(Pet)
                .filter(Pet.id == data.petId, Pet.customer_id == customer.id)
                .first()
            )
            if not pet:
                raise HTTPException(status_code=404, detail="Pet not found for this customer")

        start_at = at_clock(parse_date(data.date), data.time)
        if self._find_conflicts(groomer, start_at, data.serviceMinutes):
            raise HTTPException(
                status_code=400, detail="This time slot conflicts with an existing appointment"
            )

        appointment = self.repo.create(
            self.db,
            account_id=groomer.account_id,
            groomer_id=groomer.id,
            customer_id=customer.id,
            pet_id=data.petId,
            start_at=start_at,
            service_minutes=data.serviceMinutes,
            price=data.price,
            notes=data.notes,
            status="BOOKED",
        )
        logger.info(f"📅 Appointment {appointment.id} booked for customer {customer.id} at {start_at}")
        return appointment

    def update_appointment(
        self, appointment_id: int, groomer: Groomer, data: AppointmentUpdate
    ) -> Appointment:
        """Move, resize or change the status of an appointment"""
        appointment = self.get_appointment(appointment_id, groomer)

        if data.date is not None or data.time is not None:
            day = parse_date(data.date) if data.date else appointment.start_at.date()
            clock = data.time or appointment.start_at.strftime("%H:%M")
            appointment.start_at = at_clock(day, clock)
        if data.serviceMinutes is not None:
            if data.serviceMinutes < 1:
                raise HTTPException(status_code=400, detail="serviceMinutes must be at least 1")
            appointment.service_minutes = data.serviceMinutes
        if data.price is not None:
            appointment.price = data.price
        if data.notes is not None:
            appointment.notes = data.notes

        if data.status is not None and data.status != appointment.status:
            customer = appointment.customer
            if data.status == "CANCELLED":
                customer.cancellation_count = (customer.cancellation_count or 0) + 1
            elif data.status == "NO_SHOW":
                customer.no_show_count = (customer.no_show_count or 0) + 1
            logger.info(
                f"🔄 Appointment {appointment.id} status {appointment.status} -> {data.status}"
            )
            appointment.status = data.status

        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def delete_appointment(self, appointment_id: int, groomer: Groomer) -> dict:
        appointment = self.get_appointment(appointment_id, groomer)
        self.db.delete(appointment)
        self.db.commit()
        logger.info(f"🗑️ Appointment {appointment_id} deleted")
        return {"success": True}

    def check_conflict(
        self,
        groomer: Groomer,
        day: str,
        time: str,
        duration: int = 90,
        exclude_id: Optional[int] = None,
    ) -> ConflictCheckResponse:
        """Would a proposed appointment overlap the day, and if so, when is the next free slot"""
        proposed_day = require_date(day)
        require_time(time)
        proposed_start = at_clock(proposed_day, time)
        proposed_end = proposed_start + timedelta(minutes=duration)

        existing = self.repo.get_for_day(
            self.db,
            groomer.account_id,
            groomer.id,
            proposed_day,
            blocking_only=True,
            exclude_id=exclude_id,
        )

        conflicts = [
            ConflictingAppointment(
                id=apt.id,
                customerName=apt.customer.name if apt.customer else "Unknown",
                petName=apt.pet.name if apt.pet else "Unknown",
                startTime=format_clock_time(apt.start_at),
                endTime=format_clock_time(_end_of(apt)),
            )
            for apt in existing
            if overlaps(proposed_start, proposed_end, apt.start_at, _end_of(apt))
        ]

        next_available = None
        if conflicts:
            slot = find_next_available(
                proposed_day,
                proposed_start,
                duration,
                [(apt.start_at, _end_of(apt)) for apt in existing],
                work_start_hour=work_hour(groomer.working_hours_start, DEFAULT_WORK_START_HOUR),
                work_end_hour=work_hour(groomer.working_hours_end, DEFAULT_WORK_END_HOUR),
            )
            if slot is not None:
                next_available = NextAvailableSlot(
                    time=slot.strftime("%H:%M"), timeFormatted=format_clock_time(slot)
                )

        return ConflictCheckResponse(
            hasConflict=bool(conflicts),
            conflicts=conflicts,
            proposedStart=format_clock_time(proposed_start),
            proposedEnd=format_clock_time(proposed_end),
            date=day,
            time=time,
            duration=duration,
            nextAvailable=next_available,
        )

    def suggest_date(
        self, account_id: int, customer_id: Optional[int], groomer_id: Optional[int]
    ) -> SuggestDateResponse:
        """Next date the groomer works the customer's service area, starting tomorrow"""
        if not customer_id or not groomer_id:
            raise HTTPException(status_code=400, detail="customerId and groomerId are required")

        customer = (
            self.db.query(Customer)
            .filter(Customer.id == customer_id, Customer.account_id == account_id)
            .first()
        )
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")

        groomer = (
            self.db.query(Groomer)
            .filter(Groomer.id == groomer_id, Groomer.account_id == account_id)
            .first()
        )
        if not groomer:
            raise HTTPException(status_code=404, detail="Groomer not found")

        area = customer.service_area
        if area is None:
            return SuggestDateResponse(
                customer=SuggestDateCustomer(id=customer.id, name=customer.name)
            )

        suggested_days = get_groomer_area_days(self.db, groomer.id, area.id)
        next_date = find_next_area_day_date(
            self.db, groomer.id, area.id, utc_today() + timedelta(days=1)
        )

        reason = None
        if suggested_days:
            reason = f"{groomer.name} works in {area.name} on {format_day_names(suggested_days)}"

        return SuggestDateResponse(
            customer=SuggestDateCustomer(
                id=customer.id,
                name=customer.name,
                serviceAreaId=area.id,
                serviceAreaName=area.name,
                serviceAreaColor=area.color,
            ),
            suggestedDays=suggested_days,
            nextSuggestedDate=next_date.date.isoformat() if next_date else None,
            reason=reason,
        )
