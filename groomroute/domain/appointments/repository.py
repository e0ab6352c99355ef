"""Appointment repository - Database operations for appointments"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import NON_BLOCKING_STATUSES, Appointment
from ...shared.dates import day_bounds


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_by_id(db: Session, appointment_id: int, account_id: int) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.account_id == account_id)
            .first()
        )

    @staticmethod
    def get_for_day(
        db: Session,
        account_id: int,
        groomer_id: int,
        day: date,
        blocking_only: bool = False,
        exclude_id: Optional[int] = None,
    ) -> list[Appointment]:
        """Appointments starting on the day, earliest first"""
        start, end = day_bounds(day)
        query = (
            db.query(Appointment)
            .options(joinedload(Appointment.customer), joinedload(Appointment.pet))
            .filter(
                Appointment.account_id == account_id,
                Appointment.groomer_id == groomer_id,
                Appointment.start_at >= start,
                Appointment.start_at <= end,
            )
        )
        if blocking_only:
            query = query.filter(Appointment.status.notin_(NON_BLOCKING_STATUSES))
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.order_by(Appointment.start_at.asc(), Appointment.id.asc()).all()

    @staticmethod
    def create(db: Session, **data) -> Appointment:
        appointment = Appointment(**data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment
