"""Waitlist repository - entries and the appointment history used for scoring"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, Customer, CustomerWaitlist


class WaitlistRepository:
    """Repository for waitlist database operations"""

    @staticmethod
    def list_active_entries(db: Session, account_id: int) -> list[CustomerWaitlist]:
        return (
            db.query(CustomerWaitlist)
            .options(
                joinedload(CustomerWaitlist.customer).joinedload(Customer.pets),
                joinedload(CustomerWaitlist.customer).joinedload(Customer.service_area),
            )
            .filter(CustomerWaitlist.account_id == account_id, CustomerWaitlist.is_active.is_(True))
            .order_by(CustomerWaitlist.created_at.asc(), CustomerWaitlist.id.asc())
            .all()
        )

    @staticmethod
    def count_active(db: Session, account_id: int) -> int:
        return (
            db.query(CustomerWaitlist)
            .filter(CustomerWaitlist.account_id == account_id, CustomerWaitlist.is_active.is_(True))
            .count()
        )

    @staticmethod
    def get_entry(db: Session, entry_id: int, account_id: int) -> Optional[CustomerWaitlist]:
        return (
            db.query(CustomerWaitlist)
            .filter(CustomerWaitlist.id == entry_id, CustomerWaitlist.account_id == account_id)
            .first()
        )

    @staticmethod
    def get_by_customer(db: Session, customer_id: int, account_id: int) -> Optional[CustomerWaitlist]:
        return (
            db.query(CustomerWaitlist)
            .filter(
                CustomerWaitlist.customer_id == customer_id,
                CustomerWaitlist.account_id == account_id,
            )
            .first()
        )

    @staticmethod
    def appointment_totals(
        db: Session, account_id: int, customer_ids: list[int]
    ) -> dict[int, tuple[int, float]]:
        """customer id -> (appointment count, revenue) over all appointments"""
        if not customer_ids:
            return {}
        rows = (
            db.query(Appointment.customer_id, func.count(Appointment.id), func.sum(Appointment.price))
            .filter(Appointment.account_id == account_id, Appointment.customer_id.in_(customer_ids))
            .group_by(Appointment.customer_id)
            .all()
        )
        return {customer_id: (count, float(revenue or 0)) for customer_id, count, revenue in rows}

    @staticmethod
    def completed_stats(
        db: Session, account_id: int, customer_ids: list[int]
    ) -> dict[int, tuple[int, datetime]]:
        """customer id -> (completed count, last completed start)"""
        if not customer_ids:
            return {}
        rows = (
            db.query(
                Appointment.customer_id, func.count(Appointment.id), func.max(Appointment.start_at)
            )
            .filter(
                Appointment.account_id == account_id,
                Appointment.customer_id.in_(customer_ids),
                Appointment.status == "COMPLETED",
            )
            .group_by(Appointment.customer_id)
            .all()
        )
        return {customer_id: (count, last) for customer_id, count, last in rows}
