"""Waitlist service - entries and suggestions"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Customer, CustomerWaitlist, Groomer
from ...shared.dates import DAY_NAMES, day_of_week, utc_today
from ...shared.validators import require_date
from ..appointments.repository import AppointmentRepository
from .repository import WaitlistRepository
from .schemas import (
    RELIABILITY_TIERS,
    VALUE_TIERS,
    SuggestFilters,
    SuggestMeta,
    SuggestResponse,
    WaitlistCreate,
    WaitlistEntryResponse,
    WaitlistSaveResponse,
)
from .suggest import SuggestFilter, get_waitlist_suggestions

logger = logging.getLogger(__name__)


def to_entry_response(entry: CustomerWaitlist) -> WaitlistEntryResponse:
    return WaitlistEntryResponse(
        id=entry.id,
        customerId=entry.customer_id,
        customerName=entry.customer.name,
        preferredDays=entry.preferred_days or [],
        preferredTimes=entry.preferred_times or [],
        flexibleTiming=entry.flexible_timing,
        maxDistance=entry.max_distance,
        notes=entry.notes,
        isActive=entry.is_active,
        createdAt=entry.created_at,
    )


class WaitlistService:
    """Service layer for the customer waitlist"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WaitlistRepository()

    def list_entries(self, account_id: int) -> list[CustomerWaitlist]:
        return self.repo.list_active_entries(self.db, account_id)

    def save_entry(self, account_id: int, data: WaitlistCreate) -> WaitlistSaveResponse:
        """Add a customer to the waitlist, or update their preferences if already there"""
        customer = (
            self.db.query(Customer)
            .filter(Customer.id == data.customerId, Customer.account_id == account_id)
            .first()
        )
        if not customer:
            raise HTTPException(status_code=404, detail="Client not found")

        entry = self.repo.get_by_customer(self.db, customer.id, account_id)
        if entry is not None and entry.is_active:
            message = "Waitlist preferences updated"
        else:
            message = "Client added to waitlist"
        if entry is None:
            entry = CustomerWaitlist(account_id=account_id, customer_id=customer.id)
            self.db.add(entry)

        entry.preferred_days = data.preferredDays
        entry.preferred_times = data.preferredTimes
        entry.flexible_timing = data.flexibleTiming
        entry.max_distance = data.maxDistance
        entry.notes = data.notes
        entry.is_active = True

        self.db.commit()
        self.db.refresh(entry)
        logger.info(f"📋 Customer {customer.id} on waitlist ({message})")
        return WaitlistSaveResponse(entry=to_entry_response(entry), message=message)

    def remove_entry(
        self, account_id: int, entry_id: Optional[int] = None, customer_id: Optional[int] = None
    ) -> dict:
        """Soft delete: the entry stays for history but stops matching"""
        if entry_id is None and customer_id is None:
            raise HTTPException(status_code=400, detail="Entry ID or Customer ID is required")

        if entry_id is not None:
            entry = self.repo.get_entry(self.db, entry_id, account_id)
        else:
            entry = self.repo.get_by_customer(self.db, customer_id, account_id)
            if entry is not None and not entry.is_active:
                entry = None
        if entry is None:
            raise HTTPException(status_code=404, detail="Waitlist entry not found")

        entry.is_active = False
        self.db.commit()
        return {"success": True, "message": "Removed from waitlist"}

    def suggest(
        self,
        groomer: Groomer,
        day: Optional[str],
        limit: int = 10,
        min_reliability: Optional[str] = None,
        value_tier: Optional[str] = None,
        max_distance: Optional[float] = None,
    ) -> SuggestResponse:
        target_date = require_date(day) if day else utc_today()

        if min_reliability is not None and min_reliability not in RELIABILITY_TIERS:
            raise HTTPException(
                status_code=400,
                detail=f"minReliability must be one of {', '.join(RELIABILITY_TIERS)}",
            )
        value_tiers = None
        if value_tier:
            value_tiers = [t.strip() for t in value_tier.split(",") if t.strip()]
            if any(t not in VALUE_TIERS for t in value_tiers):
                raise HTTPException(
                    status_code=400, detail=f"valueTier must be from {', '.join(VALUE_TIERS)}"
                )

        filters = SuggestFilter(
            limit=limit,
            min_reliability=min_reliability,
            value_tiers=value_tiers,
            max_distance=max_distance,
        )
        suggestions = get_waitlist_suggestions(self.db, groomer, target_date, filters)

        appointment_count = len(
            AppointmentRepository.get_for_day(
                self.db, groomer.account_id, groomer.id, target_date, blocking_only=True
            )
        )
        return SuggestResponse(
            date=target_date.isoformat(),
            dayOfWeek=DAY_NAMES[day_of_week(target_date)],
            suggestions=suggestions,
            meta=SuggestMeta(
                totalWaitlistCount=self.repo.count_active(self.db, groomer.account_id),
                suggestionsReturned=len(suggestions),
                todaysAppointmentCount=appointment_count,
                filters=SuggestFilters(
                    limit=limit,
                    minReliability=min_reliability,
                    valueTier=value_tiers,
                    maxDistance=max_distance,
                ),
            ),
        )
