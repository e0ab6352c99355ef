"""Gap service - free time in the day matched against the waitlist"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...benchmarks import format_clock_time
from ...models import Groomer
from ...shared.dates import at_clock, day_name_upper
from ...shared.validators import require_date
from ..appointments.repository import AppointmentRepository
from ..areas.area_matcher import get_groomer_area_for_date
from ..waitlist.repository import WaitlistRepository
from .gap_finder import (
    DEFAULT_WORKING_END,
    DEFAULT_WORKING_START,
    MAX_MATCHES_PER_GAP,
    BookedSlot,
    WaitlistPreference,
    find_gaps,
    score_gap_match,
)
from .schemas import (
    AreaForDay,
    GapMatch,
    GapPet,
    GapResponse,
    GapsResponse,
    NeighborAppointment,
    WorkingHours,
)

logger = logging.getLogger(__name__)


class GapService:
    """Service layer for schedule gaps"""

    def __init__(self, db: Session):
        self.db = db

    def find_day_gaps(self, groomer: Groomer, day: str, min_gap: int) -> GapsResponse:
        target_date = require_date(day)
        if min_gap < 1:
            raise HTTPException(status_code=400, detail="minGap must be at least 1")

        working_start = groomer.working_hours_start or DEFAULT_WORKING_START
        working_end = groomer.working_hours_end or DEFAULT_WORKING_END

        appointments = AppointmentRepository.get_for_day(
            self.db, groomer.account_id, groomer.id, target_date, blocking_only=True
        )
        booked = [
            BookedSlot(
                id=apt.id,
                customer_name=apt.customer.name,
                start=apt.start_at,
                minutes=apt.service_minutes,
            )
            for apt in appointments
        ]
        gaps = find_gaps(
            at_clock(target_date, working_start),
            at_clock(target_date, working_end),
            booked,
            min_gap,
        )

        day_name = day_name_upper(target_date)
        area = get_groomer_area_for_date(self.db, groomer.id, target_date)
        entries = WaitlistRepository.list_active_entries(self.db, groomer.account_id)

        gap_responses = []
        for gap in gaps:
            matches = []
            for entry in entries:
                customer = entry.customer
                score, reasons = score_gap_match(
                    WaitlistPreference(
                        preferred_days=entry.preferred_days or [],
                        preferred_times=entry.preferred_times or [],
                        flexible_timing=entry.flexible_timing,
                        service_area_id=customer.service_area_id,
                    ),
                    day_name,
                    gap.start,
                    area_id=area.area_id if area else None,
                    area_name=area.area_name if area else None,
                )
                if score == 0:
                    continue
                matches.append(
                    GapMatch(
                        customerId=customer.id,
                        customerName=customer.name,
                        customerPhone=customer.phone,
                        customerEmail=customer.email,
                        customerAddress=customer.address,
                        pets=[GapPet(id=p.id, name=p.name, breed=p.breed) for p in customer.pets],
                        serviceAreaName=customer.service_area.name if customer.service_area else None,
                        serviceAreaColor=(
                            customer.service_area.color if customer.service_area else None
                        ),
                        preferredDays=entry.preferred_days or [],
                        preferredTimes=entry.preferred_times or [],
                        flexibleTiming=entry.flexible_timing,
                        matchScore=score,
                        matchReasons=reasons,
                    )
                )
            matches.sort(key=lambda m: m.matchScore, reverse=True)

            gap_responses.append(
                GapResponse(
                    startTime=gap.start,
                    endTime=gap.end,
                    durationMinutes=gap.duration_minutes,
                    previousAppointment=(
                        NeighborAppointment(
                            id=gap.previous.id,
                            customerName=gap.previous.customer_name,
                            endTime=gap.previous.end,
                        )
                        if gap.previous
                        else None
                    ),
                    nextAppointment=(
                        NeighborAppointment(
                            id=gap.next.id,
                            customerName=gap.next.customer_name,
                            startTime=gap.next.start,
                        )
                        if gap.next
                        else None
                    ),
                    startTimeFormatted=format_clock_time(gap.start),
                    endTimeFormatted=format_clock_time(gap.end),
                    startTime24h=gap.start.strftime("%H:%M"),
                    endTime24h=gap.end.strftime("%H:%M"),
                    suggestedClients=matches[:MAX_MATCHES_PER_GAP],
                )
            )

        total = sum(gap.duration_minutes for gap in gaps)
        logger.info(f"🕳️ {len(gaps)} gaps ({total} min) for groomer {groomer.id} on {target_date}")
        return GapsResponse(
            date=day,
            dayOfWeek=day_name,
            areaForDay=(
                AreaForDay(id=area.area_id, name=area.area_name, color=area.area_color)
                if area
                else None
            ),
            workingHours=WorkingHours(start=working_start, end=working_end),
            appointmentCount=len(appointments),
            gaps=gap_responses,
            totalGapMinutes=total,
        )
