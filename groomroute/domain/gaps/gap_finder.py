"""Free time in a groomer's day and which waitlisted customers could fill it"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

DEFAULT_WORKING_START = "08:00"
DEFAULT_WORKING_END = "17:00"
DEFAULT_MIN_GAP_MINUTES = 45
MAX_MATCHES_PER_GAP = 5


@dataclass
class BookedSlot:
    id: int
    customer_name: str
    start: datetime
    minutes: int

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.minutes)


@dataclass
class Gap:
    start: datetime
    end: datetime
    previous: Optional[BookedSlot] = None
    next: Optional[BookedSlot] = None

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


@dataclass
class WaitlistPreference:
    preferred_days: list[str] = field(default_factory=list)
    preferred_times: list[str] = field(default_factory=list)
    flexible_timing: bool = False
    service_area_id: Optional[int] = None


def time_of_day(value: datetime) -> str:
    if value.hour < 12:
        return "MORNING"
    if value.hour < 17:
        return "AFTERNOON"
    return "EVENING"


def find_gaps(
    workday_start: datetime,
    workday_end: datetime,
    booked: list[BookedSlot],
    min_gap_minutes: int = DEFAULT_MIN_GAP_MINUTES,
) -> list[Gap]:
    """
    Gaps of at least min_gap_minutes: before the first appointment, between
    consecutive appointments and after the last one. An empty day is one gap.
    """
    booked = sorted(booked, key=lambda slot: slot.start)
    candidates: list[Gap] = []

    if not booked:
        candidates.append(Gap(start=workday_start, end=workday_end))
    else:
        candidates.append(Gap(start=workday_start, end=booked[0].start, next=booked[0]))
        for current, following in zip(booked, booked[1:]):
            candidates.append(
                Gap(start=current.end, end=following.start, previous=current, next=following)
            )
        candidates.append(Gap(start=booked[-1].end, end=workday_end, previous=booked[-1]))

    return [gap for gap in candidates if gap.duration_minutes >= min_gap_minutes]


def score_gap_match(
    preference: WaitlistPreference,
    day_name: str,
    gap_start: datetime,
    area_id: Optional[int] = None,
    area_name: Optional[str] = None,
) -> tuple[int, list[str]]:
    """
    How well a waitlist entry fits a gap.

    day_name is the upper-case weekday ("MONDAY"); area_id is the area the
    groomer works that day, if any.
    """
    score = 0
    reasons = []

    if day_name in preference.preferred_days:
        score += 40
        reasons.append(f"Prefers {day_name.capitalize()}s")
    elif preference.flexible_timing:
        score += 15
        reasons.append("Flexible timing")

    slot_time = time_of_day(gap_start)
    if slot_time in preference.preferred_times:
        score += 30
        reasons.append(f"Prefers {slot_time.lower()} appointments")
    elif preference.flexible_timing:
        score += 10

    if area_id is not None and preference.service_area_id == area_id:
        score += 30
        reasons.append(f"In today's area ({area_name})")

    return score, reasons
