"""
Overlap detection and next-free-slot search for a groomer's day.

Works on plain (start, end) intervals so the rules can be checked without a
database.
"""

from datetime import date, datetime, timedelta
from typing import Optional

DEFAULT_WORK_START_HOUR = 9
DEFAULT_WORK_END_HOUR = 17
BUFFER_AFTER_APPOINTMENT_MINUTES = 15
SLOT_GRANULARITY_MINUTES = 15

Interval = tuple[datetime, datetime]


def overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    """Half-open overlap: touching intervals do not conflict"""
    return start < other_end and end > other_start


def work_hour(value: Optional[str], default: int) -> int:
    """Hour part of an HH:MM working-hours string"""
    if not value:
        return default
    return int(value.split(":")[0])


def round_up_to_quarter(value: datetime) -> datetime:
    base = value.replace(minute=0, second=0, microsecond=0)
    minutes = -(-value.minute // SLOT_GRANULARITY_MINUTES) * SLOT_GRANULARITY_MINUTES
    return base + timedelta(minutes=minutes)


def find_next_available(
    day: date,
    proposed_start: datetime,
    duration_minutes: int,
    busy: list[Interval],
    work_start_hour: int = DEFAULT_WORK_START_HOUR,
    work_end_hour: int = DEFAULT_WORK_END_HOUR,
) -> Optional[datetime]:
    """
    First start time at or after the proposed one where the appointment fits
    between busy periods and inside working hours.

    A start 15 minutes after the previous appointment is preferred when it
    still fits the gap; candidates are rounded up to the next quarter hour.
    """
    duration = timedelta(minutes=duration_minutes)
    periods = sorted(busy)

    work_start = datetime.combine(day, datetime.min.time()) + timedelta(hours=work_start_hour)
    work_end = datetime.combine(day, datetime.min.time()) + timedelta(hours=work_end_hour)
    search_start = max(proposed_start, work_start)

    for i in range(len(periods) + 1):
        if i == 0:
            gap_start = search_start
            gap_end = periods[0][0] if periods else work_end
        elif i == len(periods):
            gap_start = periods[i - 1][1]
            gap_end = work_end
        else:
            gap_start = periods[i - 1][1]
            gap_end = periods[i][0]

        gap_start = max(gap_start, search_start)

        if gap_end - gap_start < duration or gap_start >= work_end:
            continue

        if i > 0:
            buffered = periods[i - 1][1] + timedelta(minutes=BUFFER_AFTER_APPOINTMENT_MINUTES)
            if buffered > gap_start and buffered + duration <= gap_end:
                gap_start = buffered

        candidate = round_up_to_quarter(gap_start)
        if candidate + duration <= gap_end and candidate + duration <= work_end:
            return candidate

    return None
