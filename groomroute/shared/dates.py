"""Calendar helpers.

Appointment times are stored as naive UTC and a "day" is a UTC calendar day.
Weekdays use 0=Sunday ... 6=Saturday to match the area day assignments.
"""

from datetime import date, datetime, time, timedelta, timezone

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DAY_NAMES_SHORT = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_today() -> date:
    return utc_now().date()


def day_of_week(value: date) -> int:
    """Sunday-based weekday number"""
    return (value.weekday() + 1) % 7


def day_name_upper(value: date) -> str:
    """Upper-case day name ("MONDAY") as stored in waitlist preferences"""
    return DAY_NAMES[day_of_week(value)].upper()


def day_bounds(value: date) -> tuple[datetime, datetime]:
    """First and last instant of a day (inclusive)"""
    start = datetime.combine(value, time.min)
    return start, start + timedelta(days=1) - timedelta(microseconds=1)


def at_clock(value: date, hhmm: str) -> datetime:
    hours, minutes = (int(part) for part in hhmm.split(":"))
    return datetime.combine(value, time(hours, minutes))


def date_range(start: date, end: date):
    """Yield every date from start to end inclusive"""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def format_day_names(day_numbers: list[int]) -> str:
    """[1, 4] -> "Monday, Thursday" """
    return ", ".join(DAY_NAMES[d] for d in day_numbers)


def format_day_names_short(day_numbers: list[int]) -> str:
    """[1, 4] -> "Mon, Thu" """
    return ", ".join(DAY_NAMES_SHORT[d] for d in day_numbers)
