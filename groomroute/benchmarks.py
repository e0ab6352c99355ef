"""
Workload benchmarks for mobile pet groomers.

Constants for assistant mode, drive speed and route efficiency, plus the
small formatting helpers used when reporting a route back to the groomer.
"""

from datetime import datetime

# Working with a bather: the groomer preps while the assistant bathes and dries
ASSISTANT_MODE = {
    # 0.75 = 25% faster with assistant
    "service_time_multiplier": 0.75,
    # Travel + setup between stops
    "buffer_minutes": {
        "solo": 15,
        "with_assistant": 12,
    },
}

# Average road speed used to turn straight-line miles into drive minutes
AVERAGE_SPEED_MPH = 30

METERS_PER_MILE = 1609.34

# Route efficiency ratings based on avg minutes between stops, checked in order
ROUTE_EFFICIENCY = {
    "excellent": {"max_minutes": 18, "label": "Excellent"},
    "good": {"max_minutes": 25, "label": "Good"},
    "okay": {"max_minutes": 35, "label": "Okay"},
    "needsWork": {"max_minutes": float("inf"), "label": "Needs work"},
}


def get_adjusted_service_minutes(base_minutes: int, has_assistant: bool) -> int:
    """Service duration after the assistant speed-up"""
    if has_assistant:
        return round_half_up(base_minutes * ASSISTANT_MODE["service_time_multiplier"])
    return base_minutes


def get_buffer_minutes(has_assistant: bool) -> int:
    buffers = ASSISTANT_MODE["buffer_minutes"]
    return buffers["with_assistant"] if has_assistant else buffers["solo"]


def get_route_efficiency_rating(avg_minutes_between_stops: float) -> str:
    for rating, band in ROUTE_EFFICIENCY.items():
        if avg_minutes_between_stops <= band["max_minutes"]:
            return rating
    return "needsWork"


def get_route_efficiency_label(avg_minutes_between_stops: float) -> str:
    return ROUTE_EFFICIENCY[get_route_efficiency_rating(avg_minutes_between_stops)]["label"]


def format_drive_time(total_minutes: int) -> str:
    """75 -> "1h 15m", 45 -> "45m" """
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{total_minutes}m"


def format_clock_time(value: datetime) -> str:
    """12-hour clock without a leading zero, e.g. "9:05 AM" """
    period = "PM" if value.hour >= 12 else "AM"
    hour12 = value.hour % 12 or 12
    return f"{hour12}:{value.minute:02d} {period}"


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with 0.5 always going up (round() would give 2 for 2.5)"""
    factor = 10**digits
    rounded = int(value * factor + 0.5) / factor
    return rounded if digits else int(rounded)
