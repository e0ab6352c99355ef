"""
Area day matching.

A groomer works a default area per weekday; a date override replaces the
default for one date, and an override without an area is a day off.
"""

from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session, joinedload

from ...models_routing import AreaDateOverride, AreaDayAssignment
from ...shared.dates import date_range, day_of_week, format_day_names, format_day_names_short

DEFAULT_MAX_DAYS_AHEAD = 30

__all__ = [
    "AreaMatch",
    "UpcomingAreaDate",
    "get_groomer_area_days",
    "get_groomer_assigned_area",
    "get_groomer_area_for_date",
    "get_groomer_areas_for_date_range",
    "find_next_area_day_date",
    "get_upcoming_area_dates",
    "format_day_names",
    "format_day_names_short",
]


class AreaMatch(BaseModel):
    area_id: int
    area_name: str
    area_color: str
    is_override: bool = False


class UpcomingAreaDate(BaseModel):
    date: date
    day_of_week: int
    is_override: bool


def _match(area, is_override: bool) -> AreaMatch:
    return AreaMatch(
        area_id=area.id, area_name=area.name, area_color=area.color, is_override=is_override
    )


def _override_map(db: Session, groomer_id: int, start: date, end: date) -> dict[date, Optional[int]]:
    """date -> overriding area id (None for a day off)"""
    overrides = (
        db.query(AreaDateOverride)
        .filter(
            AreaDateOverride.groomer_id == groomer_id,
            AreaDateOverride.date >= start,
            AreaDateOverride.date <= end,
        )
        .all()
    )
    return {override.date: override.area_id for override in overrides}


def get_groomer_area_days(db: Session, groomer_id: int, area_id: int) -> list[int]:
    """Weekdays (0=Sunday) the groomer works the area by default, ascending"""
    rows = (
        db.query(AreaDayAssignment.day_of_week)
        .filter(AreaDayAssignment.groomer_id == groomer_id, AreaDayAssignment.area_id == area_id)
        .all()
    )
    return sorted(row.day_of_week for row in rows)


def get_groomer_assigned_area(db: Session, groomer_id: int, weekday: int) -> Optional[AreaMatch]:
    """Default area for a weekday, ignoring overrides"""
    assignment = (
        db.query(AreaDayAssignment)
        .options(joinedload(AreaDayAssignment.area))
        .filter(
            AreaDayAssignment.groomer_id == groomer_id,
            AreaDayAssignment.day_of_week == weekday,
        )
        .first()
    )
    if assignment is None:
        return None
    return _match(assignment.area, is_override=False)


def get_groomer_area_for_date(db: Session, groomer_id: int, value: date) -> Optional[AreaMatch]:
    """Area for a date: the override if one exists (None on a day off), else the weekday default"""
    override = (
        db.query(AreaDateOverride)
        .options(joinedload(AreaDateOverride.area))
        .filter(AreaDateOverride.groomer_id == groomer_id, AreaDateOverride.date == value)
        .first()
    )
    if override is not None:
        if override.area is None:
            return None
        return _match(override.area, is_override=True)

    return get_groomer_assigned_area(db, groomer_id, day_of_week(value))


def get_groomer_areas_for_date_range(
    db: Session, groomer_id: int, start: date, end: date
) -> dict[date, Optional[AreaMatch]]:
    """Area for every date from start to end inclusive, with two queries in total"""
    overrides = (
        db.query(AreaDateOverride)
        .options(joinedload(AreaDateOverride.area))
        .filter(
            AreaDateOverride.groomer_id == groomer_id,
            AreaDateOverride.date >= start,
            AreaDateOverride.date <= end,
        )
        .all()
    )
    override_by_date = {override.date: override for override in overrides}

    assignments = (
        db.query(AreaDayAssignment)
        .options(joinedload(AreaDayAssignment.area))
        .filter(AreaDayAssignment.groomer_id == groomer_id)
        .all()
    )
    default_by_day = {a.day_of_week: _match(a.area, is_override=False) for a in assignments}

    result: dict[date, Optional[AreaMatch]] = {}
    for current in date_range(start, end):
        override = override_by_date.get(current)
        if override is not None:
            result[current] = _match(override.area, True) if override.area else None
        else:
            result[current] = default_by_day.get(day_of_week(current))
    return result


def _iter_area_dates(
    db: Session, groomer_id: int, area_id: int, from_date: date, max_days_ahead: int
):
    default_days = get_groomer_area_days(db, groomer_id, area_id)
    overrides = _override_map(
        db, groomer_id, from_date, from_date + timedelta(days=max_days_ahead)
    )

    for offset in range(max_days_ahead):
        current = from_date + timedelta(days=offset)
        if current in overrides:
            # An override for another area, or a day off, takes the date away
            if overrides[current] == area_id:
                yield UpcomingAreaDate(
                    date=current, day_of_week=day_of_week(current), is_override=True
                )
            continue
        if day_of_week(current) in default_days:
            yield UpcomingAreaDate(
                date=current, day_of_week=day_of_week(current), is_override=False
            )


def find_next_area_day_date(
    db: Session,
    groomer_id: int,
    customer_area_id: int,
    from_date: date,
    max_days_ahead: int = DEFAULT_MAX_DAYS_AHEAD,
) -> Optional[UpcomingAreaDate]:
    """First date within the window when the groomer is in the customer's area"""
    return next(_iter_area_dates(db, groomer_id, customer_area_id, from_date, max_days_ahead), None)


def get_upcoming_area_dates(
    db: Session,
    groomer_id: int,
    area_id: int,
    from_date: date,
    max_days_ahead: int = DEFAULT_MAX_DAYS_AHEAD,
) -> list[UpcomingAreaDate]:
    return list(_iter_area_dates(db, groomer_id, area_id, from_date, max_days_ahead))
