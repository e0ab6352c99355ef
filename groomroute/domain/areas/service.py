"""Service area service - Business logic for areas, area days and overrides"""

import calendar
import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Groomer
from ...models_routing import AreaDateOverride, AreaDayAssignment, ServiceArea
from ...shared.dates import DAY_NAMES, utc_today
from ...shared.validators import parse_date, parse_month
from . import area_matcher
from .repository import AreaRepository
from .schemas import (
    AreaCreate,
    AreaResponse,
    AreaSummary,
    AreaUpdate,
    AssignedDay,
    AssignmentMatrixResponse,
    CalendarDay,
    GroomerAssignmentRow,
    MonthOverridesResponse,
    OverrideRequest,
    OverrideResponse,
    SetAssignmentRequest,
    SetAssignmentResponse,
    UpcomingDate,
    UpcomingDatesResponse,
)

logger = logging.getLogger(__name__)

MAX_SERVICE_AREAS = 6


def _summary(area: ServiceArea) -> AreaSummary:
    return AreaSummary(areaId=area.id, areaName=area.name, areaColor=area.color)


def _override_response(override: AreaDateOverride) -> OverrideResponse:
    return OverrideResponse(
        id=override.id,
        date=override.date.isoformat(),
        areaId=override.area_id,
        areaName=override.area.name if override.area else None,
        areaColor=override.area.color if override.area else None,
    )


class AreaService:
    """Service layer for service areas"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AreaRepository()

    def get_area(self, area_id: int, account_id: int) -> ServiceArea:
        area = self.repo.get_area(self.db, area_id, account_id)
        if not area:
            raise HTTPException(status_code=404, detail="Service area not found")
        return area

    def list_areas(self, account_id: int) -> list[AreaResponse]:
        areas = self.repo.list_areas(self.db, account_id)
        counts = self.repo.customer_counts(self.db, account_id)
        assignments = self.repo.list_assignments(self.db, account_id)
        groomer_names = {
            g.id: g.name for g in self.db.query(Groomer).filter(Groomer.account_id == account_id)
        }

        return [
            AreaResponse(
                id=area.id,
                name=area.name,
                color=area.color,
                isActive=area.is_active,
                customerCount=counts.get(area.id, 0),
                assignedDays=[
                    AssignedDay(
                        dayOfWeek=a.day_of_week,
                        groomerId=a.groomer_id,
                        groomerName=groomer_names.get(a.groomer_id, ""),
                    )
                    for a in sorted(assignments, key=lambda a: a.day_of_week)
                    if a.area_id == area.id
                ],
                createdAt=area.created_at,
            )
            for area in areas
        ]

    def create_area(self, account_id: int, data: AreaCreate) -> ServiceArea:
        if self.repo.count_areas(self.db, account_id) >= MAX_SERVICE_AREAS:
            raise HTTPException(
                status_code=400, detail=f"Maximum of {MAX_SERVICE_AREAS} service areas allowed"
            )
        if self.repo.get_area_by_name(self.db, account_id, data.name):
            raise HTTPException(status_code=400, detail="An area with this name already exists")

        area = ServiceArea(account_id=account_id, name=data.name, color=data.color)
        self.db.add(area)
        self.db.commit()
        self.db.refresh(area)
        logger.info(f"🗺️ Service area '{area.name}' created for account {account_id}")
        return area

    def update_area(self, area_id: int, account_id: int, data: AreaUpdate) -> ServiceArea:
        area = self.get_area(area_id, account_id)

        if data.name is not None and data.name.lower() != area.name.lower():
            if self.repo.get_area_by_name(self.db, account_id, data.name):
                raise HTTPException(status_code=400, detail="An area with this name already exists")
        if data.name is not None:
            area.name = data.name
        if data.color is not None:
            area.color = data.color
        if data.isActive is not None:
            area.is_active = data.isActive

        self.db.commit()
        self.db.refresh(area)
        return area

    def delete_area(self, area_id: int, account_id: int) -> dict:
        area = self.get_area(area_id, account_id)
        unassigned = self.repo.delete_area(self.db, area)
        logger.info(f"🗑️ Service area {area_id} deleted, {unassigned} customers unassigned")
        return {"success": True, "message": "Service area deleted", "customersUnassigned": unassigned}

    def get_assignment_matrix(self, account_id: int) -> AssignmentMatrixResponse:
        """groomer -> weekday -> area, for every active groomer"""
        groomers = self.repo.list_active_groomers(self.db, account_id)
        by_groomer_day = {
            (a.groomer_id, a.day_of_week): a for a in self.repo.list_assignments(self.db, account_id)
        }

        rows = []
        for groomer in groomers:
            days: dict[int, Optional[AreaSummary]] = {}
            for day in range(7):
                assignment = by_groomer_day.get((groomer.id, day))
                days[day] = _summary(assignment.area) if assignment else None
            rows.append(GroomerAssignmentRow(groomerId=groomer.id, groomerName=groomer.name, days=days))

        areas = [_summary(a) for a in self.repo.list_areas(self.db, account_id) if a.is_active]
        return AssignmentMatrixResponse(assignments=rows, areas=areas)

    def set_assignment(self, account_id: int, data: SetAssignmentRequest) -> SetAssignmentResponse:
        """Set or clear the default area for a groomer's weekday"""
        if not self.repo.get_groomer(self.db, data.groomerId, account_id):
            raise HTTPException(status_code=404, detail="Groomer not found")

        existing = self.repo.get_assignment(self.db, data.groomerId, data.dayOfWeek)

        if data.areaId is None:
            if existing:
                self.db.delete(existing)
                self.db.commit()
            return SetAssignmentResponse(message="Assignment removed")

        area = self.get_area(data.areaId, account_id)
        if existing:
            existing.area_id = area.id
        else:
            self.db.add(
                AreaDayAssignment(
                    account_id=account_id,
                    groomer_id=data.groomerId,
                    day_of_week=data.dayOfWeek,
                    area_id=area.id,
                )
            )
        self.db.commit()
        logger.info(
            f"📆 Groomer {data.groomerId} works '{area.name}' on {DAY_NAMES[data.dayOfWeek]}s"
        )
        return SetAssignmentResponse(message="Assignment saved", assignment=_summary(area))

    def list_month_overrides(self, groomer: Groomer, month: str) -> MonthOverridesResponse:
        try:
            year, month_number = parse_month(month)
        except ValueError as e:
            raise HTTPException(
                status_code=400, detail="month parameter is required in YYYY-MM format"
            ) from e

        first = date(year, month_number, 1)
        last = date(year, month_number, calendar.monthrange(year, month_number)[1])
        overrides = self.repo.list_overrides(self.db, groomer.id, first, last)
        by_date = area_matcher.get_groomer_areas_for_date_range(self.db, groomer.id, first, last)
        override_dates = {o.date for o in overrides}
        days = [
            CalendarDay(
                date=value.isoformat(),
                areaId=match.area_id if match else None,
                areaName=match.area_name if match else None,
                areaColor=match.area_color if match else None,
                isOverride=value in override_dates,
            )
            for value, match in by_date.items()
        ]
        return MonthOverridesResponse(
            month=month, overrides=[_override_response(o) for o in overrides], days=days
        )

    def upsert_override(self, groomer: Groomer, data: OverrideRequest) -> OverrideResponse:
        """Work a different area on one date, or take it off (no area)"""
        if data.areaId is not None and not self.repo.get_area(
            self.db, data.areaId, groomer.account_id
        ):
            raise HTTPException(status_code=400, detail="Area not found")

        value = parse_date(data.date)
        override = self.repo.get_override(self.db, groomer.id, value)
        if override is None:
            override = AreaDateOverride(
                account_id=groomer.account_id, groomer_id=groomer.id, date=value
            )
            self.db.add(override)
        override.area_id = data.areaId

        self.db.commit()
        self.db.refresh(override)
        logger.info(f"📆 Override for groomer {groomer.id} on {value}: area {data.areaId}")
        return _override_response(override)

    def delete_override(self, groomer: Groomer, value: date) -> dict:
        override = self.repo.get_override(self.db, groomer.id, value)
        if override:
            self.db.delete(override)
            self.db.commit()
        return {"success": True}

    def get_upcoming_dates(
        self, groomer: Groomer, area_id: int, days: int = area_matcher.DEFAULT_MAX_DAYS_AHEAD
    ) -> UpcomingDatesResponse:
        area = self.get_area(area_id, groomer.account_id)
        upcoming = area_matcher.get_upcoming_area_dates(
            self.db, groomer.id, area.id, utc_today(), days
        )
        default_days = area_matcher.get_groomer_area_days(self.db, groomer.id, area.id)
        return UpcomingDatesResponse(
            areaId=area.id,
            areaName=area.name,
            defaultDays=area_matcher.format_day_names(default_days),
            dates=[
                UpcomingDate(
                    date=item.date.isoformat(),
                    dayOfWeek=item.day_of_week,
                    dayName=DAY_NAMES[item.day_of_week],
                    isOverride=item.is_override,
                )
                for item in upcoming
            ],
        )
