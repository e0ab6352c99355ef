"""Service area router - areas, weekday assignments and date overrides"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_groomer, get_current_user
from ...database import get_db
from ...models import Groomer, User
from ...shared.validators import require_date
from .area_matcher import DEFAULT_MAX_DAYS_AHEAD
from .schemas import (
    AreaCreate,
    AreaResponse,
    AreaUpdate,
    AssignmentMatrixResponse,
    MonthOverridesResponse,
    OverrideRequest,
    OverrideResponse,
    SetAssignmentRequest,
    SetAssignmentResponse,
    UpcomingDatesResponse,
)
from .service import AreaService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Service Areas"])


def get_area_service(db: Session = Depends(get_db)) -> AreaService:
    """Dependency injection for AreaService"""
    return AreaService(db)


def _to_response(area) -> AreaResponse:
    return AreaResponse(
        id=area.id, name=area.name, color=area.color, isActive=area.is_active, createdAt=area.created_at
    )


# ============================================================================
# AREAS
# ============================================================================


@router.get("/areas", response_model=list[AreaResponse])
async def list_areas(
    current_user: User = Depends(get_current_user),
    service: AreaService = Depends(get_area_service),
):
    return service.list_areas(current_user.account_id)


@router.post("/areas", response_model=AreaResponse)
async def create_area(
    data: AreaCreate,
    current_user: User = Depends(get_current_user),
    service: AreaService = Depends(get_area_service),
):
    return _to_response(service.create_area(current_user.account_id, data))


@router.patch("/areas/{area_id}", response_model=AreaResponse)
async def update_area(
    area_id: int,
    data: AreaUpdate,
    current_user: User = Depends(get_current_user),
    service: AreaService = Depends(get_area_service),
):
    return _to_response(service.update_area(area_id, current_user.account_id, data))


@router.delete("/areas/{area_id}")
async def delete_area(
    area_id: int,
    current_user: User = Depends(get_current_user),
    service: AreaService = Depends(get_area_service),
):
    """Delete an area; its customers become unassigned"""
    return service.delete_area(area_id, current_user.account_id)


@router.get("/areas/{area_id}/upcoming-dates", response_model=UpcomingDatesResponse)
async def upcoming_area_dates(
    area_id: int,
    days: int = Query(DEFAULT_MAX_DAYS_AHEAD, ge=1, le=90),
    groomer: Groomer = Depends(get_current_groomer),
    service: AreaService = Depends(get_area_service),
):
    """Dates in the coming window when the groomer works this area"""
    return service.get_upcoming_dates(groomer, area_id, days)


# ============================================================================
# WEEKDAY ASSIGNMENTS
# ============================================================================


@router.get("/area-assignments", response_model=AssignmentMatrixResponse)
async def get_area_assignments(
    current_user: User = Depends(get_current_user),
    service: AreaService = Depends(get_area_service),
):
    return service.get_assignment_matrix(current_user.account_id)


@router.post("/area-assignments", response_model=SetAssignmentResponse)
async def set_area_assignment(
    data: SetAssignmentRequest,
    current_user: User = Depends(get_current_user),
    service: AreaService = Depends(get_area_service),
):
    """Set (areaId) or remove (areaId null) a groomer's area for a weekday"""
    return service.set_assignment(current_user.account_id, data)


# ============================================================================
# DATE OVERRIDES
# ============================================================================


@router.get("/area-date-overrides", response_model=MonthOverridesResponse)
async def list_area_date_overrides(
    month: str = Query("", description="YYYY-MM"),
    groomer: Groomer = Depends(get_current_groomer),
    service: AreaService = Depends(get_area_service),
):
    return service.list_month_overrides(groomer, month)


@router.post("/area-date-overrides", response_model=OverrideResponse)
async def upsert_area_date_override(
    data: OverrideRequest,
    groomer: Groomer = Depends(get_current_groomer),
    service: AreaService = Depends(get_area_service),
):
    return service.upsert_override(groomer, data)


@router.delete("/area-date-overrides")
async def delete_area_date_override(
    date: str = Query(..., description="YYYY-MM-DD"),
    groomer: Groomer = Depends(get_current_groomer),
    service: AreaService = Depends(get_area_service),
):
    return service.delete_override(groomer, require_date(date))
