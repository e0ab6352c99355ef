"""Route router - FastAPI endpoints for today's route"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_groomer
from ...database import get_db
from ...models import Groomer
from .schemas import (
    AssistantStatusResponse,
    OptimizePreviewResponse,
    OptimizeRouteRequest,
    OptimizeRouteResponse,
    ReorderRouteRequest,
    ReorderRouteResponse,
    SetAssistantRequest,
    SetAssistantResponse,
    StartWorkdayResponse,
)
from .service import RouteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["Routes"])


def get_route_service(db: Session = Depends(get_db)) -> RouteService:
    """Dependency injection for RouteService"""
    return RouteService(db)


@router.post("/optimize-preview", response_model=OptimizePreviewResponse)
async def optimize_preview(
    data: OptimizeRouteRequest,
    groomer: Groomer = Depends(get_current_groomer),
    service: RouteService = Depends(get_route_service),
):
    """Preview the optimized order and times for today without saving"""
    return service.preview_optimization(groomer, data)


@router.post("/optimize", response_model=OptimizeRouteResponse)
async def optimize(
    data: OptimizeRouteRequest,
    groomer: Groomer = Depends(get_current_groomer),
    service: RouteService = Depends(get_route_service),
):
    return service.apply_optimization(groomer, data)


@router.post("/reorder", response_model=ReorderRouteResponse)
async def reorder(
    data: ReorderRouteRequest,
    groomer: Groomer = Depends(get_current_groomer),
    service: RouteService = Depends(get_route_service),
):
    """Swap appointments into today's existing time slots in a new order"""
    return service.reorder(groomer, data)


@router.get("/assistant", response_model=AssistantStatusResponse)
async def get_assistant(
    groomer: Groomer = Depends(get_current_groomer),
    service: RouteService = Depends(get_route_service),
):
    return service.get_assistant_status(groomer)


@router.post("/assistant", response_model=SetAssistantResponse)
async def set_assistant(
    data: SetAssistantRequest,
    groomer: Groomer = Depends(get_current_groomer),
    service: RouteService = Depends(get_route_service),
):
    return service.set_assistant_status(groomer, data)


@router.post("/start-workday", response_model=StartWorkdayResponse)
async def start_workday(
    groomer: Groomer = Depends(get_current_groomer),
    service: RouteService = Depends(get_route_service),
):
    return service.start_workday(groomer)
