"""Groomer settings router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_groomer
from ...database import get_db
from ...models import Groomer
from .schemas import GroomerSettingsResponse, GroomerSettingsUpdate
from .service import GroomerSettingsService, to_settings_response

router = APIRouter(prefix="/groomer", tags=["Groomer"])


def get_settings_service(db: Session = Depends(get_db)) -> GroomerSettingsService:
    """Dependency injection for GroomerSettingsService"""
    return GroomerSettingsService(db)


@router.get("/settings", response_model=GroomerSettingsResponse)
async def get_groomer_settings(groomer: Groomer = Depends(get_current_groomer)):
    return to_settings_response(groomer)


@router.patch("/settings", response_model=GroomerSettingsResponse)
async def update_groomer_settings(
    data: GroomerSettingsUpdate,
    groomer: Groomer = Depends(get_current_groomer),
    service: GroomerSettingsService = Depends(get_settings_service),
):
    """Working hours drive conflict checks and gaps; the base location is the start of empty days"""
    return await service.update_settings(groomer, data)
