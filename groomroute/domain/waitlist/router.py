"""Waitlist router - FastAPI endpoints for the customer waitlist"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_groomer, get_current_user
from ...database import get_db
from ...models import Groomer, User
from .schemas import SuggestResponse, WaitlistCreate, WaitlistEntryResponse, WaitlistSaveResponse
from .service import WaitlistService, to_entry_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/waitlist", tags=["Waitlist"])


def get_waitlist_service(db: Session = Depends(get_db)) -> WaitlistService:
    """Dependency injection for WaitlistService"""
    return WaitlistService(db)


@router.get("/suggest", response_model=SuggestResponse)
async def suggest_waitlist_customers(
    date: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to today"),
    limit: int = Query(10, ge=1, le=100),
    minReliability: Optional[str] = Query(None),
    valueTier: Optional[str] = Query(None, description="Comma separated: high,medium,low"),
    maxDistance: Optional[float] = Query(None, gt=0),
    groomer: Groomer = Depends(get_current_groomer),
    service: WaitlistService = Depends(get_waitlist_service),
):
    """Rank waitlisted customers for a date"""
    return service.suggest(groomer, date, limit, minReliability, valueTier, maxDistance)


@router.get("", response_model=list[WaitlistEntryResponse])
async def list_waitlist(
    current_user: User = Depends(get_current_user),
    service: WaitlistService = Depends(get_waitlist_service),
):
    return [to_entry_response(e) for e in service.list_entries(current_user.account_id)]


@router.post("", response_model=WaitlistSaveResponse)
async def add_to_waitlist(
    data: WaitlistCreate,
    current_user: User = Depends(get_current_user),
    service: WaitlistService = Depends(get_waitlist_service),
):
    return service.save_entry(current_user.account_id, data)


@router.delete("")
async def remove_from_waitlist(
    id: Optional[int] = Query(None),
    customerId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: WaitlistService = Depends(get_waitlist_service),
):
    return service.remove_entry(current_user.account_id, id, customerId)
