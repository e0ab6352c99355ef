"""Gap router - free time in the schedule"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_groomer
from ...database import get_db
from ...models import Groomer
from .gap_finder import DEFAULT_MIN_GAP_MINUTES
from .schemas import GapsResponse
from .service import GapService

router = APIRouter(prefix="/gaps", tags=["Gaps"])


def get_gap_service(db: Session = Depends(get_db)) -> GapService:
    return GapService(db)


@router.get("", response_model=GapsResponse)
async def get_gaps(
    date: str = Query(..., description="YYYY-MM-DD"),
    minGap: int = Query(DEFAULT_MIN_GAP_MINUTES),
    groomer: Groomer = Depends(get_current_groomer),
    service: GapService = Depends(get_gap_service),
):
    """Gaps in the day with the best waitlist matches for each"""
    return service.find_day_gaps(groomer, date, minGap)
