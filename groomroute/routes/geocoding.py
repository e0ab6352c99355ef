"""
Address geocoding endpoint.

Lets the frontend check an address before saving a customer. Results are
cached and the endpoint is rate limited per IP.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..config import GEOCODE_RPM
from ..rate_limiter import create_rate_limiter
from ..services.geocoding_service import GeocodingError, geocode_address

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/geocode", tags=["Geocoding"])

rate_limit_geocode = create_rate_limiter(
    limit=GEOCODE_RPM,
    window_seconds=60,
    key_prefix="geocode",
    use_ip=True,
)


class GeocodeResponse(BaseModel):
    success: bool
    lat: Optional[float] = None
    lng: Optional[float] = None
    formattedAddress: Optional[str] = None
    error: Optional[str] = None


@router.get("", response_model=GeocodeResponse)
async def geocode(
    address: str = Query(""),
    _: None = Depends(rate_limit_geocode),
):
    if not address.strip():
        raise HTTPException(status_code=400, detail="Address is required")

    try:
        result = await geocode_address(address)
    except GeocodingError as e:
        logger.error(f"❌ Geocoding failed for '{address}': {e}")
        raise HTTPException(status_code=502, detail="Geocoding service unavailable") from e

    if result is None:
        return GeocodeResponse(success=False, error="Address not found")

    return GeocodeResponse(
        success=True,
        lat=result.lat,
        lng=result.lng,
        formattedAddress=result.display_name,
    )
