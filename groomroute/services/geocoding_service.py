"""
Nominatim (OpenStreetMap) geocoding.

Turns a customer's street address into coordinates so the customer can be
placed on a route. No API key, only an identifying User-Agent.
"""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from ..cache import cache
from ..config import GEOCODE_CACHE_SECONDS, NOMINATIM_BASE_URL, NOMINATIM_USER_AGENT

logger = logging.getLogger(__name__)


class GeocodeResult(BaseModel):
    lat: float
    lng: float
    display_name: Optional[str] = None


class GeocodingError(Exception):
    """Upstream geocoder failed (network error or HTTP error status)"""


def _cache_key(address: str) -> str:
    return f"geocode:{' '.join(address.lower().split())}"


async def geocode_address(
    address: str, client: Optional[httpx.AsyncClient] = None
) -> Optional[GeocodeResult]:
    """
    Look up an address. Returns None when Nominatim has no match and raises
    GeocodingError when the lookup itself fails.
    """
    address = (address or "").strip()
    if len(address) < 3:
        return None

    cache_key = _cache_key(address)
    cached = cache.get(cache_key)
    if cached is not None:
        return GeocodeResult(**cached) if cached else None

    params = {"q": address, "format": "json", "limit": "1"}
    headers = {"User-Agent": NOMINATIM_USER_AGENT}
    url = f"{NOMINATIM_BASE_URL}/search"

    try:
        if client is None:
            async with httpx.AsyncClient() as own_client:
                resp = await own_client.get(url, params=params, headers=headers, timeout=10.0)
        else:
            resp = await client.get(url, params=params, headers=headers, timeout=10.0)
    except httpx.HTTPError as e:
        logger.error(f"❌ Nominatim request failed for '{address}': {e}")
        raise GeocodingError("Address lookup service unavailable") from e

    if resp.status_code >= 400:
        logger.warning(f"⚠️ Nominatim API error {resp.status_code}: {resp.text[:200]}")
        raise GeocodingError("Address lookup service temporarily unavailable")

    results = resp.json()
    if not results:
        logger.info(f"📍 No geocode match for '{address}'")
        # Empty dict marks a cached miss
        cache.set(cache_key, {}, ttl=GEOCODE_CACHE_SECONDS)
        return None

    first = results[0]
    result = GeocodeResult(
        lat=float(first["lat"]),
        lng=float(first["lon"]),
        display_name=first.get("display_name"),
    )
    cache.set(cache_key, result.model_dump(), ttl=GEOCODE_CACHE_SECONDS)
    logger.info(f"📍 Geocoded '{address}' -> ({result.lat}, {result.lng})")
    return result


async def try_geocode(address: str) -> Optional[GeocodeResult]:
    """Best-effort lookup for record saves: a failing geocoder leaves coordinates empty"""
    try:
        return await geocode_address(address)
    except GeocodingError as e:
        logger.warning(f"⚠️ Geocoding skipped for '{address}': {e}")
        return None
