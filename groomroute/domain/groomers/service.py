"""Groomer settings service - working hours, assistant default, messaging and base location"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Groomer
from ...services.geocoding_service import try_geocode
from .schemas import GroomerSettingsResponse, GroomerSettingsUpdate

logger = logging.getLogger(__name__)


def to_settings_response(groomer: Groomer) -> GroomerSettingsResponse:
    return GroomerSettingsResponse(
        id=groomer.id,
        name=groomer.name,
        workingHoursStart=groomer.working_hours_start,
        workingHoursEnd=groomer.working_hours_end,
        defaultHasAssistant=bool(groomer.default_has_assistant),
        preferredMessaging=groomer.preferred_messaging or "SMS",
        baseAddress=groomer.base_address,
        baseLat=groomer.base_lat,
        baseLng=groomer.base_lng,
    )


class GroomerSettingsService:
    """Service layer for the signed-in groomer's settings"""

    def __init__(self, db: Session):
        self.db = db

    async def update_settings(
        self, groomer: Groomer, data: GroomerSettingsUpdate
    ) -> GroomerSettingsResponse:
        changes = data.model_dump(exclude_unset=True)

        start = changes.get("workingHoursStart", groomer.working_hours_start)
        end = changes.get("workingHoursEnd", groomer.working_hours_end)
        # zero-padded HH:MM strings compare in clock order
        if start and end and start >= end:
            raise HTTPException(
                status_code=400, detail="workingHoursStart must be before workingHoursEnd"
            )
        if "workingHoursStart" in changes:
            groomer.working_hours_start = start
        if "workingHoursEnd" in changes:
            groomer.working_hours_end = end

        if changes.get("defaultHasAssistant") is not None:
            groomer.default_has_assistant = changes["defaultHasAssistant"]
        if changes.get("preferredMessaging") is not None:
            groomer.preferred_messaging = changes["preferredMessaging"]

        if "baseAddress" in changes:
            address = (changes["baseAddress"] or "").strip()
            if not address:
                groomer.base_address = None
                groomer.base_lat = groomer.base_lng = None
            elif address != groomer.base_address:
                result = await try_geocode(address)
                if result is None:
                    raise HTTPException(status_code=400, detail="Base address could not be found")
                groomer.base_address = address
                groomer.base_lat, groomer.base_lng = result.lat, result.lng

        self.db.commit()
        self.db.refresh(groomer)
        logger.info(f"⚙️ Settings updated for groomer {groomer.id}: {sorted(changes)}")
        return to_settings_response(groomer)
