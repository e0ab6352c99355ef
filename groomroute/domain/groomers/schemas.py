"""Groomer settings schemas"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_time

MESSAGING_CHANNELS = ("SMS", "WHATSAPP", "CALL")


class GroomerSettingsResponse(BaseModel):
    id: int
    name: str
    workingHoursStart: Optional[str] = None
    workingHoursEnd: Optional[str] = None
    defaultHasAssistant: bool
    preferredMessaging: str
    baseAddress: Optional[str] = None
    baseLat: Optional[float] = None
    baseLng: Optional[float] = None


class GroomerSettingsUpdate(BaseModel):
    """Fields left out are unchanged; null working hours fall back to the defaults"""

    workingHoursStart: Optional[str] = None
    workingHoursEnd: Optional[str] = None
    defaultHasAssistant: Optional[bool] = None
    preferredMessaging: Optional[str] = None
    baseAddress: Optional[str] = None

    @field_validator("workingHoursStart", "workingHoursEnd")
    @classmethod
    def validate_hours(cls, v):
        if v is not None:
            return validate_time(v)
        return v

    @field_validator("preferredMessaging")
    @classmethod
    def validate_messaging(cls, v):
        if v is None:
            return v
        if v.upper() not in MESSAGING_CHANNELS:
            raise ValueError(f"preferredMessaging must be one of {', '.join(MESSAGING_CHANNELS)}")
        return v.upper()
