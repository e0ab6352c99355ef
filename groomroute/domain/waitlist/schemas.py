"""Waitlist domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

WEEKDAYS = ("SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY")
TIMES_OF_DAY = ("MORNING", "AFTERNOON", "EVENING")
RELIABILITY_TIERS = ("excellent", "good", "fair", "poor")
VALUE_TIERS = ("high", "medium", "low")


class WaitlistCreate(BaseModel):
    customerId: int
    preferredDays: list[str] = []
    preferredTimes: list[str] = []
    flexibleTiming: bool = True
    maxDistance: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("preferredDays")
    @classmethod
    def validate_days(cls, v):
        days = [d.upper() for d in v]
        invalid = [d for d in days if d not in WEEKDAYS]
        if invalid:
            raise ValueError(f"Invalid preferred days: {', '.join(invalid)}")
        return days

    @field_validator("preferredTimes")
    @classmethod
    def validate_times(cls, v):
        times = [t.upper() for t in v]
        invalid = [t for t in times if t not in TIMES_OF_DAY]
        if invalid:
            raise ValueError(f"Invalid preferred times: {', '.join(invalid)}")
        return times

    @field_validator("maxDistance")
    @classmethod
    def validate_max_distance(cls, v):
        if v is not None and v <= 0:
            raise ValueError("maxDistance must be positive")
        return v


class WaitlistEntryResponse(BaseModel):
    id: int
    customerId: int
    customerName: str
    preferredDays: list[str]
    preferredTimes: list[str]
    flexibleTiming: bool
    maxDistance: Optional[float] = None
    notes: Optional[str] = None
    isActive: bool
    createdAt: Optional[datetime] = None


class WaitlistSaveResponse(BaseModel):
    success: bool = True
    entry: WaitlistEntryResponse
    message: str


class PetSummary(BaseModel):
    id: int
    name: str
    breed: Optional[str] = None
    weight: Optional[float] = None


class AreaRef(BaseModel):
    id: int
    name: str
    color: str


class WaitlistSuggestion(BaseModel):
    customerId: int
    customerName: str
    customerPhone: Optional[str] = None
    customerEmail: Optional[str] = None
    customerAddress: str
    pets: list[PetSummary]
    serviceArea: Optional[AreaRef] = None
    preferredDays: list[str]
    preferredTimes: list[str]
    flexibleTiming: bool
    maxDistance: Optional[float] = None
    matchScore: int
    matchReasons: list[str]
    totalRevenue: float
    averageAppointmentValue: float
    appointmentCount: int
    lastAppointmentDate: Optional[str] = None
    daysSinceLastAppointment: Optional[int] = None
    completionRate: int
    cancellationCount: int
    noShowCount: int
    reliabilityTier: str
    distanceToRoute: Optional[float] = None
    isInTodaysArea: bool
    valueTier: str


class SuggestFilters(BaseModel):
    limit: int
    minReliability: Optional[str] = None
    valueTier: Optional[list[str]] = None
    maxDistance: Optional[float] = None


class SuggestMeta(BaseModel):
    totalWaitlistCount: int
    suggestionsReturned: int
    todaysAppointmentCount: int
    filters: SuggestFilters


class SuggestResponse(BaseModel):
    date: str
    dayOfWeek: str
    suggestions: list[WaitlistSuggestion]
    meta: SuggestMeta
