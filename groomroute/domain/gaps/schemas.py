"""Schedule gap schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class NeighborAppointment(BaseModel):
    id: int
    customerName: str
    startTime: Optional[datetime] = None
    endTime: Optional[datetime] = None


class GapPet(BaseModel):
    id: int
    name: str
    breed: Optional[str] = None


class GapMatch(BaseModel):
    customerId: int
    customerName: str
    customerPhone: Optional[str] = None
    customerEmail: Optional[str] = None
    customerAddress: str
    pets: list[GapPet]
    serviceAreaName: Optional[str] = None
    serviceAreaColor: Optional[str] = None
    preferredDays: list[str]
    preferredTimes: list[str]
    flexibleTiming: bool
    matchScore: int
    matchReasons: list[str]


class GapResponse(BaseModel):
    startTime: datetime
    endTime: datetime
    durationMinutes: int
    previousAppointment: Optional[NeighborAppointment] = None
    nextAppointment: Optional[NeighborAppointment] = None
    startTimeFormatted: str
    endTimeFormatted: str
    startTime24h: str
    endTime24h: str
    suggestedClients: list[GapMatch]


class AreaForDay(BaseModel):
    id: int
    name: str
    color: str


class WorkingHours(BaseModel):
    start: str
    end: str


class GapsResponse(BaseModel):
    date: str
    dayOfWeek: str
    areaForDay: Optional[AreaForDay] = None
    workingHours: WorkingHours
    appointmentCount: int
    gaps: list[GapResponse]
    totalGapMinutes: int
