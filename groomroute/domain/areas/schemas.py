"""Service area domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import parse_date, validate_hex_color


class AreaCreate(BaseModel):
    name: str
    color: str = "#3B82F6"

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if len(v) > 100:
            raise ValueError("Name must be at most 100 characters")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return validate_hex_color(v)


class AreaUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None
    isActive: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v or len(v) > 100:
            raise ValueError("Name must be 1-100 characters")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        if v is None:
            return v
        return validate_hex_color(v)


class AssignedDay(BaseModel):
    dayOfWeek: int
    groomerId: int
    groomerName: str


class AreaResponse(BaseModel):
    id: int
    name: str
    color: str
    isActive: bool
    customerCount: int = 0
    assignedDays: list[AssignedDay] = []
    createdAt: Optional[datetime] = None


class AreaSummary(BaseModel):
    areaId: int
    areaName: str
    areaColor: str


class GroomerAssignmentRow(BaseModel):
    groomerId: int
    groomerName: str
    days: dict[int, Optional[AreaSummary]]


class AssignmentMatrixResponse(BaseModel):
    success: bool = True
    assignments: list[GroomerAssignmentRow]
    areas: list[AreaSummary]


class SetAssignmentRequest(BaseModel):
    groomerId: int
    dayOfWeek: int
    areaId: Optional[int] = None  # None removes the assignment

    @field_validator("dayOfWeek")
    @classmethod
    def validate_day(cls, v):
        if not 0 <= v <= 6:
            raise ValueError("dayOfWeek must be between 0 (Sunday) and 6 (Saturday)")
        return v


class SetAssignmentResponse(BaseModel):
    success: bool = True
    message: str
    assignment: Optional[AreaSummary] = None


class OverrideRequest(BaseModel):
    date: str
    areaId: Optional[int] = None  # None marks a day off

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        parse_date(v)
        return v


class OverrideResponse(BaseModel):
    id: int
    date: str
    areaId: Optional[int] = None
    areaName: Optional[str] = None
    areaColor: Optional[str] = None


class CalendarDay(BaseModel):
    date: str
    areaId: Optional[int] = None
    areaName: Optional[str] = None
    areaColor: Optional[str] = None
    isOverride: bool = False


class MonthOverridesResponse(BaseModel):
    month: str
    overrides: list[OverrideResponse]
    # Effective area for every day of the month
    days: list[CalendarDay] = []


class UpcomingDate(BaseModel):
    date: str
    dayOfWeek: int
    dayName: str
    isOverride: bool


class UpcomingDatesResponse(BaseModel):
    areaId: int
    areaName: str
    defaultDays: str
    dates: list[UpcomingDate]
