"""Route domain schemas - request and response models for today's route"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import parse_date


class OptimizeRouteRequest(BaseModel):
    date: str
    startLat: Optional[float] = None
    startLng: Optional[float] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        parse_date(v)
        return v

    @field_validator("startLat")
    @classmethod
    def validate_lat(cls, v):
        if v is not None and not -90 <= v <= 90:
            raise ValueError("startLat must be between -90 and 90")
        return v

    @field_validator("startLng")
    @classmethod
    def validate_lng(cls, v):
        if v is not None and not -180 <= v <= 180:
            raise ValueError("startLng must be between -180 and 180")
        return v


class RouteChange(BaseModel):
    id: int
    order: Optional[int] = None
    customerName: str
    petName: str
    customerPhone: Optional[str] = None
    address: Optional[str] = None
    oldStartAt: datetime
    newStartAt: datetime
    timeChanged: bool
    serviceMinutes: Optional[int] = None


class RouteDetails(BaseModel):
    stops: int
    avgMinutesBetweenStops: int
    totalDriveMinutes: int
    formattedDriveTime: str
    efficiency: str
    totalDistanceMiles: float


class OptimizePreviewResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    changes: list[RouteChange] = []
    appointmentsAffected: int = 0
    estimatedFinish: Optional[str] = None
    preferredMessaging: Optional[str] = None
    routeDetails: Optional[RouteDetails] = None


class OptimizedStop(BaseModel):
    id: int
    newStartAt: datetime
    order: int


class OptimizeRouteResponse(BaseModel):
    success: bool
    message: str
    optimizedOrder: list[OptimizedStop] = []
    totalDistance: float = 0.0
    estimatedDriveTime: int = 0


class ReorderRouteRequest(BaseModel):
    date: str
    appointmentIds: list[int]

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        parse_date(v)
        return v


class ReorderRouteResponse(BaseModel):
    success: bool
    message: str
    appointments: list[RouteChange]
    affectedCount: int


class AssistantStatusResponse(BaseModel):
    hasAssistant: bool
    defaultHasAssistant: bool
    hasRouteForToday: bool


class SetAssistantRequest(BaseModel):
    hasAssistant: bool
    setAsDefault: bool = False


class SetAssistantResponse(BaseModel):
    success: bool
    hasAssistant: bool
    message: str


class StartWorkdayResponse(BaseModel):
    success: bool
    workdayStarted: bool
