"""Customer domain schemas - customers and their pets"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_us_phone

SPECIES = ("dog", "cat", "other")


def _check_lat(v):
    if v is not None and not -90 <= v <= 90:
        raise ValueError("lat must be between -90 and 90")
    return v


def _check_lng(v):
    if v is not None and not -180 <= v <= 180:
        raise ValueError("lng must be between -180 and 180")
    return v


class PetCreate(BaseModel):
    name: str
    species: str = "dog"
    breed: Optional[str] = None
    weight: Optional[float] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Pet name is required")
        return v.strip()

    @field_validator("species")
    @classmethod
    def validate_species(cls, v):
        v = v.lower()
        if v not in SPECIES:
            raise ValueError(f"species must be one of {', '.join(SPECIES)}")
        return v


class PetUpdate(BaseModel):
    name: Optional[str] = None
    species: Optional[str] = None
    breed: Optional[str] = None
    weight: Optional[float] = None

    @field_validator("species")
    @classmethod
    def validate_species(cls, v):
        if v is not None and v.lower() not in SPECIES:
            raise ValueError(f"species must be one of {', '.join(SPECIES)}")
        return v.lower() if v else v


class PetResponse(BaseModel):
    id: int
    name: str
    species: str
    breed: Optional[str] = None
    weight: Optional[float] = None

    class Config:
        from_attributes = True


class CustomerCreate(BaseModel):
    """Coordinates are optional; without them the address is geocoded"""

    name: str
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    notes: Optional[str] = None
    pets: list[PetCreate] = []

    @field_validator("name", "address")
    @classmethod
    def validate_required(cls, v):
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_us_phone(v)
        return v

    @field_validator("lat")
    @classmethod
    def validate_lat(cls, v):
        return _check_lat(v)

    @field_validator("lng")
    @classmethod
    def validate_lng(cls, v):
        return _check_lng(v)


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_us_phone(v)
        return v

    @field_validator("lat")
    @classmethod
    def validate_lat(cls, v):
        return _check_lat(v)

    @field_validator("lng")
    @classmethod
    def validate_lng(cls, v):
        return _check_lng(v)


class CustomerResponse(BaseModel):
    id: int
    name: str
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    geocoded: bool
    serviceAreaId: Optional[int] = None
    cancellationCount: int
    noShowCount: int
    notes: Optional[str] = None
    pets: list[PetResponse] = []
    createdAt: Optional[datetime] = None


class AssignAreaRequest(BaseModel):
    areaId: Optional[int] = None  # None clears the assignment
