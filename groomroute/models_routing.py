"""
Route and Service Area Models
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Route(Base):
    """One working day for one groomer"""

    __tablename__ = "routes"
    __table_args__ = (UniqueConstraint("groomer_id", "route_date", name="uq_route_groomer_date"),)

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    groomer_id = Column(Integer, ForeignKey("groomers.id"), nullable=False)
    route_date = Column(Date, nullable=False)

    # Status workflow: DRAFT → PUBLISHED → COMPLETED
    status = Column(String(20), default="DRAFT", nullable=False)
    provider = Column(String(20), default="LOCAL", nullable=False)
    total_distance_meters = Column(Integer, nullable=True)
    total_drive_minutes = Column(Integer, nullable=True)

    has_assistant = Column(Boolean, default=False, nullable=False)
    workday_started = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    groomer = relationship("Groomer")


class ServiceArea(Base):
    """Named colour grouping of customers, e.g. "North Side" """

    __tablename__ = "service_areas"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    color = Column(String(7), default="#3B82F6", nullable=False)  # #RRGGBB
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class AreaDayAssignment(Base):
    """Default weekly pattern: groomer works one area on a weekday"""

    __tablename__ = "area_day_assignments"
    __table_args__ = (
        UniqueConstraint("groomer_id", "day_of_week", name="uq_area_assignment_groomer_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    groomer_id = Column(Integer, ForeignKey("groomers.id"), nullable=False)
    area_id = Column(Integer, ForeignKey("service_areas.id"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday ... 6=Saturday

    area = relationship("ServiceArea")


class AreaDateOverride(Base):
    """Replaces the weekly pattern on one date; no area means a day off"""

    __tablename__ = "area_date_overrides"
    __table_args__ = (UniqueConstraint("groomer_id", "date", name="uq_area_override_groomer_date"),)

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    groomer_id = Column(Integer, ForeignKey("groomers.id"), nullable=False)
    date = Column(Date, nullable=False)
    area_id = Column(Integer, ForeignKey("service_areas.id"), nullable=True)

    area = relationship("ServiceArea")
