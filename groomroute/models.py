from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Appointment lifecycle: BOOKED → CONFIRMED → IN_PROGRESS → COMPLETED
# CANCELLED and NO_SHOW are terminal and free the slot
APPOINTMENT_STATUSES = ("BOOKED", "CONFIRMED", "IN_PROGRESS", "COMPLETED", "CANCELLED", "NO_SHOW")
# Statuses that do not occupy time on the schedule
NON_BLOCKING_STATUSES = ("CANCELLED", "NO_SHOW")
# Statuses excluded from today's route (nothing left to drive to)
CLOSED_STATUSES = ("CANCELLED", "NO_SHOW", "COMPLETED")


class Account(Base):
    """A grooming business (tenant)"""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    timezone = Column(String(64), default="America/New_York", nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    users = relationship("User", back_populates="account")
    groomers = relationship("Groomer", back_populates="account")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    full_name = Column(String(255), nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    # Groomer this login drives for; resolved lazily from email when empty
    groomer_id = Column(Integer, ForeignKey("groomers.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    account = relationship("Account", back_populates="users")
    groomer = relationship("Groomer")


class Groomer(Base):
    __tablename__ = "groomers"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    working_hours_start = Column(String(5), nullable=True)  # HH:MM
    working_hours_end = Column(String(5), nullable=True)  # HH:MM
    default_has_assistant = Column(Boolean, default=False, nullable=False)
    preferred_messaging = Column(String(20), default="SMS", nullable=False)  # SMS, WHATSAPP, CALL
    base_address = Column(Text, nullable=True)
    base_lat = Column(Float, nullable=True)
    base_lng = Column(Float, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    account = relationship("Account", back_populates="groomers")


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=False)
    # Null until geocoded; customers without coordinates are left out of routing
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    service_area_id = Column(Integer, ForeignKey("service_areas.id"), nullable=True)
    cancellation_count = Column(Integer, default=0, nullable=False)
    no_show_count = Column(Integer, default=0, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    pets = relationship("Pet", back_populates="customer", cascade="all, delete-orphan")
    service_area = relationship("ServiceArea")
    appointments = relationship("Appointment", back_populates="customer")


class Pet(Base):
    __tablename__ = "pets"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    species = Column(String(20), default="dog", nullable=False)
    breed = Column(String(255), nullable=True)
    weight = Column(Float, nullable=True)  # lbs

    customer = relationship("Customer", back_populates="pets")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    groomer_id = Column(Integer, ForeignKey("groomers.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    pet_id = Column(Integer, ForeignKey("pets.id"), nullable=True)
    start_at = Column(DateTime, nullable=False, index=True)  # naive UTC
    service_minutes = Column(Integer, default=60, nullable=False)
    status = Column(String(20), default="BOOKED", nullable=False, index=True)
    price = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="appointments")
    pet = relationship("Pet")
    groomer = relationship("Groomer")


class CustomerWaitlist(Base):
    """A customer waiting for an earlier or extra slot"""

    __tablename__ = "customer_waitlist"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, unique=True)
    preferred_days = Column(JSON, default=list, nullable=False)  # ["MONDAY", ...]
    preferred_times = Column(JSON, default=list, nullable=False)  # ["MORNING", ...]
    flexible_timing = Column(Boolean, default=False, nullable=False)
    max_distance = Column(Float, nullable=True)  # miles
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    customer = relationship("Customer")
