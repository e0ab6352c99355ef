import os
from datetime import datetime, time

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from groomroute import rate_limiter
from groomroute.auth import get_current_user
from groomroute.database import Base, get_db
from groomroute.main import app
from groomroute.models import Account, Appointment, Customer, Groomer, Pet, User
from groomroute.shared.dates import utc_today


class FakeRedis:
    """Dict-backed stand-in for the few redis.Redis calls the app makes"""

    def __init__(self):
        self.store = {}

    def ping(self):
        return True

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, ex=None):
        self.store[key] = str(value)
        return True

    def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    def ttl(self, key):
        return 60 if key in self.store else -2

    def delete(self, key):
        self.store.pop(key, None)
        return 1


@pytest.fixture(autouse=True)
def no_redis(monkeypatch):
    monkeypatch.setattr(rate_limiter, "redis_client", None)
    monkeypatch.setattr(rate_limiter, "_redis_unavailable_until", float("inf"))
    monkeypatch.setattr(rate_limiter, "last_cleanup_time", 0)
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


@pytest.fixture
def fake_redis(monkeypatch):
    client = FakeRedis()
    monkeypatch.setattr(rate_limiter, "redis_client", client)
    return client


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def account(db):
    account = Account(name="Suds & Paws")
    db.add(account)
    db.commit()
    return account


@pytest.fixture
def groomer(db, account):
    groomer = Groomer(
        account_id=account.id,
        name="Jamie",
        email="jamie@example.com",
        working_hours_start="08:00",
        working_hours_end="17:00",
    )
    db.add(groomer)
    db.commit()
    return groomer


@pytest.fixture
def user(db, account, groomer):
    user = User(
        firebase_uid="uid-jamie",
        email="jamie@example.com",
        account_id=account.id,
        groomer_id=groomer.id,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def client(db, user):
    def override_get_db():
        yield db

    def override_get_current_user():
        return user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_customer(db, account):
    def _make(name, lat=None, lng=None, pet="Biscuit", **fields):
        customer = Customer(
            account_id=account.id,
            name=name,
            address=fields.pop("address", f"{name} Street"),
            phone=fields.pop("phone", "5555550100"),
            lat=lat,
            lng=lng,
            **fields,
        )
        customer.pets = [Pet(name=pet)]
        db.add(customer)
        db.commit()
        return customer

    return _make


@pytest.fixture
def make_appointment(db, account, groomer):
    def _make(customer, hour, minute=0, day=None, minutes=60, status="BOOKED", price=None):
        appointment = Appointment(
            account_id=account.id,
            groomer_id=groomer.id,
            customer_id=customer.id,
            pet_id=customer.pets[0].id if customer.pets else None,
            start_at=datetime.combine(day or utc_today(), time(hour, minute)),
            service_minutes=minutes,
            status=status,
            price=price,
        )
        db.add(appointment)
        db.commit()
        return appointment

    return _make
