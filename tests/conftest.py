"""
Pytest configuration and fixtures for the Bottaye backend tests.

Every test gets its own in-memory SQLite database and a frozen clock.
"""
import os
from datetime import datetime, timedelta

# Settings read at import time by the application modules
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models import Base, UserRole
from schemas import PropertyCreate, TenantCreate, UnitCreate, UserCreate
from services.lease_lifecycle import LeaseLifecycle
from services.occupancy import OccupancyCoordinator
from services.store import EntityStore

NOW = datetime(2026, 10, 18, 12, 0, 0)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FrozenClock(NOW)


@pytest.fixture
def store(session, clock):
    return EntityStore(session, clock=clock, read_retries=0, retry_backoff=0)


@pytest.fixture
def lifecycle(clock):
    return LeaseLifecycle(expiring_soon_days=90, clock=clock)


@pytest.fixture
def coordinator(store, lifecycle):
    return OccupancyCoordinator(store, lifecycle)


@pytest.fixture
def make_property(store):
    def _make(name="Sunrise Apartments", **kwargs):
        return store.properties.create(PropertyCreate(name=name, address="12 Ngong Road, Nairobi", **kwargs))
    return _make


@pytest.fixture
def make_unit(store):
    def _make(property_id, unit_number="A1", rent=25000, deposit=50000, **kwargs):
        return store.units.create(UnitCreate(
            property_id=property_id,
            unit_number=unit_number,
            rent=rent,
            deposit=deposit,
            **kwargs,
        ))
    return _make


@pytest.fixture
def make_tenant(coordinator):
    def _make(name="Jane Wanjiku", **kwargs):
        return coordinator.create_tenant(TenantCreate(
            name=name,
            email=f"{name.split()[0].lower()}@example.com",
            phone="+254700000000",
            id_number="12345678",
            **kwargs,
        ))
    return _make


@pytest.fixture
def make_user(store):
    def _make(user_id, role=UserRole.ADMIN, property_ids=(), name=None):
        return store.users.create(UserCreate(
            id=user_id,
            email=f"{user_id}@example.com",
            name=name or user_id.title(),
            role=role,
            property_ids=list(property_ids),
        ))
    return _make


@pytest.fixture
def assert_consistent(store):
    """Check that a unit is occupied exactly when a tenant points at it, and they point at each other."""
    def _check():
        _assert_occupancy_consistent(store)
    return _check


def _assert_occupancy_consistent(store):
    tenants = store.tenants.get_all()
    for unit in store.units.get_all():
        pointing = [t for t in tenants if t.unit_id == unit.id]
        if unit.status.value == "occupied":
            assert len(pointing) == 1, f"unit {unit.unit_number} should have exactly one tenant"
            assert unit.tenant_id == pointing[0].id
        else:
            assert pointing == [], f"unit {unit.unit_number} is {unit.status.value} but has tenants"
            assert unit.tenant_id is None
