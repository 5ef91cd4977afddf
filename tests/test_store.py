"""
Tests for the entity store: timestamps, partial updates, reference integrity,
cached display names, delete rules and the local cache tier.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from conftest import NOW
from models import PaymentStatus, UnitStatus, UserRole
from schemas import (
    ActivityCreate,
    LeaseCreate,
    LeaseUpdate,
    MaintenanceCreate,
    PaymentCreate,
    PropertyUpdate,
    TenantCreate,
    UnitCreate,
)
from services.exceptions import (
    IntegrityViolationError,
    NotFoundError,
    PreconditionFailedError,
    TransientStoreError,
)
from services.local_cache import LocalCache
from services.store import EntityStore


def _outage(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("database is down"))


@pytest.fixture
def occupied(make_property, make_unit, make_tenant):
    """A property with one unit occupied by one tenant: (property_id, unit_id, tenant_id)."""
    property_id = make_property()
    unit_id = make_unit(property_id)
    tenant_id = make_tenant(unit_id=unit_id)
    return property_id, unit_id, tenant_id


class TestTimestamps:

    def test_create_stamps_both_timestamps(self, store, make_property):
        prop = store.properties.require(make_property())
        assert prop.created_at == NOW
        assert prop.updated_at == NOW

    def test_update_strictly_increases_updated_at_and_keeps_created_at(self, store, make_property):
        property_id = make_property()
        store.properties.update(property_id, PropertyUpdate(name="Renamed"))
        first = store.properties.require(property_id)
        store.properties.update(property_id, PropertyUpdate(name="Renamed again"))
        second = store.properties.require(property_id)

        assert first.created_at == NOW
        assert second.created_at == NOW
        assert first.updated_at > NOW
        assert second.updated_at > first.updated_at

    def test_update_uses_the_clock_when_it_has_moved(self, store, clock, make_property):
        property_id = make_property()
        clock.advance(hours=1)
        store.properties.update(property_id, {"name": "Later"})
        assert store.properties.require(property_id).updated_at == NOW + timedelta(hours=1)


class TestReadsAndUpdates:

    def test_lease_update_rejects_clearing_required_terms(self):
        with pytest.raises(ValidationError, match="cannot be null"):
            LeaseUpdate(renewal_option=None, monthly_rent=None)
        assert LeaseUpdate(parking_spaces=None).model_dump(exclude_unset=True) == {"parking_spaces": None}

    def test_update_is_a_partial_merge(self, store, make_property):
        property_id = make_property(description="Near the mall")
        store.properties.update(property_id, {"name": "Sunset Court"})

        prop = store.properties.require(property_id)
        assert prop.name == "Sunset Court"
        assert prop.address == "12 Ngong Road, Nairobi"
        assert prop.description == "Near the mall"

    def test_unknown_fields_are_rejected(self, store, make_property):
        property_id = make_property()
        with pytest.raises(ValidationError):
            store.properties.update(property_id, {"owner": "someone"})

    def test_occupancy_fields_are_not_updatable(self, store, make_property, make_unit):
        unit_id = make_unit(make_property())
        with pytest.raises(ValidationError):
            store.units.update(unit_id, {"status": "occupied"})

    def test_missing_records(self, store):
        assert store.properties.get_by_id("nope") is None
        with pytest.raises(NotFoundError):
            store.properties.require("nope")
        with pytest.raises(NotFoundError):
            store.properties.update("nope", {"name": "x"})
        with pytest.raises(NotFoundError):
            store.properties.delete("nope")

    def test_get_by_property_ids(self, store, make_property, make_unit):
        p1 = make_property("One")
        p2 = make_property("Two")
        make_unit(p1, "A1")
        make_unit(p2, "B1")

        assert store.units.get_by_property_ids([]) == []
        assert [u.unit_number for u in store.units.get_by_property_ids([p1])] == ["A1"]
        assert len(store.units.get_by_property_ids([p1, p2])) == 2
        # Properties are looked up by their own id
        assert [p.id for p in store.properties.get_by_property_ids([p2])] == [p2]

    def test_units_are_ordered_by_property_then_number(self, store, make_property, make_unit):
        property_id = make_property()
        make_unit(property_id, "B2")
        make_unit(property_id, "A1")
        assert [u.unit_number for u in store.units.get_all()] == ["A1", "B2"]

    def test_available_units(self, store, make_property, make_unit, make_tenant):
        property_id = make_property()
        taken = make_unit(property_id, "A1")
        make_unit(property_id, "A2")
        make_tenant(unit_id=taken)
        assert [u.unit_number for u in store.units.get_available_units()] == ["A2"]

    def test_properties_by_manager(self, store, make_property):
        make_property("Managed", manager_id="m-1")
        make_property("Other")
        assert [p.name for p in store.properties.get_by_manager_id("m-1")] == ["Managed"]


class TestReferences:

    def test_missing_reference_fails_the_write(self, store):
        with pytest.raises(IntegrityViolationError):
            store.units.create(UnitCreate(property_id="missing", unit_number="A1", rent=100))
        assert store.units.get_all() == []

    def test_cached_names_are_filled_and_follow_renames(self, store, make_property, occupied):
        property_id, unit_id, tenant_id = occupied
        assert store.units.require(unit_id).property_name == "Sunrise Apartments"
        assert store.units.require(unit_id).tenant_name == "Jane Wanjiku"

        store.properties.update(property_id, PropertyUpdate(name="Sunset Court"))
        store.tenants.update(tenant_id, {"name": "Jane Achieng"})

        assert store.units.require(unit_id).property_name == "Sunset Court"
        assert store.tenants.require(tenant_id).property_name == "Sunset Court"
        assert store.units.require(unit_id).tenant_name == "Jane Achieng"

    def test_unit_count_follows_creates_and_deletes(self, store, make_property, make_unit):
        property_id = make_property()
        first = make_unit(property_id, "A1")
        make_unit(property_id, "A2")
        assert store.properties.require(property_id).total_units == 2

        store.units.delete(first)
        assert store.properties.require(property_id).total_units == 1

    def test_tenants_cannot_be_placed_without_the_coordinator(self, store, make_property, make_unit):
        unit_id = make_unit(make_property())
        with pytest.raises(PreconditionFailedError):
            store.tenants.create(TenantCreate(
                name="Sneaky", email="s@example.com", phone="1", id_number="2", unit_id=unit_id,
            ))

    def test_maintenance_unit_must_belong_to_property(self, store, make_property, make_unit):
        p1 = make_property("One")
        p2 = make_property("Two")
        unit_id = make_unit(p2)
        with pytest.raises(IntegrityViolationError):
            store.maintenance.create(MaintenanceCreate(
                property_id=p1, unit_id=unit_id, title="Leak", description="Kitchen tap",
            ))

    def test_payment_tenant_must_be_registered_at_the_property(self, store, coordinator, make_property, make_unit,
                                                               make_tenant):
        p1 = make_property("One")
        p2 = make_property("Two")
        here = make_unit(p1)
        there = make_unit(p2, unit_number="B1")
        tenant_id = make_tenant(unit_id=there)
        with pytest.raises(IntegrityViolationError, match="not registered"):
            store.payments.create(PaymentCreate(
                tenant_id=tenant_id, unit_id=here, property_id=p1, amount=100, due_date=NOW,
            ))
        with pytest.raises(IntegrityViolationError):
            store.maintenance.create(MaintenanceCreate(
                property_id=p1, tenant_id=tenant_id, title="Leak", description="Kitchen tap",
            ))

        # A payment taken before the tenant moved stays writable
        payment_id = store.payments.create(PaymentCreate(
            tenant_id=tenant_id, unit_id=there, property_id=p2, amount=100, due_date=NOW,
        ))
        coordinator.assign_tenant_to_unit(tenant_id, here)
        store.payments.update(payment_id, {"status": "paid"})
        assert store.payments.require(payment_id).status == PaymentStatus.PAID


class TestDeletes:

    def test_required_reference_blocks_delete(self, store, make_property, make_unit):
        property_id = make_property()
        make_unit(property_id)
        with pytest.raises(PreconditionFailedError):
            store.properties.delete(property_id)
        assert store.properties.get_by_id(property_id) is not None

    def test_deleting_a_property_prunes_user_scopes_and_tenants(self, store, make_property, make_user, make_tenant):
        keep = make_property("Keep")
        gone = make_property("Gone")
        make_user("manager", property_ids=[keep, gone])
        tenant_id = make_tenant(property_id=gone)

        store.properties.delete(gone)

        assert store.users.require("manager").property_ids == [keep]
        tenant = store.tenants.require(tenant_id)
        assert tenant.property_id is None
        assert tenant.property_name is None

    def test_deleting_a_unit_clears_its_tenant(self, store, occupied):
        property_id, unit_id, tenant_id = occupied
        store.units.delete(unit_id)

        tenant = store.tenants.require(tenant_id)
        assert tenant.unit_id is None
        assert tenant.unit_number is None
        # Still registered against the property, so still visible to its admins
        assert tenant.property_id == property_id

    def test_deleting_a_tenant_frees_the_unit(self, store, occupied):
        _, unit_id, tenant_id = occupied
        store.tenants.delete(tenant_id)

        unit = store.units.require(unit_id)
        assert unit.status == UnitStatus.VACANT
        assert unit.tenant_id is None
        assert unit.tenant_name is None


class TestCollectionRules:

    def _payment(self, occupied, **kwargs):
        property_id, unit_id, tenant_id = occupied
        fields = dict(
            tenant_id=tenant_id, unit_id=unit_id, property_id=property_id,
            amount=25000, due_date=NOW - timedelta(days=3),
        )
        fields.update(kwargs)
        return PaymentCreate(**fields)

    def test_paid_payment_gets_a_paid_date(self, store, occupied):
        payment_id = store.payments.create(self._payment(occupied, status=PaymentStatus.PAID))
        payment = store.payments.require(payment_id)
        assert payment.paid_date == NOW
        assert payment.tenant_name == "Jane Wanjiku"
        assert payment.unit_number == "A1"

    def test_overdue_requires_past_due_and_unpaid(self, store, occupied):
        with pytest.raises(PreconditionFailedError):
            store.payments.create(self._payment(occupied, status="overdue", due_date=NOW + timedelta(days=3)))
        with pytest.raises(PreconditionFailedError):
            store.payments.create(self._payment(occupied, status="overdue", paid_date=NOW))

        payment_id = store.payments.create(self._payment(occupied, status="overdue"))
        assert store.payments.require(payment_id).status == PaymentStatus.OVERDUE

    def test_completed_maintenance_gets_completed_at(self, store, clock, occupied):
        property_id, unit_id, _ = occupied
        request_id = store.maintenance.create(MaintenanceCreate(
            property_id=property_id, unit_id=unit_id, title="Leak", description="Kitchen tap",
        ))
        assert store.maintenance.require(request_id).reported_date == NOW
        assert store.maintenance.require(request_id).completed_at is None

        clock.advance(days=2)
        store.maintenance.update(request_id, {"status": "completed", "actual_cost": 1500})

        request = store.maintenance.require(request_id)
        assert request.completed_at == NOW + timedelta(days=2)
        assert request.actual_cost == Decimal("1500")

    def test_activities_are_append_only(self, store):
        activity_id = store.activities.create(ActivityCreate(user_id="u1", action="Did a thing", type="unit"))
        with pytest.raises(PreconditionFailedError):
            store.activities.update(activity_id, {"action": "Did something else"})

    def test_lease_unit_must_belong_to_property(self, store, make_property, occupied):
        _, unit_id, tenant_id = occupied
        other = make_property("Other")
        with pytest.raises(IntegrityViolationError):
            store.leases.create(LeaseCreate(
                tenant_id=tenant_id, unit_id=unit_id, property_id=other, monthly_rent=1,
                start_date=NOW, end_date=NOW + timedelta(days=30),
            ))

    def test_user_scope_must_name_existing_properties(self, store, make_user):
        with pytest.raises(IntegrityViolationError):
            make_user("manager", role=UserRole.ADMIN, property_ids=["missing"])


class TestLocalCacheTier:

    @pytest.fixture
    def cache(self, tmp_path):
        return LocalCache(tmp_path)

    @pytest.fixture
    def cached_store(self, session, clock, cache):
        return EntityStore(session, cache=cache, clock=clock, read_retries=1, retry_backoff=0)

    def test_committed_writes_reach_the_cache(self, cached_store, cache):
        property_id = cached_store.properties.create({"name": "Cached", "address": "Somewhere"})
        assert cache.get("properties", property_id)["name"] == "Cached"

        cached_store.properties.update(property_id, {"name": "Renamed"})
        assert cache.get("properties", property_id)["name"] == "Renamed"

        cached_store.properties.delete(property_id)
        assert cache.get("properties", property_id) is None

    def test_rolled_back_batch_never_reaches_the_cache(self, cached_store, cache):
        with pytest.raises(PreconditionFailedError):
            with cached_store.batch():
                cached_store.properties.create({"name": "Doomed", "address": "Nowhere"})
                raise PreconditionFailedError("changed my mind")

        assert cache.all("properties") == []
        assert cached_store.properties.get_all() == []

    def test_reads_fall_back_to_the_cache_during_an_outage(self, cached_store, session, monkeypatch):
        property_id = cached_store.properties.create({"name": "Cached", "address": "Somewhere"})
        monkeypatch.setattr(session, "query", _outage)

        records = cached_store.properties.get_all()
        assert [p.id for p in records] == [property_id]
        assert cached_store.properties.get_by_id(property_id).name == "Cached"

    def test_reads_without_a_cache_surface_the_outage(self, store, session, make_property, monkeypatch):
        make_property()
        monkeypatch.setattr(session, "query", _outage)
        with pytest.raises(TransientStoreError):
            store.properties.get_all()

    def test_writes_never_fall_back(self, cached_store, session, monkeypatch):
        property_id = cached_store.properties.create({"name": "Cached", "address": "Somewhere"})
        monkeypatch.setattr(session, "get", _outage)
        with pytest.raises(TransientStoreError):
            cached_store.properties.update(property_id, {"name": "Lost"})
        monkeypatch.undo()

        assert cached_store.properties.require(property_id).name == "Cached"
