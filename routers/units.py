# routers/units.py
"""
Unit API routes.

Occupancy changes (assign, release, maintenance, restore) go through the
occupancy coordinator; the plain update route cannot touch status or tenant.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dependencies import get_coordinator, get_store, require_user
from models import UnitStatus
from schemas import AssignTenantRequest, UnitCreate, UnitRead, UnitUpdate, UserRead
from services.access_scope import ensure_property_access, scope
from services.activity_service import log_activity
from services.occupancy import OccupancyCoordinator
from services.store import EntityStore

router = APIRouter(prefix="/api/units", tags=["units"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_accessible_unit(store: EntityStore, user: UserRead, unit_id: str) -> UnitRead:
     unit = store.units.require(unit_id)
     ensure_property_access(user, unit.property_id)
     return unit


@router.get("", response_model=List[UnitRead], summary="List units")
def list_units(
     property_id: Optional[str] = Query(None),
     unit_status: Optional[UnitStatus] = Query(None, alias="status"),
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     units = store.units.get_by_property_id(property_id) if property_id else store.units.get_all()
     if unit_status is not None:
          units = [u for u in units if u.status == unit_status]
     return scope(units, user)


@router.get("/available", response_model=List[UnitRead], summary="List vacant units")
def list_available_units(
     property_id: Optional[str] = Query(None),
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     return scope(store.units.get_available_units(property_id), user)


@router.get("/{unit_id}", response_model=UnitRead, summary="Get a unit")
def get_unit(
     unit_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     return _get_accessible_unit(store, user, unit_id)


@router.post("", response_model=UnitRead, status_code=status.HTTP_201_CREATED, summary="Create a unit")
def create_unit(
     unit_data: UnitCreate,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     ensure_property_access(user, unit_data.property_id)
     unit_id = store.units.create(unit_data)
     unit = store.units.require(unit_id)
     log_activity(store, user.id, f"Added unit {unit.unit_number} to {unit.property_name}", "unit", unit.property_id)
     return unit


@router.put("/{unit_id}", response_model=UnitRead, summary="Update a unit")
def update_unit(
     unit_id: str,
     unit_data: UnitUpdate,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     _get_accessible_unit(store, user, unit_id)
     store.units.update(unit_id, unit_data)
     return store.units.require(unit_id)


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a unit")
def delete_unit(
     unit_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     """Clears the occupant's assignment; refused while leases or payments reference the unit."""
     unit = _get_accessible_unit(store, user, unit_id)
     store.units.delete(unit_id)
     log_activity(store, user.id, f"Deleted unit {unit.unit_number}", "unit", unit.property_id)


# ---------------------------------------------------------------------------
# Occupancy
# ---------------------------------------------------------------------------

@router.post("/{unit_id}/assign", response_model=UnitRead, summary="Assign a tenant to a vacant unit")
def assign_tenant(
     unit_id: str,
     body: AssignTenantRequest,
     store: EntityStore = Depends(get_store),
     coordinator: OccupancyCoordinator = Depends(get_coordinator),
     user: UserRead = Depends(require_user)
):
     unit = _get_accessible_unit(store, user, unit_id)
     tenant = store.tenants.require(body.tenant_id)
     ensure_property_access(user, tenant.property_id)
     coordinator.assign_tenant_to_unit(tenant.id, unit.id)
     log_activity(store, user.id, f"Assigned {tenant.name} to unit {unit.unit_number}", "tenant", unit.property_id)
     return store.units.require(unit_id)


@router.post("/{unit_id}/release", response_model=UnitRead, summary="Release a unit")
def release_unit(
     unit_id: str,
     store: EntityStore = Depends(get_store),
     coordinator: OccupancyCoordinator = Depends(get_coordinator),
     user: UserRead = Depends(require_user)
):
     unit = _get_accessible_unit(store, user, unit_id)
     coordinator.release_unit(unit_id)
     log_activity(store, user.id, f"Released unit {unit.unit_number}", "unit", unit.property_id)
     return store.units.require(unit_id)


@router.post("/{unit_id}/maintenance", response_model=UnitRead, summary="Take a unit out of service")
def mark_under_maintenance(
     unit_id: str,
     store: EntityStore = Depends(get_store),
     coordinator: OccupancyCoordinator = Depends(get_coordinator),
     user: UserRead = Depends(require_user)
):
     unit = _get_accessible_unit(store, user, unit_id)
     coordinator.mark_unit_under_maintenance(unit_id)
     log_activity(store, user.id, f"Unit {unit.unit_number} under maintenance", "unit", unit.property_id)
     return store.units.require(unit_id)


@router.post("/{unit_id}/restore", response_model=UnitRead, summary="Return a unit to service")
def restore_unit(
     unit_id: str,
     store: EntityStore = Depends(get_store),
     coordinator: OccupancyCoordinator = Depends(get_coordinator),
     user: UserRead = Depends(require_user)
):
     _get_accessible_unit(store, user, unit_id)
     coordinator.restore_unit(unit_id)
     return store.units.require(unit_id)
