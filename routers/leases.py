# routers/leases.py
"""
Lease API routes.

Every lease served here carries its derived status (and days remaining) from
the lease lifecycle engine, never the raw stored status.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dependencies import get_coordinator, get_lifecycle, get_store, require_super_admin, require_user
from models import LeaseStatus
from schemas import LeaseCreate, LeaseRead, LeaseUpdate, RenewLeaseRequest, UserRead
from services.access_scope import ensure_property_access, scope
from services.activity_service import log_activity
from services.lease_lifecycle import LeaseLifecycle
from services.occupancy import OccupancyCoordinator
from services.store import EntityStore

router = APIRouter(prefix="/api/leases", tags=["leases"])


def _get_accessible_lease(store: EntityStore, user: UserRead, lease_id: str) -> LeaseRead:
     lease = store.leases.require(lease_id)
     ensure_property_access(user, lease.property_id)
     return lease


@router.get("", response_model=List[LeaseRead], summary="List leases")
def list_leases(
     lease_status: Optional[LeaseStatus] = Query(None, alias="status"),
     tenant_id: Optional[str] = Query(None),
     store: EntityStore = Depends(get_store),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle),
     user: UserRead = Depends(require_user)
):
     """List scoped leases, optionally filtered by derived status or tenant."""
     leases = store.leases.get_by_tenant_id(tenant_id) if tenant_id else store.leases.get_all()
     leases = [lifecycle.with_derived_status(lease) for lease in scope(leases, user)]
     if lease_status is not None:
          leases = [lease for lease in leases if lease.status == lease_status]
     return leases


@router.get("/expiring", response_model=List[LeaseRead], summary="List leases expiring soon")
def list_expiring_leases(
     store: EntityStore = Depends(get_store),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle),
     user: UserRead = Depends(require_user)
):
     leases = [lifecycle.with_derived_status(lease) for lease in scope(store.leases.get_all(), user)]
     return sorted(
          (lease for lease in leases if lease.status == LeaseStatus.EXPIRING_SOON),
          key=lambda lease: lease.end_date,
     )


@router.post("/refresh-statuses", summary="Rewrite stale stored lease statuses")
def refresh_lease_statuses(
     store: EntityStore = Depends(get_store),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle),
     user: UserRead = Depends(require_super_admin)
):
     return {"updated": lifecycle.refresh_stored_statuses(store)}


@router.get("/{lease_id}", response_model=LeaseRead, summary="Get a lease")
def get_lease(
     lease_id: str,
     store: EntityStore = Depends(get_store),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle),
     user: UserRead = Depends(require_user)
):
     return lifecycle.with_derived_status(_get_accessible_lease(store, user, lease_id))


@router.post("", response_model=LeaseRead, status_code=status.HTTP_201_CREATED, summary="Create a lease")
def create_lease(
     lease_data: LeaseCreate,
     store: EntityStore = Depends(get_store),
     coordinator: OccupancyCoordinator = Depends(get_coordinator),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle),
     user: UserRead = Depends(require_user)
):
     """
     Create an active lease. A vacant unit is assigned to the tenant in the
     same batch; a unit occupied by someone else is refused (409). A tenant
     living in another property is moved, so that property must be in scope too.
     """
     ensure_property_access(user, lease_data.property_id)
     tenant = store.tenants.get_by_id(lease_data.tenant_id)
     if tenant is not None and tenant.property_id is not None:
          ensure_property_access(user, tenant.property_id)
     lease_id = coordinator.create_lease(lease_data)
     lease = store.leases.require(lease_id)
     log_activity(
          store, user.id,
          f"Created lease for {lease.tenant_name} in unit {lease.unit_number}",
          "lease", lease.property_id,
     )
     return lifecycle.with_derived_status(lease)


@router.put("/{lease_id}", response_model=LeaseRead, summary="Update lease terms")
def update_lease(
     lease_id: str,
     lease_data: LeaseUpdate,
     store: EntityStore = Depends(get_store),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle),
     user: UserRead = Depends(require_user)
):
     _get_accessible_lease(store, user, lease_id)
     store.leases.update(lease_id, lease_data)
     return lifecycle.with_derived_status(store.leases.require(lease_id))


@router.post("/{lease_id}/renew", response_model=LeaseRead, summary="Renew a lease")
def renew_lease(
     lease_id: str,
     body: RenewLeaseRequest,
     store: EntityStore = Depends(get_store),
     coordinator: OccupancyCoordinator = Depends(get_coordinator),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle),
     user: UserRead = Depends(require_user)
):
     lease = _get_accessible_lease(store, user, lease_id)
     coordinator.renew_lease(lease_id, body.new_end_date, body.special_terms)
     log_activity(store, user.id, f"Renewed lease for {lease.tenant_name}", "lease", lease.property_id)
     return lifecycle.with_derived_status(store.leases.require(lease_id))


@router.post("/{lease_id}/terminate", response_model=LeaseRead, summary="Terminate a lease")
def terminate_lease(
     lease_id: str,
     store: EntityStore = Depends(get_store),
     coordinator: OccupancyCoordinator = Depends(get_coordinator),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle),
     user: UserRead = Depends(require_user)
):
     lease = _get_accessible_lease(store, user, lease_id)
     coordinator.terminate_lease(lease_id)
     log_activity(store, user.id, f"Terminated lease for {lease.tenant_name}", "lease", lease.property_id)
     return lifecycle.with_derived_status(store.leases.require(lease_id))


@router.delete("/{lease_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a lease")
def delete_lease(
     lease_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     _get_accessible_lease(store, user, lease_id)
     store.leases.delete(lease_id)
