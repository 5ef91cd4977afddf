# routers/tenants.py
"""
Tenant API routes.

A tenant is visible to the admins of the property they are registered
against. Creating a tenant in a unit, and deleting one, go through the
occupancy coordinator so the unit's status follows.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from dependencies import get_coordinator, get_store, require_user
from schemas import PaymentRead, TenantBalance, TenantCreate, TenantRead, TenantUpdate, UserRead
from services.access_scope import ensure_property_access, scope
from services.activity_service import log_activity
from services.aggregation import tenant_balance
from services.occupancy import OccupancyCoordinator
from services.store import EntityStore

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


def _get_accessible_tenant(store: EntityStore, user: UserRead, tenant_id: str) -> TenantRead:
     tenant = store.tenants.require(tenant_id)
     ensure_property_access(user, tenant.property_id)
     return tenant


@router.get("", response_model=List[TenantRead], summary="List tenants")
def list_tenants(
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     return scope(store.tenants.get_all(), user)


@router.get("/{tenant_id}", response_model=TenantRead, summary="Get a tenant")
def get_tenant(
     tenant_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     return _get_accessible_tenant(store, user, tenant_id)


@router.get("/{tenant_id}/payments", response_model=List[PaymentRead], summary="List a tenant's payments")
def list_tenant_payments(
     tenant_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     _get_accessible_tenant(store, user, tenant_id)
     return scope(store.payments.get_by_tenant_id(tenant_id), user)


@router.get("/{tenant_id}/balance", response_model=TenantBalance, summary="Get a tenant's balance")
def get_tenant_balance(
     tenant_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     _get_accessible_tenant(store, user, tenant_id)
     payments = scope(store.payments.get_by_tenant_id(tenant_id), user)
     return tenant_balance(payments, tenant_id)


@router.post("", response_model=TenantRead, status_code=status.HTTP_201_CREATED, summary="Create a tenant")
def create_tenant(
     tenant_data: TenantCreate,
     store: EntityStore = Depends(get_store),
     coordinator: OccupancyCoordinator = Depends(get_coordinator),
     user: UserRead = Depends(require_user)
):
     """
     Create a tenant, optionally placing them in a vacant unit.

     Admins must name a unit or property inside their scope.
     """
     target_property_id = tenant_data.property_id
     if tenant_data.unit_id is not None:
          target_property_id = store.units.require(tenant_data.unit_id).property_id
     ensure_property_access(user, target_property_id)

     tenant_id = coordinator.create_tenant(tenant_data)
     tenant = store.tenants.require(tenant_id)
     log_activity(store, user.id, f"Added tenant {tenant.name}", "tenant", tenant.property_id)
     return tenant


@router.put("/{tenant_id}", response_model=TenantRead, summary="Update a tenant")
def update_tenant(
     tenant_id: str,
     tenant_data: TenantUpdate,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     _get_accessible_tenant(store, user, tenant_id)
     store.tenants.update(tenant_id, tenant_data)
     return store.tenants.require(tenant_id)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a tenant")
def delete_tenant(
     tenant_id: str,
     coordinator: OccupancyCoordinator = Depends(get_coordinator),
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     """Releases the tenant's unit; refused while leases or payments reference the tenant."""
     tenant = _get_accessible_tenant(store, user, tenant_id)
     coordinator.delete_tenant(tenant_id)
     log_activity(store, user.id, f"Removed tenant {tenant.name}", "tenant", tenant.property_id)
