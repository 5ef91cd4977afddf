# routers/properties.py
"""
Property API routes.

Role-based access:
- super_admin: every property
- admin: the properties in their property_ids; a property an admin creates
  is added to their set
"""
from typing import List

from fastapi import APIRouter, Depends, status

from dependencies import get_store, require_super_admin, require_user
from models import UserRole
from schemas import PropertyCreate, PropertyRead, PropertyUpdate, UnitRead, UserRead
from services.access_scope import ensure_property_access, scope
from services.activity_service import log_activity
from services.integrity import recount_units
from services.store import EntityStore

router = APIRouter(prefix="/api/properties", tags=["properties"])


@router.get("", response_model=List[PropertyRead], summary="List properties")
def list_properties(
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     return scope(store.properties.get_all(), user)


@router.get("/{property_id}", response_model=PropertyRead, summary="Get a property")
def get_property(
     property_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     prop = store.properties.require(property_id)
     ensure_property_access(user, prop.id)
     return prop


@router.get("/{property_id}/units", response_model=List[UnitRead], summary="List a property's units")
def list_property_units(
     property_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     ensure_property_access(user, property_id)
     store.properties.require(property_id)
     return store.units.get_by_property_id(property_id)


@router.post(
     "",
     response_model=PropertyRead,
     status_code=status.HTTP_201_CREATED,
     summary="Create a property"
)
def create_property(
     property_data: PropertyCreate,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     """
     Create a property. When an admin creates it, they become its manager and
     the property joins their property_ids in the same batch.
     """
     is_admin = user.role == UserRole.ADMIN.value
     if is_admin and property_data.manager_id is None:
          property_data = property_data.model_copy(update={"manager_id": user.id, "manager_name": user.name})

     with store.batch():
          property_id = store.properties.create(property_data)
          if is_admin:
               user_row = store.users.get_row(user.id, required=True)
               store.users.apply(user_row, {"property_ids": list(user_row.property_ids or []) + [property_id]})

     log_activity(store, user.id, f"Added property {property_data.name}", "property", property_id)
     return store.properties.require(property_id)


@router.put("/{property_id}", response_model=PropertyRead, summary="Update a property")
def update_property(
     property_id: str,
     property_data: PropertyUpdate,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     ensure_property_access(user, property_id)
     store.properties.update(property_id, property_data)
     prop = store.properties.require(property_id)
     log_activity(store, user.id, f"Updated property {prop.name}", "property", property_id)
     return prop


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a property")
def delete_property(
     property_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     """Refused while units, leases, payments or maintenance requests still belong to the property."""
     ensure_property_access(user, property_id)
     prop = store.properties.require(property_id)
     store.properties.delete(property_id)
     log_activity(store, user.id, f"Deleted property {prop.name}", "property")


@router.post("/{property_id}/recount", response_model=PropertyRead, summary="Repair the unit count")
def recount_property_units(
     property_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_super_admin)
):
     recount_units(store, property_id)
     return store.properties.require(property_id)
