# routers/maintenance.py
"""
Maintenance request API routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dependencies import get_store, require_user
from models import MaintenanceStatus
from schemas import MaintenanceCreate, MaintenanceRead, MaintenanceUpdate, UserRead
from services.access_scope import ensure_property_access, scope
from services.activity_service import log_activity
from services.store import EntityStore

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


def _get_accessible_request(store: EntityStore, user: UserRead, request_id: str) -> MaintenanceRead:
     request = store.maintenance.require(request_id)
     ensure_property_access(user, request.property_id)
     return request


@router.get("", response_model=List[MaintenanceRead], summary="List maintenance requests")
def list_maintenance_requests(
     property_id: Optional[str] = Query(None),
     request_status: Optional[MaintenanceStatus] = Query(None, alias="status"),
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     requests = store.maintenance.get_by_property_id(property_id) if property_id else store.maintenance.get_all()
     if request_status is not None:
          requests = [r for r in requests if r.status == request_status]
     return scope(requests, user)


@router.get("/{request_id}", response_model=MaintenanceRead, summary="Get a maintenance request")
def get_maintenance_request(
     request_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     return _get_accessible_request(store, user, request_id)


@router.post(
     "",
     response_model=MaintenanceRead,
     status_code=status.HTTP_201_CREATED,
     summary="Open a maintenance request"
)
def create_maintenance_request(
     request_data: MaintenanceCreate,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     ensure_property_access(user, request_data.property_id)
     request_id = store.maintenance.create(request_data)
     request = store.maintenance.require(request_id)
     log_activity(store, user.id, f"Maintenance request: {request.title}", "maintenance", request.property_id)
     return request


@router.put("/{request_id}", response_model=MaintenanceRead, summary="Update a maintenance request")
def update_maintenance_request(
     request_id: str,
     request_data: MaintenanceUpdate,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     existing = _get_accessible_request(store, user, request_id)
     store.maintenance.update(request_id, request_data)
     request = store.maintenance.require(request_id)
     if request.status != existing.status:
          log_activity(
               store, user.id,
               f"Maintenance request {request.title} is now {request.status.value}",
               "maintenance", request.property_id,
          )
     return request


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a maintenance request")
def delete_maintenance_request(
     request_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     _get_accessible_request(store, user, request_id)
     store.maintenance.delete(request_id)
