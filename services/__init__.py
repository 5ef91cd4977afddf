# services/__init__.py
from .exceptions import (
     StoreError,
     NotFoundError,
     PreconditionFailedError,
     IntegrityViolationError,
     ScopeViolationError,
     TransientStoreError,
)
from .local_cache import LocalCache
from .store import EntityStore, Repository, atomic_batch
from .access_scope import scope, can_access_property, ensure_property_access, accessible_property_ids, can_manage_users
from .lease_lifecycle import LeaseLifecycle
from .occupancy import OccupancyCoordinator
from .billing_service import BillingService
