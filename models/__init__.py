# models/__init__.py
from .base import Base, new_id, utcnow
from .user import User, UserRole
from .property import Property, PropertyType
from .unit import Unit, UnitStatus, UnitType
from .tenant import Tenant
from .lease import Lease, LeaseStatus, LeaseType, EXPLICIT_LEASE_STATUSES
from .payment import Payment, PaymentMethod, PaymentStatus, PaymentType
from .maintenance import (
     Maintenance,
     MaintenanceCategory,
     MaintenancePriority,
     MaintenanceStatus,
     OPEN_MAINTENANCE_STATUSES,
)
from .activity import Activity

__all__ = [
     "Base",
     "new_id",
     "utcnow",
     "User",
     "UserRole",
     "Property",
     "PropertyType",
     "Unit",
     "UnitStatus",
     "UnitType",
     "Tenant",
     "Lease",
     "LeaseStatus",
     "LeaseType",
     "EXPLICIT_LEASE_STATUSES",
     "Payment",
     "PaymentMethod",
     "PaymentStatus",
     "PaymentType",
     "Maintenance",
     "MaintenanceCategory",
     "MaintenancePriority",
     "MaintenanceStatus",
     "OPEN_MAINTENANCE_STATUSES",
     "Activity",
]
