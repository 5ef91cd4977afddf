# schemas/__init__.py
from .property import PropertyCreate, PropertyUpdate, PropertyRead
from .unit import UnitCreate, UnitUpdate, UnitRead, AssignTenantRequest
from .tenant import TenantCreate, TenantUpdate, TenantRead, EmergencyContact
from .lease import LeaseCreate, LeaseUpdate, LeaseRead, RenewLeaseRequest
from .payment import (
     PaymentCreate,
     PaymentUpdate,
     PaymentRead,
     RecordPaymentRequest,
     GenerateMonthlyPaymentsRequest,
)
from .maintenance import MaintenanceCreate, MaintenanceUpdate, MaintenanceRead
from .user import UserCreate, UserUpdate, UserRead
from .activity import ActivityCreate, ActivityRead
from .dashboard import (
     DashboardStats,
     PaymentSummary,
     TenantBalance,
     IntegrityIssue,
     GenerateMonthlyPaymentsResult,
)
