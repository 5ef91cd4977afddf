# schemas/dashboard.py
"""
Pydantic schemas for the dashboard and audit responses.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
     """Headline numbers for the dashboard. Rates are ratios; occupancy is in [0, 1]."""
     total_properties: int = 0
     total_units: int = 0
     occupied_units: int = 0
     vacant_units: int = 0
     maintenance_units: int = 0
     total_tenants: int = 0
     total_revenue: Decimal = Decimal("0")
     monthly_revenue: Decimal = Decimal("0")
     occupancy_rate: float = Field(0.0, ge=0, le=1)
     collection_rate: float = Field(0.0, ge=0)
     pending_payments: int = 0
     overdue_payments: int = 0
     open_maintenance: int = 0
     expiring_leases: int = 0


class PaymentSummary(BaseModel):
     """Money totals by payment state, plus this month vs last month."""
     total_collected: Decimal = Decimal("0")
     total_pending: Decimal = Decimal("0")
     total_overdue: Decimal = Decimal("0")
     this_month: Decimal = Decimal("0")
     last_month: Decimal = Decimal("0")


class TenantBalance(BaseModel):
     tenant_id: str
     total_paid: Decimal = Decimal("0")
     outstanding: Decimal = Decimal("0")
     overdue: Decimal = Decimal("0")


class IntegrityIssue(BaseModel):
     """One inconsistency found by the integrity audit."""
     collection: str
     record_id: str
     kind: str  # dangling_reference, occupancy_mismatch, unit_count_drift, invalid_overdue
     field: Optional[str] = None
     detail: str


class GenerateMonthlyPaymentsResult(BaseModel):
     created: int
     skipped: int
