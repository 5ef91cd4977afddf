# services/aggregation.py
"""
Aggregation Engine - dashboard and report metrics.

Every function here is a pure reduction over lists the caller has already
scoped. Nothing in this module fetches records or applies access rules.
"""
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from models import (
     MaintenanceStatus,
     OPEN_MAINTENANCE_STATUSES,
     PaymentStatus,
     UnitStatus,
     utcnow,
)
from schemas import DashboardStats, PaymentSummary, TenantBalance
from .lease_lifecycle import LeaseLifecycle

ZERO = Decimal("0")


def _value(value) -> str:
     return getattr(value, "value", value)


def _count(records: Iterable, field: str, value) -> int:
     return sum(1 for r in records if _value(getattr(r, field)) == value)


def _amount(value) -> Decimal:
     return Decimal(value) if value is not None else ZERO


def _ratio(numerator, denominator) -> float:
     if not denominator:
          return 0.0
     return float(numerator) / float(denominator)


def _previous_month(month: int, year: int):
     if month == 1:
          return 12, year - 1
     return month - 1, year


def occupancy_rate(units: List) -> float:
     """Occupied units over all units; 0.0 when there are no units."""
     return _ratio(_count(units, "status", UnitStatus.OCCUPIED.value), len(units))


def total_revenue(tenants: Iterable) -> Decimal:
     """Expected monthly rent roll: the sum of every tenant's rent."""
     return sum((_amount(t.rent) for t in tenants), ZERO)


def collected_in_month(payments: Iterable, month: int, year: int) -> Decimal:
     """Sum of paid payments dated (paid_date, else due_date) in the given month."""
     total = ZERO
     for payment in payments:
          if _value(payment.status) != PaymentStatus.PAID.value:
               continue
          when = payment.paid_date or payment.due_date
          if when is not None and when.month == month and when.year == year:
               total += _amount(payment.amount)
     return total


def collection_rate(collected: Decimal, expected: Decimal) -> float:
     """Collected over expected; 0.0 when nothing is expected."""
     return _ratio(collected, expected)


def compute_dashboard_stats(
     properties: List,
     units: List,
     tenants: List,
     payments: List,
     maintenance: Optional[List] = None,
     leases: Optional[List] = None,
     now: Optional[datetime] = None,
     lifecycle: Optional[LeaseLifecycle] = None,
) -> DashboardStats:
     """
     Compute the dashboard headline numbers from scoped entity lists.

     Args:
          properties, units, tenants, payments, maintenance, leases: Scoped records
          now: Reference time for "this month" and lease expiry (default: current UTC time)
          lifecycle: Engine deciding which leases are expiring soon

     Returns:
          DashboardStats
     """
     now = now or utcnow()
     maintenance = maintenance or []
     leases = leases or []
     lifecycle = lifecycle or LeaseLifecycle()

     revenue = total_revenue(tenants)
     collected = collected_in_month(payments, now.month, now.year)

     return DashboardStats(
          total_properties=len(properties),
          total_units=len(units),
          occupied_units=_count(units, "status", UnitStatus.OCCUPIED.value),
          vacant_units=_count(units, "status", UnitStatus.VACANT.value),
          maintenance_units=_count(units, "status", UnitStatus.MAINTENANCE.value),
          total_tenants=len(tenants),
          total_revenue=revenue,
          monthly_revenue=collected,
          occupancy_rate=occupancy_rate(units),
          collection_rate=collection_rate(collected, revenue),
          pending_payments=_count(payments, "status", PaymentStatus.PENDING.value),
          overdue_payments=_count(payments, "status", PaymentStatus.OVERDUE.value),
          open_maintenance=sum(
               1 for m in maintenance if MaintenanceStatus(_value(m.status)) in OPEN_MAINTENANCE_STATUSES
          ),
          expiring_leases=sum(1 for lease in leases if lifecycle.is_expiring_soon(lease, now)),
     )


def payment_summary(payments: List, now: Optional[datetime] = None) -> PaymentSummary:
     """Totals by payment state, plus what was collected this month and last month."""
     now = now or utcnow()
     last_month, last_year = _previous_month(now.month, now.year)
     summary = PaymentSummary(
          this_month=collected_in_month(payments, now.month, now.year),
          last_month=collected_in_month(payments, last_month, last_year),
     )
     for payment in payments:
          status = _value(payment.status)
          amount = _amount(payment.amount)
          if status == PaymentStatus.PAID.value:
               summary.total_collected += amount
          elif status == PaymentStatus.OVERDUE.value:
               summary.total_overdue += amount
          elif status in (PaymentStatus.PENDING.value, PaymentStatus.PARTIAL.value):
               summary.total_pending += amount
     return summary


def tenant_balance(payments: Iterable, tenant_id: str) -> TenantBalance:
     """What a tenant has paid and still owes, from their payments."""
     balance = TenantBalance(tenant_id=tenant_id)
     for payment in payments:
          if payment.tenant_id != tenant_id:
               continue
          status = _value(payment.status)
          amount = _amount(payment.amount)
          if status == PaymentStatus.PAID.value:
               balance.total_paid += amount
          else:
               balance.outstanding += amount
               if status == PaymentStatus.OVERDUE.value:
                    balance.overdue += amount
     return balance
