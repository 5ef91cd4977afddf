# routers/dashboard.py
"""
Dashboard API routes: headline stats, payment summary, recent activity and
the integrity audit. Stats are reduced from the caller's scoped records.
"""
from typing import List

from fastapi import APIRouter, Depends, Query

from dependencies import get_lifecycle, get_store, require_super_admin, require_user
from schemas import ActivityRead, DashboardStats, IntegrityIssue, PaymentSummary, UserRead
from services.access_scope import accessible_property_ids, scope
from services.activity_service import recent_activities
from services.aggregation import compute_dashboard_stats, payment_summary
from services.integrity import find_integrity_issues
from services.lease_lifecycle import LeaseLifecycle
from services.store import EntityStore

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _scoped(repository, user: UserRead) -> list:
     """Fetch only the user's properties' records, then scope them."""
     property_ids = accessible_property_ids(user)
     if property_ids is None:
          return scope(repository.get_all(), user)
     return scope(repository.get_by_property_ids(property_ids), user)


@router.get("/stats", response_model=DashboardStats, summary="Dashboard statistics")
def get_dashboard_stats(
     store: EntityStore = Depends(get_store),
     lifecycle: LeaseLifecycle = Depends(get_lifecycle),
     user: UserRead = Depends(require_user)
):
     return compute_dashboard_stats(
          properties=_scoped(store.properties, user),
          units=_scoped(store.units, user),
          tenants=_scoped(store.tenants, user),
          payments=_scoped(store.payments, user),
          maintenance=_scoped(store.maintenance, user),
          leases=_scoped(store.leases, user),
          now=lifecycle.clock(),
          lifecycle=lifecycle,
     )


@router.get("/payment-summary", response_model=PaymentSummary, summary="Payment totals")
def get_payment_summary(
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     return payment_summary(_scoped(store.payments, user), now=store.now())


@router.get("/activities", response_model=List[ActivityRead], summary="Recent activity")
def get_recent_activities(
     limit: int = Query(10, ge=1, le=100),
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     return recent_activities(store, user.id, limit)


@router.get("/integrity", response_model=List[IntegrityIssue], summary="Integrity audit")
def get_integrity_issues(
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_super_admin)
):
     return find_integrity_issues(store)
