"""
Tests for dashboard and report metrics.
"""
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

from conftest import NOW
from services.aggregation import (
    collected_in_month,
    collection_rate,
    compute_dashboard_stats,
    occupancy_rate,
    payment_summary,
    tenant_balance,
    total_revenue,
)


def unit(status):
    return SimpleNamespace(status=status)


def tenant(rent):
    return SimpleNamespace(rent=None if rent is None else Decimal(rent))


def payment(amount, status, due, paid=None, tenant_id="t1"):
    return SimpleNamespace(amount=Decimal(amount), status=status, due_date=due, paid_date=paid, tenant_id=tenant_id)


def lease(end_in, status="active"):
    return SimpleNamespace(end_date=NOW + end_in, status=status)


def test_occupancy_rate():
    assert occupancy_rate([]) == 0.0
    assert occupancy_rate([unit("occupied"), unit("vacant")]) == 0.5
    assert occupancy_rate([unit("occupied"), unit("vacant"), unit("maintenance"), unit("occupied")]) == 0.5
    assert occupancy_rate([unit("occupied")]) == 1.0


def test_total_revenue_is_the_rent_roll():
    assert total_revenue([]) == Decimal("0")
    assert total_revenue([tenant("25000"), tenant("30000.50"), tenant(None)]) == Decimal("55000.50")


def test_collected_in_month_uses_paid_date_then_due_date():
    payments = [
        payment("100", "paid", due=datetime(2026, 9, 1), paid=datetime(2026, 10, 3)),
        payment("200", "paid", due=datetime(2026, 10, 1)),
        payment("400", "paid", due=datetime(2026, 10, 1), paid=datetime(2026, 11, 2)),
        payment("800", "pending", due=datetime(2026, 10, 1)),
        payment("1600", "paid", due=datetime(2025, 10, 1)),
    ]
    assert collected_in_month(payments, 10, 2026) == Decimal("300")


def test_collection_rate():
    assert collection_rate(Decimal("0"), Decimal("0")) == 0.0
    assert collection_rate(Decimal("50"), Decimal("200")) == 0.25
    # Arrears paid in the month can push collection over expected
    assert collection_rate(Decimal("300"), Decimal("200")) == 1.5


def test_dashboard_stats():
    stats = compute_dashboard_stats(
        properties=[SimpleNamespace(id="p1"), SimpleNamespace(id="p2")],
        units=[unit("occupied"), unit("occupied"), unit("vacant"), unit("maintenance")],
        tenants=[tenant("20000"), tenant("30000")],
        payments=[
            payment("20000", "paid", due=datetime(2026, 10, 1), paid=datetime(2026, 10, 2)),
            payment("30000", "pending", due=datetime(2026, 10, 1)),
            payment("30000", "overdue", due=datetime(2026, 9, 1)),
        ],
        maintenance=[
            SimpleNamespace(status="pending"),
            SimpleNamespace(status="in_progress"),
            SimpleNamespace(status="completed"),
        ],
        leases=[
            lease(timedelta(days=30)),
            lease(timedelta(days=300)),
            lease(timedelta(days=-3)),
            lease(timedelta(days=10), status="terminated"),
        ],
        now=NOW,
    )

    assert stats.total_properties == 2
    assert stats.total_units == 4
    assert stats.occupied_units == 2
    assert stats.vacant_units == 1
    assert stats.maintenance_units == 1
    assert stats.total_tenants == 2
    assert stats.total_revenue == Decimal("50000")
    assert stats.monthly_revenue == Decimal("20000")
    assert stats.occupancy_rate == 0.5
    assert stats.collection_rate == 0.4
    assert stats.pending_payments == 1
    assert stats.overdue_payments == 1
    assert stats.open_maintenance == 2
    assert stats.expiring_leases == 1


def test_dashboard_stats_for_nothing():
    stats = compute_dashboard_stats([], [], [], [], now=NOW)
    assert stats.total_units == 0
    assert stats.occupancy_rate == 0.0
    assert stats.collection_rate == 0.0
    assert stats.total_revenue == Decimal("0")


def test_payment_summary():
    summary = payment_summary(
        [
            payment("100", "paid", due=datetime(2026, 10, 1), paid=datetime(2026, 10, 5)),
            payment("50", "paid", due=datetime(2026, 9, 1), paid=datetime(2026, 9, 2)),
            payment("70", "pending", due=datetime(2026, 11, 1)),
            payment("30", "partial", due=datetime(2026, 10, 1)),
            payment("20", "overdue", due=datetime(2026, 8, 1)),
        ],
        now=NOW,
    )
    assert summary.total_collected == Decimal("150")
    assert summary.total_pending == Decimal("100")
    assert summary.total_overdue == Decimal("20")
    assert summary.this_month == Decimal("100")
    assert summary.last_month == Decimal("50")


def test_payment_summary_in_january_looks_at_december():
    summary = payment_summary(
        [payment("75", "paid", due=datetime(2025, 12, 1), paid=datetime(2025, 12, 20))],
        now=datetime(2026, 1, 10),
    )
    assert summary.last_month == Decimal("75")
    assert summary.this_month == Decimal("0")


def test_tenant_balance():
    balance = tenant_balance(
        [
            payment("100", "paid", due=datetime(2026, 9, 1)),
            payment("60", "pending", due=datetime(2026, 11, 1)),
            payment("40", "overdue", due=datetime(2026, 8, 1)),
            payment("999", "overdue", due=datetime(2026, 8, 1), tenant_id="someone-else"),
        ],
        "t1",
    )
    assert balance.tenant_id == "t1"
    assert balance.total_paid == Decimal("100")
    assert balance.outstanding == Decimal("100")
    assert balance.overdue == Decimal("40")
