# routers/payments.py
"""
Payment API routes: recording payments, monthly rent generation and overdue aging.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from dependencies import get_store, require_super_admin, require_user
from models import PaymentStatus
from schemas import (
     GenerateMonthlyPaymentsRequest,
     GenerateMonthlyPaymentsResult,
     PaymentCreate,
     PaymentRead,
     PaymentUpdate,
     RecordPaymentRequest,
     UserRead,
)
from services.access_scope import ensure_property_access, scope
from services.activity_service import log_activity
from services.billing_service import BillingService
from services.store import EntityStore

router = APIRouter(prefix="/api/payments", tags=["payments"])


def _get_accessible_payment(store: EntityStore, user: UserRead, payment_id: str) -> PaymentRead:
     payment = store.payments.require(payment_id)
     ensure_property_access(user, payment.property_id)
     return payment


@router.get("", response_model=List[PaymentRead], summary="List payments")
def list_payments(
     tenant_id: Optional[str] = Query(None),
     property_id: Optional[str] = Query(None),
     payment_status: Optional[PaymentStatus] = Query(None, alias="status"),
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     if tenant_id:
          payments = store.payments.get_by_tenant_id(tenant_id)
     elif property_id:
          payments = store.payments.get_by_property_id(property_id)
     else:
          payments = store.payments.get_all()
     if payment_status is not None:
          payments = [p for p in payments if p.status == payment_status]
     return scope(payments, user)


@router.post("/generate", response_model=GenerateMonthlyPaymentsResult, summary="Generate monthly rent payments")
def generate_monthly_payments(
     body: GenerateMonthlyPaymentsRequest,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     """Create the month's pending rent payment for every scoped tenant in a unit."""
     if body.property_id is not None:
          ensure_property_access(user, body.property_id)
          tenants = store.tenants.get_by_property_id(body.property_id)
     else:
          tenants = store.tenants.get_all()
     created, skipped = BillingService.generate_monthly_payments(store, scope(tenants, user), body.month, body.year)
     if created:
          log_activity(store, user.id, f"Generated {created} rent payment(s) for {body.month:02d}/{body.year}", "payment", body.property_id)
     return GenerateMonthlyPaymentsResult(created=created, skipped=skipped)


@router.post("/mark-overdue", summary="Mark past-due pending payments as overdue")
def mark_overdue_payments(
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_super_admin)
):
     return {"updated": BillingService.mark_overdue_payments(store)}


@router.get("/{payment_id}", response_model=PaymentRead, summary="Get a payment")
def get_payment(
     payment_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     return _get_accessible_payment(store, user, payment_id)


@router.post("", response_model=PaymentRead, status_code=status.HTTP_201_CREATED, summary="Create a payment")
def create_payment(
     payment_data: PaymentCreate,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     ensure_property_access(user, payment_data.property_id)
     payment_id = store.payments.create(payment_data)
     payment = store.payments.require(payment_id)
     log_activity(
          store, user.id,
          f"Recorded {payment.type.value} payment of {payment.amount} from {payment.tenant_name}",
          "payment", payment.property_id,
     )
     return payment


@router.post("/{payment_id}/record", response_model=PaymentRead, summary="Mark a payment as paid")
def record_payment(
     payment_id: str,
     body: RecordPaymentRequest,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     payment = _get_accessible_payment(store, user, payment_id)
     BillingService.record_payment(
          store,
          payment_id,
          method=body.method,
          reference_number=body.reference_number,
          paid_date=body.paid_date,
          amount=body.amount,
     )
     log_activity(store, user.id, f"Payment received from {payment.tenant_name}", "payment", payment.property_id)
     return store.payments.require(payment_id)


@router.put("/{payment_id}", response_model=PaymentRead, summary="Update a payment")
def update_payment(
     payment_id: str,
     payment_data: PaymentUpdate,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     _get_accessible_payment(store, user, payment_id)
     store.payments.update(payment_id, payment_data)
     return store.payments.require(payment_id)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a payment")
def delete_payment(
     payment_id: str,
     store: EntityStore = Depends(get_store),
     user: UserRead = Depends(require_user)
):
     _get_accessible_payment(store, user, payment_id)
     store.payments.delete(payment_id)
