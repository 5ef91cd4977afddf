# services/billing_service.py
"""
Billing Service - rent scheduling and payment state changes.

This service generates the monthly rent payments, ages pending payments into
overdue, and records settlements, separate from the API layer.
"""
import calendar
import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from models import Payment, PaymentStatus, PaymentType
from schemas import PaymentCreate
from .exceptions import PreconditionFailedError
from .store import EntityStore

logger = logging.getLogger(__name__)


class BillingService:
     """Service class for payment-related business logic."""

     @staticmethod
     def generate_monthly_payments(
          store: EntityStore,
          tenants: Iterable,
          month: int,
          year: int
     ) -> Tuple[int, int]:
          """
          Create the pending rent payment of the given month for each tenant.

          Only tenants placed in a unit and carrying a rent are billed; the
          payment is due on the 1st. Tenants that already have a rent payment
          due that month are skipped. All payments are written in one batch.

          Args:
               store: Entity store
               tenants: Tenants to bill (already scoped by the caller)
               month: Month to bill (1-12)
               year: Year to bill

          Returns:
               (created, skipped) counts
          """
          due_date = datetime(year, month, 1)
          label = f"Rent for {calendar.month_name[month]} {year}"
          created = 0
          skipped = 0

          with store.batch():
               for tenant in tenants:
                    if not tenant.unit_id or not tenant.rent:
                         skipped += 1
                         continue

                    # Check if rent already exists for this month
                    existing = store.session.query(Payment).filter(
                         Payment.tenant_id == tenant.id,
                         Payment.type == PaymentType.RENT.value,
                         Payment.due_date == due_date,
                    ).first()
                    if existing:
                         skipped += 1
                         continue

                    unit = store.units.get_row(tenant.unit_id, required=True)
                    payment = PaymentCreate(
                         tenant_id=tenant.id,
                         unit_id=unit.id,
                         property_id=unit.property_id,
                         amount=tenant.rent,
                         type=PaymentType.RENT,
                         due_date=due_date,
                         status=PaymentStatus.PENDING,
                         description=label,
                    )
                    store.payments.insert(payment.model_dump())
                    created += 1

          logger.info("Generated %d rent payment(s) for %02d/%d, skipped %d", created, month, year, skipped)
          return created, skipped

     @staticmethod
     def mark_overdue_payments(store: EntityStore) -> int:
          """
          Mark all pending payments past their due date as overdue.

          This should be called by a scheduled job daily.

          Returns:
               Number of payments marked as overdue
          """
          now = store.now()
          count = 0
          with store.batch():
               overdue = store.session.query(Payment).filter(
                    Payment.status == PaymentStatus.PENDING.value,
                    Payment.due_date < now,
                    Payment.paid_date.is_(None),
               ).all()
               for payment in overdue:
                    store.payments.apply(payment, {"status": PaymentStatus.OVERDUE.value})
                    count += 1
          return count

     @staticmethod
     def record_payment(
          store: EntityStore,
          payment_id: str,
          method: str,
          reference_number: Optional[str] = None,
          paid_date: Optional[datetime] = None,
          amount: Optional[Decimal] = None
     ) -> None:
          """
          Mark a payment as paid.

          Args:
               store: Entity store
               payment_id: ID of the payment
               method: Payment method (cash, mpesa, bank_transfer, cheque)
               reference_number: Optional transaction reference
               paid_date: When it was paid (default: now)
               amount: Amount actually paid, if different from the scheduled amount

          Raises:
               NotFoundError: If the payment doesn't exist
               PreconditionFailedError: If the payment is already paid
          """
          with store.batch():
               payment = store.payments.get_row(payment_id, required=True)
               if payment.status == PaymentStatus.PAID.value:
                    raise PreconditionFailedError(f"payment {payment_id} is already paid")
               changes = {
                    "status": PaymentStatus.PAID.value,
                    "method": getattr(method, "value", method),
                    "paid_date": paid_date or store.now(),
               }
               if reference_number is not None:
                    changes["reference_number"] = reference_number
               if amount is not None:
                    changes["amount"] = amount
               store.payments.apply(payment, changes)
