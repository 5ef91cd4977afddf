# models/payment.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime
from .base import Base, new_id, utcnow


class PaymentType(str, enum.Enum):
     RENT = "rent"
     DEPOSIT = "deposit"
     LATE_FEE = "late_fee"
     MAINTENANCE = "maintenance"
     UTILITIES = "utilities"


class PaymentMethod(str, enum.Enum):
     CASH = "cash"
     MPESA = "mpesa"
     BANK_TRANSFER = "bank_transfer"
     CHEQUE = "cheque"


class PaymentStatus(str, enum.Enum):
     """Enumeration for payment status."""
     PENDING = "pending"
     PAID = "paid"
     OVERDUE = "overdue"
     PARTIAL = "partial"


class Payment(Base):
     """
     Payment model - money owed or received for a tenant's unit.

     An overdue payment never carries a paid_date and is always past due.
     """
     __tablename__ = "payments"

     id = Column(String(36), primary_key=True, default=new_id)

     tenant_id = Column(String(36), nullable=False, index=True)
     tenant_name = Column(String(255), nullable=True)
     unit_id = Column(String(36), nullable=False, index=True)
     unit_number = Column(String(50), nullable=True)
     property_id = Column(String(36), nullable=False, index=True)
     property_name = Column(String(255), nullable=True)

     # Payment details
     amount = Column(Numeric(12, 2), nullable=False)
     type = Column(String(20), nullable=False, default=PaymentType.RENT.value)
     method = Column(String(20), nullable=True)
     reference_number = Column(String(100), nullable=True)
     description = Column(Text, nullable=True)
     due_date = Column(DateTime, nullable=False, index=True)
     paid_date = Column(DateTime, nullable=True)
     status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True)

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False)
     updated_at = Column(DateTime, default=utcnow, nullable=False)
     version = Column(Integer, nullable=False)

     __mapper_args__ = {"version_id_col": version}

     def __repr__(self):
          return f"<Payment(id={self.id}, amount={self.amount}, status='{self.status}', due_date={self.due_date})>"
