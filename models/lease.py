# models/lease.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Boolean, Text, DateTime, JSON
from .base import Base, new_id, utcnow


class LeaseType(str, enum.Enum):
     FIXED = "fixed"
     MONTH_TO_MONTH = "month_to_month"
     YEARLY = "yearly"


class LeaseStatus(str, enum.Enum):
     """
     Lease status. TERMINATED and RENEWED are explicit states; the other three
     are derived from end_date and only cached in the stored column.
     """
     ACTIVE = "active"
     EXPIRING_SOON = "expiring_soon"
     EXPIRED = "expired"
     TERMINATED = "terminated"
     RENEWED = "renewed"


EXPLICIT_LEASE_STATUSES = frozenset({LeaseStatus.TERMINATED, LeaseStatus.RENEWED})


class Lease(Base):
     """
     Lease model - rental agreement between a tenant and a unit.
     Stored in the 'leases' collection.
     """
     __tablename__ = "leases"

     id = Column(String(36), primary_key=True, default=new_id)
     tenant_id = Column(String(36), nullable=False, index=True)
     tenant_name = Column(String(255), nullable=True)
     unit_id = Column(String(36), nullable=False, index=True)
     unit_number = Column(String(50), nullable=True)
     property_id = Column(String(36), nullable=False, index=True)
     property_name = Column(String(255), nullable=True)

     # Pricing
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     security_deposit = Column(Numeric(12, 2), nullable=False, default=0)

     # Lease period
     start_date = Column(DateTime, nullable=False)
     end_date = Column(DateTime, nullable=False, index=True)
     lease_type = Column(String(20), nullable=False, default=LeaseType.FIXED.value)
     status = Column(String(20), nullable=False, default=LeaseStatus.ACTIVE.value, index=True)

     # Renewal
     renewal_option = Column(Boolean, default=False, nullable=False)
     last_renewal_date = Column(DateTime, nullable=True)
     renewal_notice_date = Column(DateTime, nullable=True)
     terminated_at = Column(DateTime, nullable=True)

     # Terms
     special_terms = Column(Text, nullable=True)
     pet_policy = Column(String(20), nullable=True)  # no_pets, cats_allowed, dogs_allowed, all_pets
     smoking_policy = Column(String(20), nullable=True)  # no_smoking, smoking_allowed
     utilities_included = Column(JSON, nullable=False, default=list)
     parking_spaces = Column(Integer, nullable=True)
     late_fee_penalty = Column(Numeric(12, 2), nullable=True)
     early_termination_fee = Column(Numeric(12, 2), nullable=True)
     maintenance_responsibility = Column(String(20), nullable=True)  # landlord, tenant, shared
     document_url = Column(String(500), nullable=True)

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False)
     updated_at = Column(DateTime, default=utcnow, nullable=False)
     version = Column(Integer, nullable=False)

     __mapper_args__ = {"version_id_col": version}

     def __repr__(self):
          return f"<Lease(id={self.id}, tenant_id={self.tenant_id}, unit_id={self.unit_id}, status='{self.status}')>"
