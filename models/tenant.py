# models/tenant.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, JSON
from .base import Base, new_id, utcnow


class Tenant(Base):
     """
     Tenant model - a person renting (or registered to rent) a unit.
     Stored in the 'tenants' collection.
     """
     __tablename__ = "tenants"

     id = Column(String(36), primary_key=True, default=new_id)

     # Personal info
     name = Column(String(255), nullable=False, index=True)
     email = Column(String(255), nullable=False)
     phone = Column(String(50), nullable=False)
     id_number = Column(String(100), nullable=False)

     # Current assignment; unit_id is only written by the occupancy coordinator
     unit_id = Column(String(36), nullable=True, index=True)
     unit_number = Column(String(50), nullable=True)
     property_id = Column(String(36), nullable=True, index=True)
     property_name = Column(String(255), nullable=True)

     # Terms of the current lease
     lease_start_date = Column(DateTime, nullable=True)
     lease_end_date = Column(DateTime, nullable=True)
     rent = Column(Numeric(12, 2), nullable=True)
     deposit = Column(Numeric(12, 2), nullable=True)

     # {"name": ..., "phone": ..., "relationship": ...}
     emergency_contact = Column(JSON, nullable=False, default=dict)

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False)
     updated_at = Column(DateTime, default=utcnow, nullable=False)
     version = Column(Integer, nullable=False)

     __mapper_args__ = {"version_id_col": version}

     def __repr__(self):
          return f"<Tenant(id={self.id}, name='{self.name}', unit_id={self.unit_id})>"
