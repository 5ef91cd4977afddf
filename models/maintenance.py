# models/maintenance.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime
from .base import Base, new_id, utcnow


class MaintenanceCategory(str, enum.Enum):
     PLUMBING = "plumbing"
     ELECTRICAL = "electrical"
     HVAC = "hvac"
     STRUCTURAL = "structural"
     CLEANING = "cleaning"
     PEST_CONTROL = "pest_control"
     OTHER = "other"


class MaintenancePriority(str, enum.Enum):
     LOW = "low"
     MEDIUM = "medium"
     HIGH = "high"
     URGENT = "urgent"


class MaintenanceStatus(str, enum.Enum):
     PENDING = "pending"
     IN_PROGRESS = "in_progress"
     COMPLETED = "completed"
     CANCELLED = "cancelled"


OPEN_MAINTENANCE_STATUSES = frozenset({MaintenanceStatus.PENDING, MaintenanceStatus.IN_PROGRESS})


class Maintenance(Base):
     """
     Maintenance model - an upkeep request against a property or one of its units.
     Stored in the 'maintenance' collection.
     """
     __tablename__ = "maintenance"

     id = Column(String(36), primary_key=True, default=new_id)
     property_id = Column(String(36), nullable=False, index=True)
     property_name = Column(String(255), nullable=True)
     unit_id = Column(String(36), nullable=True, index=True)
     unit_number = Column(String(50), nullable=True)
     tenant_id = Column(String(36), nullable=True, index=True)
     tenant_name = Column(String(255), nullable=True)

     title = Column(String(255), nullable=False)
     description = Column(Text, nullable=False)
     category = Column(String(20), nullable=False, default=MaintenanceCategory.OTHER.value)
     priority = Column(String(20), nullable=False, default=MaintenancePriority.MEDIUM.value)
     status = Column(String(20), nullable=False, default=MaintenanceStatus.PENDING.value, index=True)
     assigned_to = Column(String(255), nullable=True)
     estimated_cost = Column(Numeric(12, 2), nullable=True)
     actual_cost = Column(Numeric(12, 2), nullable=True)

     reported_date = Column(DateTime, nullable=True)
     scheduled_date = Column(DateTime, nullable=True)
     completed_at = Column(DateTime, nullable=True)

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
     updated_at = Column(DateTime, default=utcnow, nullable=False)
     version = Column(Integer, nullable=False)

     __mapper_args__ = {"version_id_col": version}

     def __repr__(self):
          return f"<Maintenance(id={self.id}, title='{self.title}', status='{self.status}')>"
