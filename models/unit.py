# models/unit.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, DateTime
from .base import Base, new_id, utcnow


class UnitType(str, enum.Enum):
     STUDIO = "studio"
     ONE_BEDROOM = "1_bedroom"
     TWO_BEDROOM = "2_bedroom"
     THREE_BEDROOM = "3_bedroom"
     FOUR_BEDROOM = "4_bedroom"
     OFFICE = "office"
     SHOP = "shop"


class UnitStatus(str, enum.Enum):
     """Occupancy state. Only the occupancy coordinator moves a unit between these."""
     VACANT = "vacant"
     OCCUPIED = "occupied"
     MAINTENANCE = "maintenance"


class Unit(Base):
     """
     Unit model - individual units within a property.
     Stored in the 'units' collection.
     """
     __tablename__ = "units"

     id = Column(String(36), primary_key=True, default=new_id)
     property_id = Column(String(36), nullable=False, index=True)
     property_name = Column(String(255), nullable=True)

     unit_number = Column(String(50), nullable=False)
     type = Column(String(20), nullable=False, default=UnitType.STUDIO.value)
     rent = Column(Numeric(12, 2), nullable=False, default=0)
     deposit = Column(Numeric(12, 2), nullable=False, default=0)
     status = Column(String(20), default=UnitStatus.VACANT.value, nullable=False, index=True)

     # Current occupant
     tenant_id = Column(String(36), nullable=True, index=True)
     tenant_name = Column(String(255), nullable=True)

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False)
     updated_at = Column(DateTime, default=utcnow, nullable=False)
     version = Column(Integer, nullable=False)

     __mapper_args__ = {"version_id_col": version}

     def __repr__(self):
          return f"<Unit(id={self.id}, unit_number='{self.unit_number}', status='{self.status}')>"
