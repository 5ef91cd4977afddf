# models/property.py
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime
from .base import Base, new_id, utcnow


class PropertyType(str, enum.Enum):
     RESIDENTIAL = "residential"
     COMMERCIAL = "commercial"
     MIXED = "mixed"


class Property(Base):
     """
     Property model - a building or estate that owns units.
     Stored in the 'properties' collection.
     """
     __tablename__ = "properties"

     id = Column(String(36), primary_key=True, default=new_id)
     name = Column(String(255), nullable=False)
     address = Column(String(500), nullable=False)
     description = Column(Text, nullable=True)
     type = Column(String(20), nullable=False, default=PropertyType.RESIDENTIAL.value)

     # Best-effort cache of the unit count, kept by the store
     total_units = Column(Integer, default=0, nullable=False)

     manager_id = Column(String(128), nullable=True, index=True)
     manager_name = Column(String(255), nullable=True)

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False)
     updated_at = Column(DateTime, default=utcnow, nullable=False)
     version = Column(Integer, nullable=False)

     __mapper_args__ = {"version_id_col": version}

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.name}')>"
