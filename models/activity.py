# models/activity.py
"""
Activity model - append-only feed of what users did (shown on the dashboard).
"""
from sqlalchemy import Column, Integer, String, DateTime
from .base import Base, new_id, utcnow


class Activity(Base):
     __tablename__ = "activities"

     id = Column(String(36), primary_key=True, default=new_id)
     user_id = Column(String(128), nullable=False, index=True)
     action = Column(String(500), nullable=False)
     type = Column(String(20), nullable=False)  # property, unit, tenant, lease, payment, maintenance
     property_id = Column(String(36), nullable=True, index=True)

     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
     updated_at = Column(DateTime, default=utcnow, nullable=False)
     version = Column(Integer, nullable=False)

     __mapper_args__ = {"version_id_col": version}

     def __repr__(self):
          return f"<Activity(id={self.id}, user_id={self.user_id}, type='{self.type}')>"
