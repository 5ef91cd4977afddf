# models/user.py
import enum

from sqlalchemy import Column, Integer, String, DateTime, JSON
from .base import Base, utcnow


class UserRole(str, enum.Enum):
     SUPER_ADMIN = "super_admin"
     ADMIN = "admin"


class User(Base):
     """
     User model - role record for an identity-provider account.
     The id is the provider's uid; property_ids only matter for admins.
     """
     __tablename__ = "users"

     id = Column(String(128), primary_key=True)
     email = Column(String(255), unique=True, nullable=False, index=True)
     name = Column(String(255), nullable=False)
     role = Column(String(20), nullable=False, default=UserRole.ADMIN.value)
     property_ids = Column(JSON, nullable=False, default=list)

     created_at = Column(DateTime, default=utcnow, nullable=False)
     updated_at = Column(DateTime, default=utcnow, nullable=False)
     version = Column(Integer, nullable=False)

     __mapper_args__ = {"version_id_col": version}

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
