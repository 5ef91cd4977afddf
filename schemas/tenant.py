# schemas/tenant.py
"""
Pydantic schemas for Tenant API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import Money, UtcDateTime


class EmergencyContact(BaseModel):
     name: str = ""
     phone: str = ""
     relationship: str = ""


class TenantCreate(BaseModel):
     """
     Schema for creating a new tenant.

     When unit_id is given the tenant is assigned to that (vacant) unit in the
     same batch; property_id alone registers the tenant against a property.
     """
     name: str = Field(..., min_length=1, max_length=255)
     email: str = Field(..., min_length=3, max_length=255)
     phone: str = Field(..., min_length=1, max_length=50)
     id_number: str = Field(..., min_length=1, max_length=100)
     unit_id: Optional[str] = None
     property_id: Optional[str] = None
     lease_start_date: Optional[UtcDateTime] = None
     lease_end_date: Optional[UtcDateTime] = None
     rent: Optional[Money] = None
     deposit: Optional[Money] = None
     emergency_contact: EmergencyContact = Field(default_factory=EmergencyContact)

     model_config = ConfigDict(
          extra="forbid",
          json_schema_extra={
               "example": {
                    "name": "Jane Wanjiku",
                    "email": "jane@example.com",
                    "phone": "+254700000000",
                    "id_number": "12345678",
                    "unit_id": "7b1e0d",
                    "emergency_contact": {"name": "John", "phone": "+254711111111", "relationship": "brother"},
               }
          },
     )


class TenantUpdate(BaseModel):
     """Schema for updating a tenant. The unit assignment goes through the occupancy endpoints."""
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     email: Optional[str] = Field(None, min_length=3, max_length=255)
     phone: Optional[str] = Field(None, min_length=1, max_length=50)
     id_number: Optional[str] = Field(None, min_length=1, max_length=100)
     lease_start_date: Optional[UtcDateTime] = None
     lease_end_date: Optional[UtcDateTime] = None
     rent: Optional[Money] = None
     deposit: Optional[Money] = None
     emergency_contact: Optional[EmergencyContact] = None

     model_config = ConfigDict(extra="forbid")


class TenantRead(BaseModel):
     """Schema for tenant response."""
     id: str
     name: str
     email: str
     phone: str
     id_number: str
     unit_id: Optional[str] = None
     unit_number: Optional[str] = None
     property_id: Optional[str] = None
     property_name: Optional[str] = None
     lease_start_date: Optional[datetime] = None
     lease_end_date: Optional[datetime] = None
     rent: Optional[Decimal] = None
     deposit: Optional[Decimal] = None
     emergency_contact: EmergencyContact = Field(default_factory=EmergencyContact)
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(from_attributes=True)
