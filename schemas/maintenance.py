# schemas/maintenance.py
"""
Pydantic schemas for Maintenance API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.maintenance import MaintenanceCategory, MaintenancePriority, MaintenanceStatus
from .common import Money, UtcDateTime


class MaintenanceCreate(BaseModel):
     """Schema for opening a maintenance request."""
     property_id: str = Field(..., min_length=1)
     unit_id: Optional[str] = None
     tenant_id: Optional[str] = None
     title: str = Field(..., min_length=1, max_length=255)
     description: str = Field(..., min_length=1)
     category: MaintenanceCategory = MaintenanceCategory.OTHER
     priority: MaintenancePriority = MaintenancePriority.MEDIUM
     status: MaintenanceStatus = MaintenanceStatus.PENDING
     assigned_to: Optional[str] = None
     estimated_cost: Optional[Money] = None
     reported_date: Optional[UtcDateTime] = None
     scheduled_date: Optional[UtcDateTime] = None

     model_config = ConfigDict(
          extra="forbid",
          use_enum_values=True,
          validate_default=True,
          json_schema_extra={
               "example": {
                    "property_id": "3f9c2a",
                    "unit_id": "7b1e0d",
                    "title": "Leaking kitchen tap",
                    "description": "Tap drips constantly",
                    "category": "plumbing",
                    "priority": "medium",
               }
          },
     )


class MaintenanceUpdate(BaseModel):
     """Schema for updating a maintenance request."""
     unit_id: Optional[str] = None
     tenant_id: Optional[str] = None
     title: Optional[str] = Field(None, min_length=1, max_length=255)
     description: Optional[str] = Field(None, min_length=1)
     category: Optional[MaintenanceCategory] = None
     priority: Optional[MaintenancePriority] = None
     status: Optional[MaintenanceStatus] = None
     assigned_to: Optional[str] = None
     estimated_cost: Optional[Money] = None
     actual_cost: Optional[Money] = None
     scheduled_date: Optional[UtcDateTime] = None

     model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)


class MaintenanceRead(BaseModel):
     """Schema for maintenance response."""
     id: str
     property_id: str
     property_name: Optional[str] = None
     unit_id: Optional[str] = None
     unit_number: Optional[str] = None
     tenant_id: Optional[str] = None
     tenant_name: Optional[str] = None
     title: str
     description: str
     category: MaintenanceCategory
     priority: MaintenancePriority
     status: MaintenanceStatus
     assigned_to: Optional[str] = None
     estimated_cost: Optional[Decimal] = None
     actual_cost: Optional[Decimal] = None
     reported_date: Optional[datetime] = None
     scheduled_date: Optional[datetime] = None
     completed_at: Optional[datetime] = None
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(from_attributes=True)
