# schemas/unit.py
"""
Pydantic schemas for Unit API request/response validation.

status, tenant_id and tenant_name are absent from the write schemas: only the
occupancy coordinator moves a unit between vacant, occupied and maintenance.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.unit import UnitStatus, UnitType
from .common import Money


class UnitCreate(BaseModel):
     """Schema for creating a new unit (always created vacant)."""
     property_id: str = Field(..., min_length=1)
     unit_number: str = Field(..., min_length=1, max_length=50)
     type: UnitType = UnitType.STUDIO
     rent: Money
     deposit: Money = 0

     model_config = ConfigDict(
          extra="forbid",
          use_enum_values=True,
          validate_default=True,
          json_schema_extra={
               "example": {
                    "property_id": "3f9c2a",
                    "unit_number": "A1",
                    "type": "2_bedroom",
                    "rent": 25000,
                    "deposit": 50000,
               }
          },
     )


class UnitUpdate(BaseModel):
     """Schema for updating a unit."""
     unit_number: Optional[str] = Field(None, min_length=1, max_length=50)
     type: Optional[UnitType] = None
     rent: Optional[Money] = None
     deposit: Optional[Money] = None

     model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)


class UnitRead(BaseModel):
     """Schema for unit response."""
     id: str
     property_id: str
     property_name: Optional[str] = None
     unit_number: str
     type: UnitType
     rent: Decimal
     deposit: Decimal
     status: UnitStatus
     tenant_id: Optional[str] = None
     tenant_name: Optional[str] = None
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(from_attributes=True)


class AssignTenantRequest(BaseModel):
     tenant_id: str = Field(..., min_length=1)

     model_config = ConfigDict(extra="forbid")
