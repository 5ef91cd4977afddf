# schemas/property.py
"""
Pydantic schemas for Property API request/response validation.
"""
from datetime import datetime
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.property import PropertyType


class PropertyCreate(BaseModel):
     """Schema for creating a new property."""
     name: str = Field(..., min_length=1, max_length=255)
     address: str = Field(..., min_length=1, max_length=500)
     description: Optional[str] = None
     type: PropertyType = PropertyType.RESIDENTIAL
     manager_id: Optional[str] = None
     manager_name: Optional[str] = None

     model_config = ConfigDict(
          extra="forbid",
          use_enum_values=True,
          validate_default=True,
          json_schema_extra={
               "example": {
                    "name": "Sunrise Apartments",
                    "address": "12 Ngong Road, Nairobi",
                    "type": "residential",
               }
          },
     )


class PropertyUpdate(BaseModel):
     """Schema for updating a property. total_units is maintained by the store."""
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     address: Optional[str] = Field(None, min_length=1, max_length=500)
     description: Optional[str] = None
     type: Optional[PropertyType] = None
     manager_id: Optional[str] = None
     manager_name: Optional[str] = None

     model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)


class PropertyRead(BaseModel):
     """Schema for property response."""
     # A property is scoped by its own id rather than a property_id field
     scope_key: ClassVar[str] = "id"

     id: str
     name: str
     address: str
     description: Optional[str] = None
     type: PropertyType
     total_units: int = 0
     manager_id: Optional[str] = None
     manager_name: Optional[str] = None
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(from_attributes=True)
