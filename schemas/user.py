# schemas/user.py
"""
Pydantic schemas for User API request/response validation.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.user import UserRole


class UserCreate(BaseModel):
     """Schema for registering an identity-provider account with a role."""
     id: str = Field(..., min_length=1, max_length=128, description="Identity provider uid")
     email: str = Field(..., min_length=3, max_length=255)
     name: str = Field(..., min_length=1, max_length=255)
     role: UserRole = UserRole.ADMIN
     property_ids: List[str] = Field(default_factory=list)

     model_config = ConfigDict(
          extra="forbid",
          use_enum_values=True,
          validate_default=True,
          json_schema_extra={
               "example": {
                    "id": "uid-123",
                    "email": "manager@example.com",
                    "name": "Grace",
                    "role": "admin",
                    "property_ids": ["3f9c2a"],
               }
          },
     )


class UserUpdate(BaseModel):
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     role: Optional[UserRole] = None
     property_ids: Optional[List[str]] = None

     model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)


class UserRead(BaseModel):
     """Schema for user response."""
     id: str
     email: str
     name: str
     role: str
     property_ids: List[str] = Field(default_factory=list)
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(from_attributes=True)
