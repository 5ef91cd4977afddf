# schemas/lease.py
"""
Pydantic schemas for Lease API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.lease import LeaseStatus, LeaseType
from .common import Money, UtcDateTime

# Lease columns an update may change but never clear
NOT_NULL_ON_UPDATE = (
     "monthly_rent", "security_deposit", "lease_type", "renewal_option", "utilities_included",
)


class LeaseTerms(BaseModel):
     """Policy and terms fields shared by create and update."""
     special_terms: Optional[str] = None
     pet_policy: Optional[str] = Field(None, pattern="^(no_pets|cats_allowed|dogs_allowed|all_pets)$")
     smoking_policy: Optional[str] = Field(None, pattern="^(no_smoking|smoking_allowed)$")
     utilities_included: Optional[List[str]] = None
     parking_spaces: Optional[int] = Field(None, ge=0)
     late_fee_penalty: Optional[Money] = None
     early_termination_fee: Optional[Money] = None
     maintenance_responsibility: Optional[str] = Field(None, pattern="^(landlord|tenant|shared)$")
     document_url: Optional[str] = Field(None, max_length=500)
     renewal_option: Optional[bool] = None
     renewal_notice_date: Optional[UtcDateTime] = None


class LeaseCreate(LeaseTerms):
     """Schema for creating a new lease. Leases are always created active."""
     tenant_id: str = Field(..., min_length=1)
     unit_id: str = Field(..., min_length=1)
     property_id: str = Field(..., min_length=1)
     monthly_rent: Money
     security_deposit: Money = 0
     start_date: UtcDateTime
     end_date: UtcDateTime
     lease_type: LeaseType = LeaseType.FIXED

     model_config = ConfigDict(
          extra="forbid",
          use_enum_values=True,
          validate_default=True,
          json_schema_extra={
               "example": {
                    "tenant_id": "a41c9e",
                    "unit_id": "7b1e0d",
                    "property_id": "3f9c2a",
                    "monthly_rent": 25000,
                    "security_deposit": 50000,
                    "start_date": "2026-11-01T00:00:00Z",
                    "end_date": "2027-10-31T00:00:00Z",
                    "lease_type": "fixed",
               }
          },
     )

     @model_validator(mode="after")
     def _check_dates(self):
          if self.end_date <= self.start_date:
               raise ValueError("end_date must be after start_date")
          return self


class LeaseUpdate(LeaseTerms):
     """
     Schema for updating lease terms. Status, dates and parties change only
     through create / renew / terminate.
     """
     monthly_rent: Optional[Money] = None
     security_deposit: Optional[Money] = None
     lease_type: Optional[LeaseType] = None

     model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)

     @model_validator(mode="before")
     @classmethod
     def _reject_nulls(cls, data):
          # Leaving a field out keeps it; these columns cannot be cleared
          if isinstance(data, dict):
               nulls = sorted(field for field in NOT_NULL_ON_UPDATE if field in data and data[field] is None)
               if nulls:
                    raise ValueError(f"{', '.join(nulls)} cannot be null")
          return data


class RenewLeaseRequest(BaseModel):
     """Schema for renewing a lease."""
     new_end_date: UtcDateTime
     special_terms: Optional[str] = None

     model_config = ConfigDict(
          extra="forbid",
          json_schema_extra={"example": {"new_end_date": "2027-10-31T00:00:00Z"}},
     )


class LeaseRead(BaseModel):
     """Schema for lease response. status is the derived status when served over the API."""
     id: str
     tenant_id: str
     tenant_name: Optional[str] = None
     unit_id: str
     unit_number: Optional[str] = None
     property_id: str
     property_name: Optional[str] = None
     monthly_rent: Decimal
     security_deposit: Decimal
     start_date: datetime
     end_date: datetime
     lease_type: LeaseType
     status: LeaseStatus
     renewal_option: bool = False
     last_renewal_date: Optional[datetime] = None
     renewal_notice_date: Optional[datetime] = None
     terminated_at: Optional[datetime] = None
     special_terms: Optional[str] = None
     pet_policy: Optional[str] = None
     smoking_policy: Optional[str] = None
     utilities_included: List[str] = Field(default_factory=list)
     parking_spaces: Optional[int] = None
     late_fee_penalty: Optional[Decimal] = None
     early_termination_fee: Optional[Decimal] = None
     maintenance_responsibility: Optional[str] = None
     document_url: Optional[str] = None
     created_at: datetime
     updated_at: datetime

     # Filled in by the lifecycle engine, never stored
     days_remaining: Optional[int] = None

     model_config = ConfigDict(from_attributes=True)
