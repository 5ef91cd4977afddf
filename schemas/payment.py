# schemas/payment.py
"""
Pydantic schemas for Payment API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.payment import PaymentMethod, PaymentStatus, PaymentType
from .common import Money, UtcDateTime


class PaymentCreate(BaseModel):
     """Schema for recording or scheduling a payment."""
     tenant_id: str = Field(..., min_length=1)
     unit_id: str = Field(..., min_length=1)
     property_id: str = Field(..., min_length=1)
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     type: PaymentType = PaymentType.RENT
     method: Optional[PaymentMethod] = None
     reference_number: Optional[str] = Field(None, max_length=100)
     description: Optional[str] = None
     due_date: UtcDateTime
     paid_date: Optional[UtcDateTime] = None
     status: PaymentStatus = PaymentStatus.PENDING

     model_config = ConfigDict(
          extra="forbid",
          use_enum_values=True,
          validate_default=True,
          json_schema_extra={
               "example": {
                    "tenant_id": "a41c9e",
                    "unit_id": "7b1e0d",
                    "property_id": "3f9c2a",
                    "amount": 25000,
                    "type": "rent",
                    "method": "mpesa",
                    "reference_number": "QK12XYZ",
                    "due_date": "2026-11-01T00:00:00Z",
                    "status": "paid",
               }
          },
     )


class PaymentUpdate(BaseModel):
     """Schema for updating a payment."""
     amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     type: Optional[PaymentType] = None
     method: Optional[PaymentMethod] = None
     reference_number: Optional[str] = Field(None, max_length=100)
     description: Optional[str] = None
     due_date: Optional[UtcDateTime] = None
     paid_date: Optional[UtcDateTime] = None
     status: Optional[PaymentStatus] = None

     model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)


class RecordPaymentRequest(BaseModel):
     """Schema for marking a scheduled payment as paid."""
     method: PaymentMethod
     reference_number: Optional[str] = Field(None, max_length=100)
     paid_date: Optional[UtcDateTime] = None
     amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)

     model_config = ConfigDict(extra="forbid")


class GenerateMonthlyPaymentsRequest(BaseModel):
     month: int = Field(..., ge=1, le=12)
     year: int = Field(..., ge=2000, le=2100)
     property_id: Optional[str] = None

     model_config = ConfigDict(extra="forbid")


class PaymentRead(BaseModel):
     """Schema for payment response."""
     id: str
     tenant_id: str
     tenant_name: Optional[str] = None
     unit_id: str
     unit_number: Optional[str] = None
     property_id: str
     property_name: Optional[str] = None
     amount: Decimal
     type: PaymentType
     method: Optional[PaymentMethod] = None
     reference_number: Optional[str] = None
     description: Optional[str] = None
     due_date: datetime
     paid_date: Optional[datetime] = None
     status: PaymentStatus
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(from_attributes=True)
