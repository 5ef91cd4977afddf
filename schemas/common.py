# schemas/common.py
"""
Shared field types for the request/response schemas.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, Field


def _to_naive_utc(value: datetime) -> datetime:
     if value.tzinfo is not None:
          value = value.astimezone(timezone.utc).replace(tzinfo=None)
     return value


# Every timestamp is stored as naive UTC; aware inputs are converted on the way in
UtcDateTime = Annotated[datetime, AfterValidator(_to_naive_utc)]

Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
