# schemas/activity.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityCreate(BaseModel):
     user_id: str = Field(..., min_length=1)
     action: str = Field(..., min_length=1, max_length=500)
     type: str = Field(..., pattern="^(property|unit|tenant|lease|payment|maintenance)$")
     property_id: Optional[str] = None

     model_config = ConfigDict(extra="forbid")


class ActivityRead(BaseModel):
     id: str
     user_id: str
     action: str
     type: str
     property_id: Optional[str] = None
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(from_attributes=True)
