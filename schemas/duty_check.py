# schemas/duty_check.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.duty_check import DutyCheckStatus


class DutyCheckCreate(BaseModel):
     site_id: str
     status: DutyCheckStatus = Field(default=DutyCheckStatus.NORMAL)
     description: str = ""
     latitude: float = Field(..., ge=-90, le=90)
     longitude: float = Field(..., ge=-180, le=180)


class DutyCheckResponse(BaseModel):
     id: str
     guard_id: str
     guard_name: str
     site_id: str
     site_name: str
     checked_at: datetime
     slot: str
     status: DutyCheckStatus
     description: str
     photos: List[str]
     latitude: float
     longitude: float

     model_config = ConfigDict(from_attributes=True)


class DutyCheckListResponse(BaseModel):
     checks: List[DutyCheckResponse]
     total: int


class ActiveSlotResponse(BaseModel):
     slot: Optional[str] = None
     slots: List[str]
