# schemas/site.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SiteCreate(BaseModel):
     name: str = Field(..., min_length=1, max_length=255)


class SiteResponse(BaseModel):
     id: str
     name: str
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class SiteListResponse(BaseModel):
     sites: List[SiteResponse]
     total: int
