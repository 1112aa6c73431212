# schemas/metrics.py
"""
Pydantic schemas for fault statistics and team performance.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from models.user import Role


class SiteSummaryResponse(BaseModel):
     site_id: str
     site_name: str
     open: int
     in_progress: int
     pending: int
     resolved: int
     total: int


class FaultSummaryResponse(BaseModel):
     open: int
     in_progress: int
     pending: int
     resolved: int
     total: int
     resolution_rate: float = Field(..., ge=0, le=1, description="resolved / total, 0 when there are no faults")
     average_resolution_hours: float
     site_id: Optional[str] = None
     sites: List[SiteSummaryResponse] = Field(
          default_factory=list, description="Per-site counts; only filled when no site is selected"
     )


class MemberPerformanceResponse(BaseModel):
     user_id: str
     name: str
     role: Role
     assigned_count: int
     resolved_count: int
     resolution_rate: float
     average_resolution_hours: float


class ManagerEntry(BaseModel):
     user_id: str
     name: str


class TeamPerformanceResponse(BaseModel):
     members: List[MemberPerformanceResponse]
     managers: List[ManagerEntry]
     average_resolution_rate: float
     average_resolution_hours: float
