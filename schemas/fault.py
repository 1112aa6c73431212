# schemas/fault.py
"""
Pydantic schemas for fault, comment and resolution API request/response validation.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.fault import FaultPriority, FaultStatus


class ResolutionInput(BaseModel):
     """Data recorded when a fault is resolved."""
     description: str = Field(..., description="How the fault was fixed")
     materials: List[str] = Field(default_factory=list, description="Materials used; blank entries are dropped")
     completed_at: Optional[datetime] = Field(None, description="Completion time, defaults to now")


class ResolutionUpdate(BaseModel):
     """Edit an existing resolution without changing the fault status."""
     description: Optional[str] = None
     materials: Optional[List[str]] = None
     completed_at: Optional[datetime] = None


class FaultCreate(BaseModel):
     """Schema for creating a new fault."""
     title: str = Field(..., max_length=255)
     description: str = Field("", description="Free-text description")
     location: str = Field("", max_length=500, description="Free-text location on the site")
     site_id: str = Field(..., description="Site the fault belongs to")
     priority: FaultPriority = Field(default=FaultPriority.MEDIUM)
     status: FaultStatus = Field(default=FaultStatus.OPEN)
     assigned_to: Optional[str] = Field(None, description="Technician or engineer id")
     created_at: Optional[datetime] = Field(None, description="Defaults to now")
     resolution: Optional[ResolutionInput] = Field(
          None, description="Required when the fault is created already resolved"
     )

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "title": "İnverter arızası",
                    "description": "3 numaralı inverter hata veriyor",
                    "location": "B blok çatı",
                    "site_id": "6c1f3f0e-1b7c-4f5e-9a8e-2a4d1c0b9e11",
                    "priority": "high",
                    "status": "open",
               }
          }
     )


class FaultUpdate(BaseModel):
     """
     Schema for the general edit action. Only provided fields are changed;
     assigned_to may be sent as null to unassign.
     """
     title: Optional[str] = Field(None, max_length=255)
     description: Optional[str] = None
     location: Optional[str] = Field(None, max_length=500)
     site_id: Optional[str] = None
     priority: Optional[FaultPriority] = None
     status: Optional[FaultStatus] = None
     assigned_to: Optional[str] = None
     created_at: Optional[datetime] = None
     resolution_completed_at: Optional[datetime] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "status": "in-progress",
                    "assigned_to": "0d5a2c1e-8f7b-4d3a-9c2e-1b0a9f8e7d6c",
               }
          }
     )


class CommentCreate(BaseModel):
     message: str = Field(..., description="Comment text; whitespace-only messages are rejected")


class CommentResponse(BaseModel):
     id: str
     author_id: str
     author_name: str
     message: str
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class ResolutionResponse(BaseModel):
     description: str
     materials: List[str]
     completed_at: datetime
     completed_by: str
     photos: List[str]

     model_config = ConfigDict(from_attributes=True)


class DurationResponse(BaseModel):
     total_hours: int
     days: int
     hours: int
     label: str
     resolved: bool


class FaultPermissions(BaseModel):
     can_view: bool
     can_edit: bool
     can_delete: bool
     can_comment: bool
     can_resolve: bool


class FaultResponse(BaseModel):
     """Schema for fault response."""
     id: str
     short_id: str
     title: str
     description: str
     location: str
     site_id: str
     site_name: Optional[str] = None
     status: FaultStatus
     priority: FaultPriority
     created_at: datetime
     updated_at: datetime
     created_by: Optional[str] = None  # only shown to managing roles
     assigned_to: Optional[str] = None
     photos: List[str] = Field(default_factory=list)
     comments: List[CommentResponse] = Field(default_factory=list)
     resolution: Optional[ResolutionResponse] = None
     elapsed: DurationResponse
     permissions: FaultPermissions


class FaultListResponse(BaseModel):
     faults: List[FaultResponse]
     total: int
