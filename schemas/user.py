# schemas/user.py
"""
Pydantic schemas for authentication, team members and customers.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from models.user import Role


class LoginRequest(BaseModel):
     email: EmailStr
     password: str


class UserResponse(BaseModel):
     id: str
     email: str
     role: Role
     name: str
     photo_url: Optional[str] = None
     phone: Optional[str] = None
     company: Optional[str] = None
     address: Optional[str] = None
     site_ids: Optional[List[str]] = None
     is_active: bool
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class CapabilitiesResponse(BaseModel):
     can_manage: bool
     can_view_all_sites: bool
     can_manage_users: bool
     can_log_duty_checks: bool


class LoginResponse(BaseModel):
     token: str
     token_type: str = "bearer"
     user: UserResponse
     capabilities: CapabilitiesResponse


class MeResponse(BaseModel):
     user: UserResponse
     capabilities: CapabilitiesResponse


class TeamMemberCreate(BaseModel):
     """Schema for creating a technician, engineer, manager or guard."""
     email: EmailStr
     name: str = Field(..., min_length=1, max_length=200)
     role: Role = Field(default=Role.TECHNICIAN)
     password: str
     password_confirm: str
     phone: Optional[str] = None
     photo_url: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "email": "tekniker@example.com",
                    "name": "Ali Yılmaz",
                    "role": "technician",
                    "password": "gizli123",
                    "password_confirm": "gizli123",
               }
          }
     )


class CustomerCreate(BaseModel):
     """Schema for creating a customer scoped to one or more sites."""
     email: EmailStr
     name: str = Field(..., min_length=1, max_length=200)
     password: str
     password_confirm: str
     site_ids: List[str] = Field(default_factory=list)
     company: Optional[str] = None
     phone: Optional[str] = None
     address: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "email": "musteri@example.com",
                    "name": "Ayşe Demir",
                    "company": "Güneş Enerji A.Ş.",
                    "password": "gizli123",
                    "password_confirm": "gizli123",
                    "site_ids": ["6c1f3f0e-1b7c-4f5e-9a8e-2a4d1c0b9e11"],
               }
          }
     )


class UserUpdate(BaseModel):
     """
     Profile edit. name/phone/photo_url/company/address are self-editable;
     role, site_ids and is_active are manager-only.
     """
     name: Optional[str] = Field(None, min_length=1, max_length=200)
     phone: Optional[str] = None
     photo_url: Optional[str] = None
     company: Optional[str] = None
     address: Optional[str] = None
     role: Optional[Role] = None
     site_ids: Optional[List[str]] = None
     is_active: Optional[bool] = None
     password: Optional[str] = None
     password_confirm: Optional[str] = None
     current_password: Optional[str] = None


class UserListResponse(BaseModel):
     users: List[UserResponse]
     total: int
