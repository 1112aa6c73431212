# models/__init__.py
from .base import Base
from .user import User, Role
from .site import Site
from .fault import Fault, Comment, Resolution, FaultStatus, FaultPriority
from .duty_check import DutyCheck, DutyCheckStatus
from .revoked_token import RevokedToken

__all__ = [
     "Base",
     "User",
     "Role",
     "Site",
     "Fault",
     "Comment",
     "Resolution",
     "FaultStatus",
     "FaultPriority",
     "DutyCheck",
     "DutyCheckStatus",
     "RevokedToken",
]
