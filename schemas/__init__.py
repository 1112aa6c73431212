# schemas/__init__.py
from .fault import (
     FaultCreate,
     FaultUpdate,
     FaultResponse,
     FaultListResponse,
     CommentCreate,
     ResolutionInput,
     ResolutionUpdate,
)
from .user import (
     LoginRequest,
     LoginResponse,
     MeResponse,
     TeamMemberCreate,
     CustomerCreate,
     UserUpdate,
     UserResponse,
     UserListResponse,
)
from .site import SiteCreate, SiteResponse, SiteListResponse
from .metrics import FaultSummaryResponse, SiteSummaryResponse, TeamPerformanceResponse
from .duty_check import DutyCheckCreate, DutyCheckResponse, DutyCheckListResponse, ActiveSlotResponse

__all__ = [
     "FaultCreate",
     "FaultUpdate",
     "FaultResponse",
     "FaultListResponse",
     "CommentCreate",
     "ResolutionInput",
     "ResolutionUpdate",
     "LoginRequest",
     "LoginResponse",
     "MeResponse",
     "TeamMemberCreate",
     "CustomerCreate",
     "UserUpdate",
     "UserResponse",
     "UserListResponse",
     "SiteCreate",
     "SiteResponse",
     "SiteListResponse",
     "FaultSummaryResponse",
     "SiteSummaryResponse",
     "TeamPerformanceResponse",
     "DutyCheckCreate",
     "DutyCheckResponse",
     "DutyCheckListResponse",
     "ActiveSlotResponse",
]
