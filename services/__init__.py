# services/__init__.py
from .fault_service import FaultService
from .site_service import SiteService
from .user_service import UserService
from .duty_check_service import DutyCheckService

__all__ = [
     "FaultService",
     "SiteService",
     "UserService",
     "DutyCheckService",
]
