# services/duty_check_service.py
"""
Guard patrol records. A check can only be logged within SLOT_WINDOW_MINUTES
of one of the scheduled slots, measured on local minutes-of-day (the window
does not wrap around midnight).
"""
from datetime import datetime
from typing import Iterable, Optional

import structlog
from sqlalchemy.orm import Session

from errors import AuthorizationError, ValidationError
from models import DutyCheck
from schemas.duty_check import DutyCheckCreate
from services import photo_service
from services.authorization import require_duty_logging, resolve_capabilities
from services.site_service import SiteService
from utils.timeutils import to_local, utcnow

logger = structlog.get_logger(__name__)

DAY_SLOTS = ("08:00", "12:00", "18:00")
NIGHT_SLOTS = ("00:00", "03:00", "07:00")
ALL_SLOTS = DAY_SLOTS + NIGHT_SLOTS
SLOT_WINDOW_MINUTES = 30


def _minutes_of_day(value: str) -> int:
     hours, minutes = value.split(":")
     return int(hours) * 60 + int(minutes)


def active_slot(local_now: datetime) -> Optional[str]:
     """The first scheduled slot within the window of local_now, else None."""
     current = local_now.hour * 60 + local_now.minute
     for slot in ALL_SLOTS:
          if abs(_minutes_of_day(slot) - current) <= SLOT_WINDOW_MINUTES:
               return slot
     return None


class DutyCheckService:

     @staticmethod
     def current_slot(now: Optional[datetime] = None) -> Optional[str]:
          return active_slot(to_local(now or utcnow()))

     @staticmethod
     def create_duty_check(
          db: Session,
          user,
          data: DutyCheckCreate,
          photos: Iterable = (),
          now: Optional[datetime] = None,
     ) -> DutyCheck:
          require_duty_logging(user)
          now = now or utcnow()

          site = SiteService.get_site(db, data.site_id)
          slot = active_slot(to_local(now))
          if slot is None:
               raise ValidationError("duty/outside-slot")

          photo_urls = photo_service.upload_photos(photos, photo_service.DUTY_CHECK_PHOTO_PREFIX)

          check = DutyCheck(
               guard_id=user.id,
               guard_name=user.name,
               site_id=site.id,
               site_name=site.name,
               checked_at=now,
               slot=slot,
               status=data.status,
               description=(data.description or "").strip(),
               photos=photo_urls,
               latitude=data.latitude,
               longitude=data.longitude,
          )
          db.add(check)
          db.flush()
          logger.info("duty_check_logged", check_id=check.id, site_id=site.id, slot=slot, guard_id=user.id)
          return check

     @staticmethod
     def list_duty_checks(db: Session, user, site_id: Optional[str] = None) -> list[DutyCheck]:
          """Managers see every check, guards only their own, newest first."""
          capabilities = resolve_capabilities(user)
          query = db.query(DutyCheck)
          if not capabilities.can_manage_users:
               if not capabilities.can_log_duty_checks:
                    raise AuthorizationError()
               query = query.filter(DutyCheck.guard_id == user.id)

          if site_id:
               query = query.filter(DutyCheck.site_id == site_id)
          return query.order_by(DutyCheck.checked_at.desc()).all()
