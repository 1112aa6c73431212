# services/fault_service.py
"""
Fault Service - the fault lifecycle.

States: open, in-progress, pending, resolved. A fault reaches resolved
only through resolve_fault (or by being created resolved with a
resolution); the resolution row exists if and only if the status is
resolved. Every operation re-checks the caller's capabilities before
touching storage.
"""
from datetime import datetime
from typing import Iterable, Optional

import structlog
from sqlalchemy import or_
from sqlalchemy.orm import Session

from errors import NotFoundError, ValidationError
from models import Comment, Fault, FaultStatus, Resolution, User
from models.user import ASSIGNABLE_ROLES
from schemas.fault import FaultCreate, ResolutionInput, ResolutionUpdate
from services import photo_service
from services.authorization import (
     require_comment,
     require_manage,
     require_resolve,
     require_view,
     visible_site_ids,
)
from services.site_service import SiteService
from utils.timeutils import to_naive_utc, utcnow

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = ("title", "description", "location", "site_id", "priority", "assigned_to")


def like_pattern(text: str) -> str:
     """Substring LIKE pattern with the wildcard characters escaped."""
     escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
     return f"%{escaped}%"


def clean_materials(materials: Optional[Iterable[str]]) -> list[str]:
     """Trim material names and drop blank entries, keeping order."""
     return [m.strip() for m in materials or [] if m and m.strip()]


class FaultService:
     """Service class for fault lifecycle operations."""

     # ------------------------------------------------------------------
     # Queries
     # ------------------------------------------------------------------

     @staticmethod
     def list_faults(
          db: Session,
          user,
          site_id: Optional[str] = None,
          status: Optional[FaultStatus] = None,
          created_from: Optional[datetime] = None,
          created_to: Optional[datetime] = None,
          search: Optional[str] = None,
     ) -> list[Fault]:
          """
          Faults visible to the user, newest first.

          Customers only ever see faults on their own sites; a customer with
          no sites, or filtering on a site outside their set, gets nothing.
          An empty site_id means all visible sites. search matches title or
          description case-insensitively.
          """
          site_id = site_id or None
          search = (search or "").strip()
          query = db.query(Fault)

          allowed = visible_site_ids(user)
          if allowed is not None:
               if not allowed:
                    return []
               if site_id is not None and site_id not in allowed:
                    return []
               query = query.filter(Fault.site_id.in_(allowed))

          if site_id:
               query = query.filter(Fault.site_id == site_id)
          if status is not None:
               query = query.filter(Fault.status == status)
          if created_from is not None:
               query = query.filter(Fault.created_at >= created_from)
          if created_to is not None:
               query = query.filter(Fault.created_at <= created_to)
          if search:
               pattern = like_pattern(search)
               query = query.filter(
                    or_(Fault.title.ilike(pattern, escape="\\"), Fault.description.ilike(pattern, escape="\\"))
               )

          return query.order_by(Fault.created_at.desc()).all()

     @staticmethod
     def get_fault(db: Session, user, fault_id: str) -> Fault:
          fault = db.get(Fault, fault_id)
          if fault is None:
               raise NotFoundError()
          require_view(user, fault)
          return fault

     # ------------------------------------------------------------------
     # Helpers
     # ------------------------------------------------------------------

     @staticmethod
     def _validate_assignee(db: Session, assignee_id: Optional[str]) -> None:
          if not assignee_id:
               return
          assignee = db.get(User, assignee_id)
          if assignee is None or assignee.role not in ASSIGNABLE_ROLES:
               raise ValidationError("validation/invalid-assignee")

     @staticmethod
     def _build_resolution(user, data: ResolutionInput, photos: list[str], now: datetime) -> Resolution:
          description = (data.description or "").strip()
          if not description:
               raise ValidationError("validation/resolution-description-required")
          completed_at = to_naive_utc(data.completed_at) if data.completed_at else now
          return Resolution(
               description=description,
               materials=clean_materials(data.materials),
               completed_at=completed_at,
               completed_by=user.id,
               photos=list(photos),
          )

     # ------------------------------------------------------------------
     # Mutations
     # ------------------------------------------------------------------

     @staticmethod
     def create_fault(
          db: Session,
          user,
          data: FaultCreate,
          photos: Iterable = (),
          now: Optional[datetime] = None,
     ) -> Fault:
          """
          Create a fault. Status defaults to open; creating it already
          resolved requires resolution data, validated like resolve_fault.
          """
          require_manage(user)
          now = now or utcnow()

          if not data.title.strip():
               raise ValidationError("validation/required-field")
          SiteService.get_site(db, data.site_id)
          FaultService._validate_assignee(db, data.assigned_to)

          if data.status == FaultStatus.RESOLVED and data.resolution is None:
               raise ValidationError("fault/resolution-invariant")
          if data.status != FaultStatus.RESOLVED and data.resolution is not None:
               raise ValidationError("fault/resolution-invariant")
          if data.resolution is not None:
               # validate before uploading anything
               FaultService._build_resolution(user, data.resolution, [], now)

          photo_urls = photo_service.upload_photos(photos, photo_service.FAULT_PHOTO_PREFIX)

          fault = Fault(
               title=data.title.strip(),
               description=data.description,
               location=data.location,
               site_id=data.site_id,
               priority=data.priority,
               status=data.status,
               created_by=user.id,
               assigned_to=data.assigned_to or None,
               photos=photo_urls,
               created_at=to_naive_utc(data.created_at) if data.created_at else now,
               updated_at=now,
          )
          if data.resolution is not None:
               fault.resolution = FaultService._build_resolution(user, data.resolution, [], now)

          db.add(fault)
          db.flush()
          logger.info("fault_created", fault_id=fault.id, site_id=fault.site_id, user_id=user.id)
          return fault

     @staticmethod
     def update_fault(
          db: Session,
          user,
          fault_id: str,
          changes: dict,
          now: Optional[datetime] = None,
     ) -> Fault:
          """
          General edit. Only keys present in changes are applied.

          The resolution invariant is enforced: the edit path can not mark a
          fault resolved (use resolve_fault), moving a resolved fault to any
          other status reopens it and drops its resolution, and the
          resolution timestamp can only be edited while a resolution exists.
          """
          require_manage(user)
          fault = FaultService.get_fault(db, user, fault_id)
          now = now or utcnow()

          if "title" in changes and not (changes["title"] or "").strip():
               raise ValidationError("validation/required-field")
          if changes.get("site_id") is not None:
               SiteService.get_site(db, changes["site_id"])
          if "assigned_to" in changes:
               FaultService._validate_assignee(db, changes["assigned_to"])

          new_status = changes.get("status") or fault.status
          completed_at = changes.get("resolution_completed_at")

          if new_status == FaultStatus.RESOLVED and fault.resolution is None:
               raise ValidationError("fault/resolution-invariant")
          if completed_at is not None and (fault.resolution is None or new_status != FaultStatus.RESOLVED):
               raise ValidationError("fault/resolution-invariant")

          for field in EDITABLE_FIELDS:
               if field not in changes:
                    continue
               value = changes[field]
               if field == "assigned_to":
                    fault.assigned_to = value or None
                    continue
               if value is None:
                    continue
               if field == "title":
                    value = value.strip()
               setattr(fault, field, value)

          if changes.get("created_at") is not None:
               fault.created_at = to_naive_utc(changes["created_at"])

          if new_status != FaultStatus.RESOLVED and fault.resolution is not None:
               photo_service.schedule_delete(db, fault.resolution.photos)
               fault.resolution = None
               logger.info("fault_reopened", fault_id=fault.id, status=new_status.value, user_id=user.id)
          if completed_at is not None:
               fault.resolution.completed_at = to_naive_utc(completed_at)

          fault.status = new_status
          fault.updated_at = now
          db.flush()
          logger.info("fault_updated", fault_id=fault.id, fields=sorted(changes), user_id=user.id)
          return fault

     @staticmethod
     def add_photos(db: Session, user, fault_id: str, photos: Iterable, now: Optional[datetime] = None) -> Fault:
          """Append uploaded photos to the fault's photo list."""
          require_manage(user)
          fault = FaultService.get_fault(db, user, fault_id)

          photo_urls = photo_service.upload_photos(photos, photo_service.FAULT_PHOTO_PREFIX)
          if photo_urls:
               fault.photos = [*(fault.photos or []), *photo_urls]
               fault.updated_at = now or utcnow()
               db.flush()
          return fault

     @staticmethod
     def remove_photo(db: Session, user, fault_id: str, index: int, now: Optional[datetime] = None) -> Fault:
          """Remove one photo reference by its position; the blob goes once the change commits."""
          require_manage(user)
          fault = FaultService.get_fault(db, user, fault_id)

          photos = list(fault.photos or [])
          if index < 0 or index >= len(photos):
               raise ValidationError("validation/photo-index")
          removed = photos.pop(index)
          photo_service.schedule_delete(db, [removed])
          fault.photos = photos
          fault.updated_at = now or utcnow()
          db.flush()
          return fault

     @staticmethod
     def resolve_fault(
          db: Session,
          user,
          fault_id: str,
          data: ResolutionInput,
          photos: Iterable = (),
          now: Optional[datetime] = None,
     ) -> Fault:
          """
          Move a non-resolved fault to resolved and attach its resolution.

          Raises:
               AuthorizationError: caller can not manage faults, or the fault
                    is already resolved
               ValidationError: blank resolution description
          """
          fault = FaultService.get_fault(db, user, fault_id)
          require_resolve(user, fault)
          now = now or utcnow()

          # validate before uploading anything
          FaultService._build_resolution(user, data, [], now)

          new_urls = photo_service.upload_photos(photos, photo_service.RESOLUTION_PHOTO_PREFIX)
          existing = list(fault.resolution.photos or []) if fault.resolution is not None else []

          fault.resolution = FaultService._build_resolution(user, data, existing + new_urls, now)
          fault.status = FaultStatus.RESOLVED
          fault.updated_at = now
          db.flush()
          logger.info("fault_resolved", fault_id=fault.id, user_id=user.id)
          return fault

     @staticmethod
     def update_resolution(
          db: Session,
          user,
          fault_id: str,
          data: ResolutionUpdate,
          photos: Iterable = (),
          now: Optional[datetime] = None,
     ) -> Fault:
          """Edit an existing resolution; the fault stays resolved."""
          require_manage(user)
          fault = FaultService.get_fault(db, user, fault_id)
          if fault.resolution is None:
               raise ValidationError("fault/no-resolution")

          if data.description is not None and not data.description.strip():
               raise ValidationError("validation/resolution-description-required")

          new_urls = photo_service.upload_photos(photos, photo_service.RESOLUTION_PHOTO_PREFIX)

          resolution = fault.resolution
          if data.description is not None:
               resolution.description = data.description.strip()
          if data.materials is not None:
               resolution.materials = clean_materials(data.materials)
          if data.completed_at is not None:
               resolution.completed_at = to_naive_utc(data.completed_at)
          if new_urls:
               resolution.photos = [*(resolution.photos or []), *new_urls]

          fault.updated_at = now or utcnow()
          db.flush()
          logger.info("resolution_updated", fault_id=fault.id, user_id=user.id)
          return fault

     @staticmethod
     def add_comment(
          db: Session,
          user,
          fault_id: str,
          message: str,
          now: Optional[datetime] = None,
     ) -> Comment:
          """
          Append one comment. Existing comments are never touched, and the
          new timestamp is never earlier than the previous comment's.
          """
          fault = FaultService.get_fault(db, user, fault_id)
          require_comment(user, fault)

          text = (message or "").strip()
          if not text:
               raise ValidationError("validation/comment-empty")

          now = now or utcnow()
          if fault.comments and fault.comments[-1].created_at > now:
               now = fault.comments[-1].created_at

          comment = Comment(
               author_id=user.id,
               author_name=user.name,
               message=text,
               created_at=now,
          )
          fault.comments.append(comment)
          fault.updated_at = now
          db.flush()
          logger.info("comment_added", fault_id=fault.id, comment_id=comment.id, user_id=user.id)
          return comment

     @staticmethod
     def delete_fault(db: Session, user, fault_id: str) -> None:
          """Irreversibly delete a fault with its comments and resolution."""
          require_manage(user)
          fault = FaultService.get_fault(db, user, fault_id)
          photo_service.schedule_delete(db, fault.photos)
          if fault.resolution is not None:
               photo_service.schedule_delete(db, fault.resolution.photos)
          db.delete(fault)
          db.flush()
          logger.info("fault_deleted", fault_id=fault_id, user_id=user.id)
