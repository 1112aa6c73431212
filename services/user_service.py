# services/user_service.py
"""
User Service - team members, customers and profile management.

A profile row carries its own credential (email + password hash), so
creating a user writes both in one INSERT.
"""
from typing import Optional
from urllib.parse import quote_plus

import structlog
from sqlalchemy.orm import Session

from config import ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD, MIN_PASSWORD_LENGTH
from errors import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from models import Role, User
from models.user import ASSIGNABLE_ROLES, STAFF_ROLES
from schemas.user import CustomerCreate, TeamMemberCreate, UserUpdate
from services.auth_service import hash_password, normalize_email, verify_password
from services.authorization import require_manager, require_profile_delete, resolve_capabilities
from services.site_service import SiteService
from utils.timeutils import utcnow

logger = structlog.get_logger(__name__)

TEAM_MEMBER_ROLES = (Role.TECHNICIAN, Role.ENGINEER, Role.MANAGER, Role.GUARD)
SELF_EDITABLE_FIELDS = ("name", "phone", "photo_url", "company", "address")


def default_avatar_url(name: str) -> str:
     return f"https://ui-avatars.com/api/?name={quote_plus(name)}&background=random"


def validate_password(password: str, confirmation: Optional[str]) -> None:
     if password != confirmation:
          raise ValidationError("validation/password-mismatch")
     if len(password or "") < MIN_PASSWORD_LENGTH:
          raise ValidationError("validation/password-too-short")


class UserService:
     """Service class for user profile operations."""

     @staticmethod
     def get_user(db: Session, user_id: str) -> User:
          user = db.get(User, user_id)
          if user is None:
               raise NotFoundError("auth/user-not-found")
          return user

     @staticmethod
     def _ensure_email_free(db: Session, email: str) -> None:
          if db.query(User).filter(User.email == email).first() is not None:
               raise ConflictError("auth/email-already-in-use")

     @staticmethod
     def _validate_sites(db: Session, site_ids: list[str]) -> list[str]:
          unique = list(dict.fromkeys(s for s in site_ids if s))
          if not unique:
               raise ValidationError("validation/site-required")
          for site_id in unique:
               SiteService.get_site(db, site_id)
          return unique

     @staticmethod
     def _create(db: Session, **fields) -> User:
          user = User(**fields)
          if not user.photo_url:
               user.photo_url = default_avatar_url(user.name)
          db.add(user)
          db.flush()
          logger.info("user_created", user_id=user.id, role=user.role.value)
          return user

     @staticmethod
     def create_team_member(db: Session, actor, data: TeamMemberCreate) -> User:
          """Create a technician, engineer, manager or guard profile with its credential."""
          require_manager(actor)
          if data.role not in TEAM_MEMBER_ROLES:
               raise ValidationError("validation/invalid-role")
          validate_password(data.password, data.password_confirm)

          email = normalize_email(data.email)
          UserService._ensure_email_free(db, email)

          return UserService._create(
               db,
               email=email,
               password_hash=hash_password(data.password),
               role=data.role,
               name=data.name.strip(),
               phone=data.phone,
               photo_url=data.photo_url,
          )

     @staticmethod
     def create_customer(db: Session, actor, data: CustomerCreate) -> User:
          """Create a customer scoped to at least one existing site."""
          require_manager(actor)
          if data.password != data.password_confirm:
               raise ValidationError("validation/password-mismatch")
          site_ids = UserService._validate_sites(db, data.site_ids)
          if len(data.password) < MIN_PASSWORD_LENGTH:
               raise ValidationError("validation/password-too-short")

          email = normalize_email(data.email)
          UserService._ensure_email_free(db, email)

          return UserService._create(
               db,
               email=email,
               password_hash=hash_password(data.password),
               role=Role.CUSTOMER,
               name=data.name.strip(),
               company=data.company,
               phone=data.phone,
               address=data.address,
               site_ids=site_ids,
          )

     @staticmethod
     def update_profile(db: Session, actor, user_id: str, data: UserUpdate) -> User:
          """
          Managers may edit any profile field. Other users may only edit the
          self-editable fields of their own profile, and must confirm their
          current password to change it.
          """
          target = UserService.get_user(db, user_id)
          changes = data.model_dump(exclude_unset=True)
          is_manager = resolve_capabilities(actor).can_manage_users
          is_self = getattr(actor, "id", None) == target.id

          if not is_manager:
               if not is_self:
                    raise AuthorizationError()
               restricted = {"role", "site_ids", "is_active"} & changes.keys()
               if restricted:
                    raise AuthorizationError("users/manager-required")

          for field in SELF_EDITABLE_FIELDS:
               if field in changes and changes[field] is not None:
                    value = changes[field].strip() if field == "name" else changes[field]
                    setattr(target, field, value)

          if is_manager:
               new_role = changes.get("role") or target.role
               if new_role == Role.CUSTOMER:
                    site_ids = changes.get("site_ids")
                    if site_ids is None:
                         site_ids = target.site_ids or []
                    target.site_ids = UserService._validate_sites(db, site_ids)
               else:
                    target.site_ids = None
               target.role = new_role
               if changes.get("is_active") is not None:
                    target.is_active = changes["is_active"]

          if changes.get("password") is not None:
               if is_self and not verify_password(changes.get("current_password") or "", target.password_hash):
                    raise AuthenticationError("auth/wrong-password")
               validate_password(changes["password"], changes.get("password_confirm"))
               target.password_hash = hash_password(changes["password"])
               logger.info("password_changed", user_id=target.id, actor_id=actor.id)

          target.updated_at = utcnow()
          db.flush()
          logger.info("user_updated", user_id=target.id, actor_id=actor.id, fields=sorted(changes))
          return target

     @staticmethod
     def delete_profile(db: Session, actor, user_id: str) -> None:
          """Managers only, and never their own profile."""
          require_profile_delete(actor, user_id)
          target = UserService.get_user(db, user_id)
          db.delete(target)
          db.flush()
          logger.info("user_deleted", user_id=user_id, actor_id=actor.id)

     @staticmethod
     def list_team(db: Session, include_guards: bool = False) -> list[User]:
          roles = list(STAFF_ROLES) + ([Role.GUARD] if include_guards else [])
          return db.query(User).filter(User.role.in_(roles)).order_by(User.name).all()

     @staticmethod
     def list_customers(db: Session) -> list[User]:
          return db.query(User).filter(User.role == Role.CUSTOMER).order_by(User.name).all()

     @staticmethod
     def list_assignable(db: Session) -> list[User]:
          return (
               db.query(User)
               .filter(User.role.in_(ASSIGNABLE_ROLES), User.is_active.is_(True))
               .order_by(User.name)
               .all()
          )

     @staticmethod
     def ensure_admin_user(db: Session) -> Optional[User]:
          """Create the configured bootstrap manager if it does not exist yet."""
          if not ADMIN_EMAIL or not ADMIN_PASSWORD:
               return None

          email = normalize_email(ADMIN_EMAIL)
          existing = db.query(User).filter(User.email == email).first()
          if existing is not None:
               if existing.role != Role.MANAGER:
                    logger.warning("admin_email_taken", user_id=existing.id, role=existing.role.value)
               return existing

          return UserService._create(
               db,
               email=email,
               password_hash=hash_password(ADMIN_PASSWORD),
               role=Role.MANAGER,
               name=ADMIN_NAME,
          )
