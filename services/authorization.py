# services/authorization.py
"""
Authorization policy - capability flags derived from a user's role.

Every predicate here is pure and total: a missing user or an unknown role
yields False for every capability. Routers read the flags to shape
responses, and the services call the require_* helpers again before any
write, so the check is enforced at the data-access layer as well.
"""
from dataclasses import asdict, dataclass
from typing import Optional

from errors import AuthorizationError
from models.fault import Fault, FaultStatus
from models.user import Role


@dataclass(frozen=True)
class Capabilities:
     """Role-level capability set."""
     can_manage: bool = False
     can_view_all_sites: bool = False
     can_manage_users: bool = False
     can_log_duty_checks: bool = False

     def to_dict(self) -> dict:
          return asdict(self)


NO_CAPABILITIES = Capabilities()

ROLE_CAPABILITIES = {
     Role.TECHNICIAN: Capabilities(can_manage=True, can_view_all_sites=True),
     Role.ENGINEER: Capabilities(can_manage=True, can_view_all_sites=True),
     Role.MANAGER: Capabilities(can_manage=True, can_view_all_sites=True, can_manage_users=True),
     Role.CUSTOMER: Capabilities(),
     Role.GUARD: Capabilities(can_view_all_sites=True, can_log_duty_checks=True),
}


def _role_of(user) -> Optional[Role]:
     raw = getattr(user, "role", None) if user is not None else None
     if raw is None:
          return None
     try:
          return Role(raw)
     except ValueError:
          return None


def resolve_capabilities(user) -> Capabilities:
     """Map a user (or None) to its capability set."""
     role = _role_of(user)
     if role is None:
          return NO_CAPABILITIES
     return ROLE_CAPABILITIES.get(role, NO_CAPABILITIES)


def _site_set(user) -> frozenset:
     return frozenset(getattr(user, "site_ids", None) or [])


def is_customer(user) -> bool:
     return _role_of(user) == Role.CUSTOMER


def can_manage(user) -> bool:
     """Create, edit and delete faults; see every site and the creator column."""
     return resolve_capabilities(user).can_manage


def visible_site_ids(user) -> Optional[frozenset]:
     """
     Sites whose faults the user may see.

     None means every site. Customers get their own site set, which may be
     empty (they then see nothing). Unknown roles get an empty set.
     """
     if resolve_capabilities(user).can_view_all_sites:
          return None
     if is_customer(user):
          return _site_set(user)
     return frozenset()


def can_view(user, fault: Fault) -> bool:
     allowed = visible_site_ids(user)
     if allowed is None:
          return True
     return fault.site_id in allowed


def can_comment(user, fault: Fault) -> bool:
     if can_manage(user):
          return True
     return is_customer(user) and fault.site_id in _site_set(user)


def can_resolve(user, fault: Fault) -> bool:
     """A resolved fault can not go through the resolve action again."""
     return can_manage(user) and fault.status != FaultStatus.RESOLVED


def can_delete_profile(user, target_user_id: str) -> bool:
     """Only managers delete profiles, and never their own."""
     if not resolve_capabilities(user).can_manage_users:
          return False
     return getattr(user, "id", None) != target_user_id


def capability_flags(user, fault: Fault) -> dict:
     manage = can_manage(user)
     return {
          "can_view": can_view(user, fault),
          "can_edit": manage,
          "can_delete": manage,
          "can_comment": can_comment(user, fault),
          "can_resolve": can_resolve(user, fault),
     }


# ---------------------------------------------------------------------------
# Enforcement helpers used by the services
# ---------------------------------------------------------------------------

def require_manage(user) -> None:
     if not can_manage(user):
          raise AuthorizationError()


def require_view(user, fault: Fault) -> None:
     if not can_view(user, fault):
          raise AuthorizationError()


def require_comment(user, fault: Fault) -> None:
     if not can_comment(user, fault):
          raise AuthorizationError("comments/not-allowed")


def require_resolve(user, fault: Fault) -> None:
     require_manage(user)
     if fault.status == FaultStatus.RESOLVED:
          raise AuthorizationError("fault/already-resolved")


def require_manager(user) -> None:
     if not resolve_capabilities(user).can_manage_users:
          raise AuthorizationError("users/manager-required")


def require_profile_delete(user, target_user_id: str) -> None:
     require_manager(user)
     if getattr(user, "id", None) == target_user_id:
          raise AuthorizationError("users/cannot-delete-self")


def require_duty_logging(user) -> None:
     if not resolve_capabilities(user).can_log_duty_checks:
          raise AuthorizationError()
