# tests/test_authorization.py
from types import SimpleNamespace

import pytest

from errors import AuthorizationError
from models import Fault, FaultStatus, Role
from services.authorization import (
     can_comment,
     can_delete_profile,
     can_manage,
     can_resolve,
     can_view,
     capability_flags,
     require_comment,
     require_profile_delete,
     require_resolve,
     resolve_capabilities,
     visible_site_ids,
)

STAFF = [Role.TECHNICIAN, Role.ENGINEER, Role.MANAGER]


def make_user(role, site_ids=None, user_id="u1"):
     return SimpleNamespace(id=user_id, role=role, site_ids=site_ids)


def make_fault(site_id="s1", status=FaultStatus.OPEN):
     return Fault(id="f1", site_id=site_id, status=status)


@pytest.mark.parametrize("role", STAFF)
def test_staff_can_manage_and_view_every_site(role):
     user = make_user(role)
     assert can_manage(user)
     assert visible_site_ids(user) is None
     assert can_view(user, make_fault(site_id="anywhere"))
     assert can_comment(user, make_fault(site_id="anywhere"))


def test_customer_sees_only_own_sites():
     customer = make_user(Role.CUSTOMER, ["s1"])
     assert not can_manage(customer)
     assert visible_site_ids(customer) == frozenset({"s1"})
     assert can_view(customer, make_fault("s1"))
     assert not can_view(customer, make_fault("s2"))


@pytest.mark.parametrize("site_ids", [None, []])
def test_customer_without_sites_sees_nothing(site_ids):
     customer = make_user(Role.CUSTOMER, site_ids)
     assert visible_site_ids(customer) == frozenset()
     assert not can_view(customer, make_fault("s1"))
     assert not can_comment(customer, make_fault("s1"))


def test_customer_comments_only_on_own_sites():
     customer = make_user(Role.CUSTOMER, ["s1"])
     assert can_comment(customer, make_fault("s1"))
     assert not can_comment(customer, make_fault("s2"))
     with pytest.raises(AuthorizationError) as exc:
          require_comment(customer, make_fault("s2"))
     assert exc.value.code == "comments/not-allowed"


@pytest.mark.parametrize("role", list(Role) + [None, "admin"])
def test_resolved_fault_can_never_be_resolved_again(role):
     user = make_user(role, ["s1"])
     assert not can_resolve(user, make_fault("s1", FaultStatus.RESOLVED))


def test_resolve_requires_manage():
     assert can_resolve(make_user(Role.TECHNICIAN), make_fault())
     assert not can_resolve(make_user(Role.CUSTOMER, ["s1"]), make_fault("s1"))
     assert not can_resolve(make_user(Role.GUARD), make_fault())


def test_require_resolve_reports_already_resolved():
     with pytest.raises(AuthorizationError) as exc:
          require_resolve(make_user(Role.ENGINEER), make_fault(status=FaultStatus.RESOLVED))
     assert exc.value.code == "fault/already-resolved"


@pytest.mark.parametrize("user", [None, SimpleNamespace(id="x", role=None, site_ids=None), make_user("admin")])
def test_unknown_role_has_no_capabilities(user):
     caps = resolve_capabilities(user)
     assert not any(caps.to_dict().values())
     flags = capability_flags(user, make_fault())
     assert not any(flags.values())


def test_guard_views_but_does_not_manage():
     guard = make_user(Role.GUARD)
     caps = resolve_capabilities(guard)
     assert caps.can_log_duty_checks
     assert caps.can_view_all_sites
     assert not caps.can_manage
     assert not can_comment(guard, make_fault())


def test_capability_flags_for_customer_on_own_site():
     flags = capability_flags(make_user(Role.CUSTOMER, ["s1"]), make_fault("s1"))
     assert flags == {
          "can_view": True,
          "can_edit": False,
          "can_delete": False,
          "can_comment": True,
          "can_resolve": False,
     }


def test_profile_deletion_is_manager_only_and_never_self():
     manager = make_user(Role.MANAGER, user_id="m1")
     assert can_delete_profile(manager, "other")
     assert not can_delete_profile(manager, "m1")
     assert not can_delete_profile(make_user(Role.TECHNICIAN), "other")

     with pytest.raises(AuthorizationError) as exc:
          require_profile_delete(manager, "m1")
     assert exc.value.code == "users/cannot-delete-self"
