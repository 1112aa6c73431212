# tests/test_duty_checks.py
import io
from datetime import datetime
from types import SimpleNamespace

import pytest

from errors import AuthorizationError, NotFoundError, ValidationError
from models import DutyCheckStatus
from schemas.duty_check import DutyCheckCreate
from services import DutyCheckService
from services.duty_check_service import active_slot

# Istanbul is UTC+3: 05:10 UTC is 08:10 local
IN_MORNING_SLOT = datetime(2026, 6, 1, 5, 10)
BETWEEN_SLOTS = datetime(2026, 6, 1, 7, 0)


@pytest.mark.parametrize(
     "hour, minute, expected",
     [
          (8, 0, "08:00"),
          (8, 30, "08:00"),
          (8, 31, None),
          (11, 45, "12:00"),
          (18, 20, "18:00"),
          (0, 10, "00:00"),
          (2, 40, "03:00"),
          (6, 50, "07:00"),
          (23, 50, None),
          (15, 0, None),
     ],
)
def test_active_slot(hour, minute, expected):
     assert active_slot(datetime(2026, 6, 1, hour, minute)) == expected


def test_seven_thirty_matches_first_listed_slot():
     # 07:30 is within reach of both 07:00 and 08:00; day slots are checked first
     assert active_slot(datetime(2026, 6, 1, 7, 30)) == "08:00"
     assert active_slot(datetime(2026, 6, 1, 7, 20)) == "07:00"


def check_data(site, **overrides):
     fields = dict(site_id=site.id, latitude=37.87, longitude=32.48, description=" Çit sağlam ")
     fields.update(overrides)
     return DutyCheckCreate(**fields)


def test_guard_logs_check_in_slot(db, seed, uploads):
     photo = SimpleNamespace(filename="cit.jpg", file=io.BytesIO(b"jpeg"), content_type="image/jpeg")
     check = DutyCheckService.create_duty_check(
          db, seed.guard, check_data(seed.site_one, status=DutyCheckStatus.ABNORMAL), [photo], now=IN_MORNING_SLOT
     )

     assert check.slot == "08:00"
     assert check.guard_name == "Hasan Bekçi"
     assert check.site_name == "Konya GES"
     assert check.status == DutyCheckStatus.ABNORMAL
     assert check.description == "Çit sağlam"
     assert check.checked_at == IN_MORNING_SLOT
     assert uploads.uploaded[0].startswith("kontroller/")


def test_check_outside_slot_is_rejected(db, seed, uploads):
     with pytest.raises(ValidationError) as exc:
          DutyCheckService.create_duty_check(db, seed.guard, check_data(seed.site_one), now=BETWEEN_SLOTS)
     assert exc.value.code == "duty/outside-slot"


def test_only_guards_log_checks(db, seed, uploads):
     for user in (seed.manager, seed.technician, seed.customer):
          with pytest.raises(AuthorizationError):
               DutyCheckService.create_duty_check(db, user, check_data(seed.site_one), now=IN_MORNING_SLOT)


def test_unknown_site_rejected(db, seed, uploads):
     with pytest.raises(NotFoundError):
          DutyCheckService.create_duty_check(
               db, seed.guard, check_data(SimpleNamespace(id="missing")), now=IN_MORNING_SLOT
          )


def test_listing_scope(db, seed, uploads):
     DutyCheckService.create_duty_check(db, seed.guard, check_data(seed.site_one), now=IN_MORNING_SLOT)
     DutyCheckService.create_duty_check(db, seed.guard, check_data(seed.site_two), now=IN_MORNING_SLOT)

     assert len(DutyCheckService.list_duty_checks(db, seed.manager)) == 2
     assert len(DutyCheckService.list_duty_checks(db, seed.guard, site_id=seed.site_two.id)) == 1
     with pytest.raises(AuthorizationError):
          DutyCheckService.list_duty_checks(db, seed.customer)
