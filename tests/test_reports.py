# tests/test_reports.py
import csv
import io
from datetime import date, datetime, timedelta

import pytest

from errors import ValidationError
from models import Fault, FaultPriority, FaultStatus, Resolution
from services.report_service import (
     CSV_HEADERS,
     ReportPeriod,
     date_range_for,
     export_faults_csv,
     report_filename,
)

CREATED = datetime(2026, 5, 1, 8, 0, 0)  # 11:00 in Istanbul


def make_fault(fault_id, site_id="s1", status=FaultStatus.OPEN, resolved_after=None, title="Panel"):
     item = Fault(
          id=fault_id,
          title=title,
          site_id=site_id,
          status=status,
          priority=FaultPriority.HIGH,
          created_at=CREATED,
     )
     if resolved_after is not None:
          item.resolution = Resolution(description="x", completed_at=CREATED + resolved_after, completed_by="u")
     return item


def parse(content):
     return list(csv.reader(io.StringIO(content)))


def test_export_has_header_plus_one_line_per_fault():
     faults = [
          make_fault("aaaaaaaa-0000-0000-0000-00000000abc1"),
          make_fault("aaaaaaaa-0000-0000-0000-00000000abc2", status=FaultStatus.RESOLVED, resolved_after=timedelta(hours=2)),
          make_fault("aaaaaaaa-0000-0000-0000-00000000abc3", site_id="gone"),
     ]

     content = export_faults_csv(faults, {"s1": "Konya GES"})

     lines = content.split("\n")
     assert len(lines) == 4
     rows = parse(content)
     assert rows[0] == CSV_HEADERS
     assert rows[1] == ["00ABC1", "Panel", "Konya GES", "Açık", "Yüksek", "01.05.2026 11:00:00", "-"]
     assert rows[2][3] == "Çözüldü"
     assert rows[2][6] == "01.05.2026 13:00:00"
     assert rows[3][2] == "Bilinmeyen Saha"


def test_every_field_is_quoted():
     content = export_faults_csv([make_fault("x" * 36, title='Panel "B", çatı')], {"s1": "Konya"})
     header, row = content.split("\n")
     assert header.startswith('"Arıza No","Başlık"')
     assert row.startswith('"XXXXXX","Panel ""B"", çatı"')


def test_empty_export_is_header_only():
     assert export_faults_csv([], {}).count("\n") == 0


def test_report_filename():
     assert report_filename(date(2026, 10, 18)) == "ariza-raporu-2026-10-18.csv"


def test_all_period_has_no_window():
     assert date_range_for(ReportPeriod.ALL) is None


def test_today_window_uses_local_day():
     now = datetime(2026, 5, 1, 22, 30)  # 01:30 on May 2nd in Istanbul
     start, end = date_range_for(ReportPeriod.TODAY, now)
     assert start == datetime(2026, 5, 1, 21, 0)
     assert end.date() == date(2026, 5, 2)
     assert end > now


def test_week_and_month_windows():
     now = datetime(2026, 5, 20, 9, 0)
     week_start, week_end = date_range_for(ReportPeriod.WEEK, now)
     month_start, _ = date_range_for(ReportPeriod.MONTH, now)
     assert week_start == now - timedelta(days=7)
     assert month_start == now - timedelta(days=30)
     assert week_end > now


def test_custom_window_covers_whole_days():
     start, end = date_range_for(ReportPeriod.CUSTOM, start=date(2026, 5, 1), end=date(2026, 5, 3))
     assert start == datetime(2026, 4, 30, 21, 0)
     assert end.date() == date(2026, 5, 3)
     assert end.hour == 20


def test_custom_window_validation():
     with pytest.raises(ValidationError):
          date_range_for(ReportPeriod.CUSTOM, start=date(2026, 5, 1))
     with pytest.raises(ValidationError) as exc:
          date_range_for(ReportPeriod.CUSTOM, start=date(2026, 5, 3), end=date(2026, 5, 1))
     assert exc.value.code == "validation/invalid-date-range"
