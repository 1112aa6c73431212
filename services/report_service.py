# services/report_service.py
import csv
import enum
import io
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from errors import ValidationError
from models import Fault, FaultPriority, FaultStatus
from utils.timeutils import end_of_day, local_to_utc, start_of_day, to_local, utcnow

CSV_HEADERS = ["Arıza No", "Başlık", "Saha", "Durum", "Öncelik", "Oluşturma Tarihi", "Çözüm Tarihi"]
UNKNOWN_SITE = "Bilinmeyen Saha"
NO_VALUE = "-"
TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M:%S"

STATUS_LABELS = {
     FaultStatus.OPEN: "Açık",
     FaultStatus.IN_PROGRESS: "Devam Ediyor",
     FaultStatus.PENDING: "Beklemede",
     FaultStatus.RESOLVED: "Çözüldü",
}

PRIORITY_LABELS = {
     FaultPriority.LOW: "Düşük",
     FaultPriority.MEDIUM: "Orta",
     FaultPriority.HIGH: "Yüksek",
     FaultPriority.URGENT: "Acil",
}


class ReportPeriod(str, enum.Enum):
     ALL = "all"
     TODAY = "today"
     WEEK = "week"
     MONTH = "month"
     CUSTOM = "custom"


def date_range_for(
     period: ReportPeriod,
     now: Optional[datetime] = None,
     start: Optional[date] = None,
     end: Optional[date] = None,
) -> Optional[tuple[datetime, datetime]]:
     """
     Creation-time window for a report period as naive UTC bounds, or None
     for all records. Calendar days are taken in the display timezone; every
     window except custom ends at the end of the current local day.
     """
     if period == ReportPeriod.ALL:
          return None

     local_now = to_local(now or utcnow()).replace(tzinfo=None)

     if period == ReportPeriod.CUSTOM:
          if start is None or end is None:
               raise ValidationError("validation/required-field")
          if start > end:
               raise ValidationError("validation/invalid-date-range")
          return (
               local_to_utc(start_of_day(datetime.combine(start, datetime.min.time()))),
               local_to_utc(end_of_day(datetime.combine(end, datetime.min.time()))),
          )

     if period == ReportPeriod.TODAY:
          range_start = start_of_day(local_now)
     elif period == ReportPeriod.WEEK:
          range_start = local_now - timedelta(days=7)
     else:
          range_start = local_now - timedelta(days=30)
     return local_to_utc(range_start), local_to_utc(end_of_day(local_now))


def _format_timestamp(value: datetime) -> str:
     return to_local(value).strftime(TIMESTAMP_FORMAT)


def fault_row(fault: Fault, site_names: dict[str, str]) -> list[str]:
     resolution = fault.resolution
     return [
          fault.short_id,
          fault.title,
          site_names.get(fault.site_id) or UNKNOWN_SITE,
          STATUS_LABELS[FaultStatus(fault.status)],
          PRIORITY_LABELS[FaultPriority(fault.priority)],
          _format_timestamp(fault.created_at),
          _format_timestamp(resolution.completed_at) if resolution is not None else NO_VALUE,
     ]


def export_faults_csv(faults: Iterable[Fault], site_names: dict[str, str]) -> str:
     """Header plus one fully quoted row per fault, rows joined with a bare newline."""
     buffer = io.StringIO()
     writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
     writer.writerow(CSV_HEADERS)
     for fault in faults:
          writer.writerow(fault_row(fault, site_names))
     return buffer.getvalue().rstrip("\n")


def report_filename(today: date) -> str:
     return f"ariza-raporu-{today.isoformat()}.csv"
