# services/metrics_service.py
"""
Elapsed-time and aggregate statistics derived from fault records.

Durations are decomposed from whole hours: days = total_hours // 24 and
hours = total_hours % 24, never rounded independently.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from models import Fault, FaultStatus, Role
from models.user import ASSIGNABLE_ROLES
from utils.timeutils import utcnow

SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class Duration:
     total_hours: int
     days: int
     hours: int


def decompose_duration(start: datetime, end: datetime) -> Duration:
     """Whole hours between start and end; negative gaps count as zero."""
     seconds = max((end - start).total_seconds(), 0)
     total_hours = int(seconds // SECONDS_PER_HOUR)
     return Duration(total_hours=total_hours, days=total_hours // 24, hours=total_hours % 24)


def format_duration(duration: Duration) -> str:
     if duration.days == 0 and duration.hours == 0:
          return "1 saatten az"
     if duration.days == 0:
          return f"{duration.hours} saat"
     if duration.hours == 0:
          return f"{duration.days} gün"
     return f"{duration.days} gün {duration.hours} saat"


def elapsed_duration(fault: Fault, now: Optional[datetime] = None) -> Duration:
     """Creation to resolution for resolved faults, creation to now otherwise."""
     if fault.status == FaultStatus.RESOLVED and fault.resolution is not None:
          end = fault.resolution.completed_at
     else:
          end = now or utcnow()
     return decompose_duration(fault.created_at, end)


def resolution_hours(fault: Fault) -> Optional[float]:
     """Fractional hours from creation to completion, None when unresolved."""
     if fault.status != FaultStatus.RESOLVED or fault.resolution is None:
          return None
     seconds = (fault.resolution.completed_at - fault.created_at).total_seconds()
     return max(seconds, 0) / SECONDS_PER_HOUR


def _average(values: list[float]) -> float:
     return sum(values) / len(values) if values else 0.0


def summarize(faults: Iterable[Fault]) -> dict:
     """Counts by status, resolution rate (0..1) and mean resolution hours."""
     faults = list(faults)
     counts = {status: 0 for status in FaultStatus}
     for fault in faults:
          counts[FaultStatus(fault.status)] += 1

     total = len(faults)
     resolved = counts[FaultStatus.RESOLVED]
     hours = [h for h in (resolution_hours(f) for f in faults) if h is not None]

     return {
          "open": counts[FaultStatus.OPEN],
          "in_progress": counts[FaultStatus.IN_PROGRESS],
          "pending": counts[FaultStatus.PENDING],
          "resolved": resolved,
          "total": total,
          "resolution_rate": resolved / total if total else 0.0,
          "average_resolution_hours": _average(hours),
     }


def summarize_by_site(faults: Iterable[Fault], site_names: dict[str, str]) -> list[dict]:
     """
     Status counts per site, one row for every site in site_names (in its
     order), including sites with no faults. Faults on other sites are left out.
     """
     rows = {
          site_id: {
               "site_id": site_id,
               "site_name": name,
               "open": 0,
               "in_progress": 0,
               "pending": 0,
               "resolved": 0,
               "total": 0,
          }
          for site_id, name in site_names.items()
     }
     keys = {
          FaultStatus.OPEN: "open",
          FaultStatus.IN_PROGRESS: "in_progress",
          FaultStatus.PENDING: "pending",
          FaultStatus.RESOLVED: "resolved",
     }
     for fault in faults:
          row = rows.get(fault.site_id)
          if row is None:
               continue
          row[keys[FaultStatus(fault.status)]] += 1
          row["total"] += 1
     return list(rows.values())


def team_performance(users: Iterable, faults: Iterable[Fault]) -> dict:
     """
     Per technician/engineer: assigned and resolved counts, resolution rate
     and mean resolution hours over their resolved faults. Managers are kept
     out of the aggregation and listed on their own.
     """
     users = list(users)
     faults = list(faults)

     members = []
     for user in users:
          if user.role not in ASSIGNABLE_ROLES:
               continue
          assigned = [f for f in faults if f.assigned_to == user.id]
          hours = [h for h in (resolution_hours(f) for f in assigned) if h is not None]
          resolved_count = sum(1 for f in assigned if f.status == FaultStatus.RESOLVED)
          members.append({
               "user_id": user.id,
               "name": user.name,
               "role": user.role,
               "assigned_count": len(assigned),
               "resolved_count": resolved_count,
               "resolution_rate": resolved_count / len(assigned) if assigned else 0.0,
               "average_resolution_hours": _average(hours),
          })

     managers = [
          {"user_id": user.id, "name": user.name}
          for user in users
          if user.role == Role.MANAGER
     ]

     return {
          "members": members,
          "managers": managers,
          "average_resolution_rate": _average([m["resolution_rate"] for m in members]),
          "average_resolution_hours": _average([m["average_resolution_hours"] for m in members]),
     }
