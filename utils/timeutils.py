# utils/timeutils.py
"""
Timestamps are stored as naive UTC. Display and calendar-day logic
(report periods, duty-check slots) use DISPLAY_TIMEZONE.
"""
from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

from config import DISPLAY_TIMEZONE

LOCAL_TZ = ZoneInfo(DISPLAY_TIMEZONE)


def utcnow() -> datetime:
     """Current UTC time as a naive datetime (the form stored in the database)."""
     return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
     """
     Normalize a client-supplied timestamp to naive UTC. Aware values are
     converted; naive values are wall-clock time in DISPLAY_TIMEZONE.
     """
     if value.tzinfo is None:
          return local_to_utc(value)
     return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_local(value: datetime) -> datetime:
     """Naive UTC -> aware local time."""
     return value.replace(tzinfo=timezone.utc).astimezone(LOCAL_TZ)


def local_to_utc(value: datetime) -> datetime:
     """Naive local wall-clock time -> naive UTC."""
     return value.replace(tzinfo=LOCAL_TZ).astimezone(timezone.utc).replace(tzinfo=None)


def start_of_day(value: datetime) -> datetime:
     return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
     return datetime.combine(value.date(), time.max)
