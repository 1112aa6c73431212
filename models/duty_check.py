# models/duty_check.py
import enum

from sqlalchemy import JSON, Column, DateTime, Enum, Float, ForeignKey, String, Text

from utils.timeutils import utcnow
from .base import Base, generate_id


class DutyCheckStatus(str, enum.Enum):
     NORMAL = "normal"
     ABNORMAL = "abnormal"


class DutyCheck(Base):
     """
     Guard patrol record ("kontrol"). Independent of the fault lifecycle.
     Guard and site names are denormalized at write time.
     """
     __tablename__ = "kontroller"

     id = Column(String(36), primary_key=True, default=generate_id)
     guard_id = Column(String(36), nullable=False, index=True)
     guard_name = Column(String(200), nullable=False)
     site_id = Column(String(36), ForeignKey("sahalar.id", ondelete="RESTRICT"), nullable=False, index=True)
     site_name = Column(String(255), nullable=False)
     checked_at = Column(DateTime, default=utcnow, nullable=False, index=True)
     slot = Column(String(5), nullable=False)  # "HH:MM"
     status = Column(
          Enum(DutyCheckStatus, name="kontrol_durumu", values_callable=lambda e: [m.value for m in e]),
          default=DutyCheckStatus.NORMAL,
          nullable=False
     )
     description = Column(Text, nullable=False, default="")
     photos = Column(JSON, nullable=False, default=list)
     latitude = Column(Float, nullable=False)
     longitude = Column(Float, nullable=False)

     def __repr__(self):
          return f"<DutyCheck(id={self.id}, site_id={self.site_id}, slot='{self.slot}')>"
