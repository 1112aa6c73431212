# models/fault.py
import enum

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from utils.timeutils import utcnow
from .base import Base, generate_id


class FaultStatus(str, enum.Enum):
     """Lifecycle states of a fault record."""
     OPEN = "open"
     IN_PROGRESS = "in-progress"
     PENDING = "pending"
     RESOLVED = "resolved"


class FaultPriority(str, enum.Enum):
     LOW = "low"
     MEDIUM = "medium"
     HIGH = "high"
     URGENT = "urgent"


def _enum_values(enum_cls):
     return [member.value for member in enum_cls]


class Fault(Base):
     """
     Fault model ("arıza") - a reported equipment malfunction on a site.

     User references (created_by, assigned_to) are plain ids, the same way
     the original document store kept them; deleting a profile does not
     cascade into fault history.
     """
     __tablename__ = "arizalar"

     id = Column(String(36), primary_key=True, default=generate_id)
     title = Column(String(255), nullable=False)
     description = Column(Text, nullable=False, default="")
     location = Column(String(500), nullable=False, default="")
     site_id = Column(
          String(36),
          ForeignKey("sahalar.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )
     status = Column(
          Enum(FaultStatus, name="ariza_durumu", values_callable=_enum_values),
          default=FaultStatus.OPEN,
          nullable=False,
          index=True
     )
     priority = Column(
          Enum(FaultPriority, name="ariza_onceligi", values_callable=_enum_values),
          default=FaultPriority.MEDIUM,
          nullable=False
     )
     created_by = Column(String(36), nullable=False)
     assigned_to = Column(String(36), nullable=True, index=True)
     photos = Column(JSON, nullable=False, default=list)

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
     updated_at = Column(DateTime, default=utcnow, nullable=False)

     # Relationships
     site = relationship("Site")
     comments = relationship(
          "Comment",
          back_populates="fault",
          order_by="Comment.seq",
          cascade="all, delete-orphan"
     )
     resolution = relationship(
          "Resolution",
          back_populates="fault",
          uselist=False,
          cascade="all, delete-orphan"
     )

     def __repr__(self):
          return f"<Fault(id={self.id}, title='{self.title}', status='{self.status.value}')>"

     @property
     def short_id(self) -> str:
          return self.id[-6:].upper()

     @property
     def is_resolved(self) -> bool:
          return self.status == FaultStatus.RESOLVED


class Comment(Base):
     """
     Comment on a fault. Append-only: there is no edit or delete path.
     seq keeps insertion order; id is the public identifier.
     """
     __tablename__ = "ariza_yorumlari"

     seq = Column(Integer, primary_key=True, autoincrement=True)
     id = Column(String(36), unique=True, nullable=False, default=generate_id)
     fault_id = Column(
          String(36),
          ForeignKey("arizalar.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     author_id = Column(String(36), nullable=False)
     author_name = Column(String(200), nullable=False)  # denormalized at write time
     message = Column(Text, nullable=False)
     created_at = Column(DateTime, default=utcnow, nullable=False)

     fault = relationship("Fault", back_populates="comments")

     def __repr__(self):
          return f"<Comment(id={self.id}, fault_id={self.fault_id})>"


class Resolution(Base):
     """
     Resolution of a fault ("çözüm"). Exists if and only if the fault is resolved.
     """
     __tablename__ = "ariza_cozumleri"

     id = Column(Integer, primary_key=True, autoincrement=True)
     fault_id = Column(
          String(36),
          ForeignKey("arizalar.id", ondelete="CASCADE"),
          nullable=False,
          unique=True,
          index=True
     )
     description = Column(Text, nullable=False)
     materials = Column(JSON, nullable=False, default=list)
     completed_at = Column(DateTime, nullable=False)
     completed_by = Column(String(36), nullable=False)
     photos = Column(JSON, nullable=False, default=list)

     fault = relationship("Fault", back_populates="resolution")

     def __repr__(self):
          return f"<Resolution(fault_id={self.fault_id}, completed_at={self.completed_at})>"
