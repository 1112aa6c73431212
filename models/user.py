# models/user.py
import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, String

from utils.timeutils import utcnow
from .base import Base, generate_id


class Role(str, enum.Enum):
     """Closed set of user roles."""
     TECHNICIAN = "technician"
     ENGINEER = "engineer"
     MANAGER = "manager"
     CUSTOMER = "customer"
     GUARD = "guard"


STAFF_ROLES = (Role.TECHNICIAN, Role.ENGINEER, Role.MANAGER)
ASSIGNABLE_ROLES = (Role.TECHNICIAN, Role.ENGINEER)


class User(Base):
     """
     User profile - authentication credential and profile in one row.
     Maps to the 'kullanicilar' table.

     site_ids is only populated for customers and is the sole basis of
     their visibility into fault records.
     """
     __tablename__ = "kullanicilar"

     id = Column(String(36), primary_key=True, default=generate_id)
     email = Column(String(255), unique=True, nullable=False, index=True)
     password_hash = Column(String(255), nullable=False)
     role = Column(
          Enum(Role, name="kullanici_rolu", values_callable=lambda e: [m.value for m in e]),
          nullable=False,
          index=True
     )
     name = Column(String(200), nullable=False)
     photo_url = Column(String(500), nullable=True)
     phone = Column(String(50), nullable=True)
     company = Column(String(255), nullable=True)
     address = Column(String(500), nullable=True)
     site_ids = Column(JSON, nullable=True)
     is_active = Column(Boolean, default=True, nullable=False)

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False)
     updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"

     @property
     def site_set(self) -> frozenset:
          return frozenset(self.site_ids or [])
