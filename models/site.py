# models/site.py
from sqlalchemy import Column, DateTime, String

from utils.timeutils import utcnow
from .base import Base, generate_id


class Site(Base):
     """
     Site model - a physical solar installation.
     Reference data: faults point at a site, customers are scoped to sites.
     """
     __tablename__ = "sahalar"

     id = Column(String(36), primary_key=True, default=generate_id)
     name = Column(String(255), nullable=False, index=True)
     created_at = Column(DateTime, default=utcnow, nullable=False)

     def __repr__(self):
          return f"<Site(id={self.id}, name='{self.name}')>"
