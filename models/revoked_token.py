# models/revoked_token.py
from sqlalchemy import Column, DateTime, String

from utils.timeutils import utcnow
from .base import Base


class RevokedToken(Base):
     """Token ids invalidated by logout. A revoked token can never open a session again."""
     __tablename__ = "iptal_edilen_oturumlar"

     jti = Column(String(36), primary_key=True)
     user_id = Column(String(36), nullable=False, index=True)
     expires_at = Column(DateTime, nullable=False)
     revoked_at = Column(DateTime, default=utcnow, nullable=False)
